"""Monte-Carlo equity estimation for Pot-Limit Omaha hands."""

__version__ = "0.1.0"
