"""Exception hierarchy for equity queries and the rank table."""


class PLOEquityError(Exception):
    """Base class for all errors raised by plo_equity."""


class InvalidHandError(PLOEquityError, ValueError):
    """A hand is malformed: wrong length, bad card token or a repeated card."""


class CardConflictError(InvalidHandError):
    """The same card was given to more than one player."""


class RankTableError(PLOEquityError, RuntimeError):
    """The rank table is corrupt or incomplete.

    Raised when a lookup key is missing or a table file cannot be read.
    This is never an input problem and is not recoverable at query time.
    """
