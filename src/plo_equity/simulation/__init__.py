"""Equity simulation module."""

from plo_equity.simulation.deck import Deck
from plo_equity.simulation.evaluator import PLOHandEvaluator
from plo_equity.simulation.engine import EquityEngine, validate_hands
from plo_equity.simulation.ranker import HandRanking, StartingHandRanker, write_rankings

__all__ = [
    "Deck", "PLOHandEvaluator",
    "EquityEngine", "validate_hands",
    "HandRanking", "StartingHandRanker", "write_rankings",
]
