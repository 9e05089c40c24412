"""Data models for PLO equity estimation."""

from plo_equity.models.card import (
    Card, Rank, Suit, CANONICAL_SUITS,
    canonical_sort_key, format_cards, full_deck, parse_cards, parse_hand,
)
from plo_equity.models.simulation import (
    Z_95, StoppingCriteria, SimulationStats, SimulationResult
)

__all__ = [
    "Card", "Rank", "Suit", "CANONICAL_SUITS",
    "canonical_sort_key", "format_cards", "full_deck", "parse_cards", "parse_hand",
    "Z_95", "StoppingCriteria", "SimulationStats", "SimulationResult",
]
