"""Exhaustive five-card hand classification."""

from collections import Counter
from enum import IntEnum
from typing import List, Sequence, Tuple

from plo_equity.exceptions import InvalidHandError
from plo_equity.models.card import Card


class HandCategory(IntEnum):
    """Hand categories from worst to best."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


HandValue = Tuple[HandCategory, Tuple[int, ...]]


def _straight_high(values: List[int]) -> int:
    """High card of a straight over five distinct descending values, else 0."""
    if values[0] - values[4] == 4:
        return values[0]
    # A-2-3-4-5 plays as a five-high straight
    if values == [14, 5, 4, 3, 2]:
        return 5
    return 0


def hand_value(cards: Sequence[Card]) -> HandValue:
    """Evaluate exactly five cards.

    Args:
        cards: Five distinct cards.

    Returns:
        Tuple of (HandCategory, tie-break values). Comparing two results
        with ``>`` orders hands by strength.
    """
    if len(cards) != 5:
        raise InvalidHandError(f"Hand evaluation requires exactly 5 cards, got {len(cards)}")

    values = sorted((c.value for c in cards), reverse=True)
    is_flush = len({c.suit for c in cards}) == 1

    counts = Counter(values)
    # rank values ordered by multiplicity, then by rank
    grouped = sorted(counts, key=lambda v: (counts[v], v), reverse=True)
    shape = [counts[v] for v in grouped]

    if len(counts) == 5:
        high = _straight_high(values)
        if is_flush and high:
            return HandCategory.STRAIGHT_FLUSH, (high,)
        if is_flush:
            return HandCategory.FLUSH, tuple(values)
        if high:
            return HandCategory.STRAIGHT, (high,)
        return HandCategory.HIGH_CARD, tuple(values)

    if shape == [4, 1]:
        return HandCategory.FOUR_OF_A_KIND, tuple(grouped)
    if shape == [3, 2]:
        return HandCategory.FULL_HOUSE, tuple(grouped)
    if shape == [3, 1, 1]:
        return HandCategory.THREE_OF_A_KIND, tuple(grouped)
    if shape == [2, 2, 1]:
        return HandCategory.TWO_PAIR, tuple(grouped)
    return HandCategory.ONE_PAIR, tuple(grouped)


def hand_label(value: HandValue) -> str:
    """Human-readable name of an evaluated hand."""
    category, kickers = value
    if category == HandCategory.STRAIGHT_FLUSH and kickers[0] == 14:
        return "Royal Flush"
    return category.display_name
