"""Deck management for equity simulation."""

import random
from typing import Iterable, List, Optional

from plo_equity.models.card import Card, full_deck


class Deck:
    """A standard 52-card deck, less any cards already in known hands."""

    def __init__(self, exclude: Iterable[Card] = (), rng: Optional[random.Random] = None):
        """Initialize a deck without the excluded cards.

        Args:
            exclude: Cards held by players, never dealt.
            rng: Random source; each worker thread passes its own.
        """
        excluded = set(exclude)
        self._stub: List[Card] = [c for c in full_deck() if c not in excluded]
        self.rng = rng or random.Random()
        self.cards: List[Card] = []
        self._reset()

    def _reset(self):
        """Restore every card that is not excluded."""
        self.cards = list(self._stub)

    def shuffle(self):
        """Shuffle the deck in place."""
        self.rng.shuffle(self.cards)

    def deal(self, count: int = 1) -> List[Card]:
        """Deal cards from the top of the deck.

        Args:
            count: Number of cards to deal.

        Returns:
            List of dealt cards.
        """
        if count > len(self.cards):
            raise ValueError(f"Not enough cards in deck. Need {count}, have {len(self.cards)}")

        dealt = self.cards[:count]
        self.cards = self.cards[count:]
        return dealt

    def reset(self):
        """Reset and shuffle the deck."""
        self._reset()
        self.shuffle()

    @property
    def remaining(self) -> int:
        """Get the number of remaining cards."""
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Deck(remaining={len(self.cards)})"
