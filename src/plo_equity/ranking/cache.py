"""Read-only hand rank cache."""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from plo_equity.exceptions import InvalidHandError, RankTableError
from plo_equity.models.card import Card
from plo_equity.ranking.classifier import hand_label, hand_value
from plo_equity.ranking.table import RankEntry, generate_rank_table, read_rank_table, table_key

logger = logging.getLogger(__name__)


class RankCache:
    """Maps any five-card hand to its strength rank (1 = best).

    The entries are frozen at construction, so lookups from many threads
    need no locking.
    """

    def __init__(self, entries: Mapping[str, RankEntry]):
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RankCache":
        return cls(read_rank_table(path))

    @classmethod
    def generate(cls) -> "RankCache":
        """Build the table in memory instead of loading it."""
        return cls(generate_rank_table())

    def _entry(self, cards: Sequence[Card]) -> RankEntry:
        if len(cards) != 5:
            raise InvalidHandError(f"Must have exactly 5 cards for hand evaluation, got {len(cards)}")
        key = table_key(cards)
        try:
            return self._entries[key]
        except KeyError:
            raise RankTableError(f"Hand not found in rank table: {key}") from None

    def rank(self, cards: Sequence[Card]) -> int:
        """Strength rank of five distinct cards; lower is stronger.

        Raises:
            InvalidHandError: if not exactly five distinct cards.
            RankTableError: if the table has no entry for the hand.
        """
        return self._entry(cards).rank

    def hand_type(self, cards: Sequence[Card]) -> str:
        """Label stored with the hand, e.g. 'Full House'."""
        entry = self._entry(cards)
        return entry.hand_type or hand_label(hand_value(cards))

    @property
    def entries(self) -> Mapping[str, RankEntry]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"RankCache(entries={len(self._entries)})"
