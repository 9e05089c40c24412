"""Offline rank table: generation and CSV storage.

The table maps the normalized text of every five-card hand to a dense
strength rank, 1 for a royal flush. Hands of equal strength share a rank.
Keys are built by ``table_key`` and the rank cache must look hands up with
the same function.
"""

import csv
import logging
from dataclasses import dataclass
from itertools import combinations_with_replacement
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple, Union

from plo_equity.exceptions import RankTableError
from plo_equity.models.card import CANONICAL_SUITS, Card, Rank, format_cards
from plo_equity.normalization.normalizer import canonical_cards
from plo_equity.ranking.classifier import HandValue, hand_label, hand_value

logger = logging.getLogger(__name__)

HEADER = ("normalized_hand", "hand_rank", "hand_type")


@dataclass(frozen=True)
class RankEntry:
    """One row of the rank table."""
    rank: int
    hand_type: str = ""


def table_key(cards: Sequence[Card]) -> str:
    """Lookup key of a five-card hand: its normalized text."""
    return format_cards(canonical_cards(cards))


def _suit_patterns(values: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Suit index sequences covering every suit-isomorphism class once or more.

    A card either reuses a suit already dealt or opens the next unused one,
    and cards of equal rank take strictly increasing suits.
    """
    size = len(values)

    def extend(prefix: List[int], used: int) -> Iterator[Tuple[int, ...]]:
        i = len(prefix)
        if i == size:
            yield tuple(prefix)
            return
        lowest = prefix[-1] + 1 if i and values[i - 1] == values[i] else 0
        for suit in range(lowest, min(used + 1, len(CANONICAL_SUITS))):
            prefix.append(suit)
            yield from extend(prefix, max(used, suit + 1))
            prefix.pop()

    yield from extend([], 0)


def representative_hands() -> Iterator[List[Card]]:
    """At least one five-card hand from every suit-isomorphism class."""
    for values in combinations_with_replacement(range(14, 1, -1), 5):
        if values[0] == values[4]:
            continue
        for pattern in _suit_patterns(values):
            yield [Card(Rank.from_value(v), CANONICAL_SUITS[s]) for v, s in zip(values, pattern)]


def generate_rank_table() -> Dict[str, RankEntry]:
    """Enumerate every normalized five-card hand and rank it.

    Returns:
        Mapping from table key to RankEntry.
    """
    values_by_key: Dict[str, HandValue] = {}
    for hand in representative_hands():
        key = table_key(hand)
        if key not in values_by_key:
            values_by_key[key] = hand_value(hand)

    strengths = sorted(set(values_by_key.values()), reverse=True)
    dense_rank = {value: i + 1 for i, value in enumerate(strengths)}

    table = {
        key: RankEntry(dense_rank[value], hand_label(value))
        for key, value in values_by_key.items()
    }
    logger.info("Generated %d normalized hands over %d distinct ranks", len(table), len(strengths))
    return table


def write_rank_table(path: Union[str, Path], table: Dict[str, RankEntry]) -> None:
    """Write the table as CSV, strongest hands first."""
    rows = sorted(table.items(), key=lambda item: (item[1].rank, item[0]))
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for key, entry in rows:
            writer.writerow((key, entry.rank, entry.hand_type))
    logger.info("Wrote %d rank table rows to %s", len(rows), path)


def read_rank_table(path: Union[str, Path]) -> Dict[str, RankEntry]:
    """Load a table written by ``write_rank_table``.

    The header row is skipped; the hand type column is optional.

    Raises:
        RankTableError: if the file is missing, a row is malformed or no
            rows are present.
    """
    table: Dict[str, RankEntry] = {}
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            next(reader, None)
            for line_no, row in enumerate(reader, start=2):
                if not row:
                    continue
                if len(row) < 2 or len(row[0]) != 10:
                    raise RankTableError(f"{path}:{line_no}: malformed row {row!r}")
                try:
                    rank = int(row[1])
                except ValueError:
                    raise RankTableError(f"{path}:{line_no}: rank is not an integer: {row[1]!r}")
                if rank < 1:
                    raise RankTableError(f"{path}:{line_no}: rank must be positive, got {rank}")
                table[row[0]] = RankEntry(rank, row[2] if len(row) > 2 else "")
    except OSError as e:
        raise RankTableError(f"Cannot read rank table {path}: {e}") from e

    if not table:
        raise RankTableError(f"Rank table {path} has no rows")
    logger.info("Loaded %d hand rankings from %s", len(table), path)
    return table
