"""Ranking of Omaha starting hands by equity against a random hand."""

import csv
import logging
from dataclasses import dataclass
from itertools import combinations
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from plo_equity.models.card import Card, format_cards, full_deck, parse_hand
from plo_equity.normalization.normalizer import canonical_cards
from plo_equity.simulation.engine import EquityEngine

logger = logging.getLogger(__name__)

CSV_HEADER = (
    "rank", "normalized_hand", "win_rate", "standard_deviation",
    "confidence_interval", "simulations",
)


@dataclass
class HandRanking:
    """Equity of one canonical starting hand."""
    rank: int
    normalized_hand: str
    win_rate: float
    standard_deviation: float
    confidence_interval: float
    simulations: int


class StartingHandRanker:
    """Simulates canonical starting hands against one random opponent."""

    def __init__(self, engine: EquityEngine, workers: Optional[int] = 1):
        self.engine = engine
        self.workers = workers

    @staticmethod
    def unique_starting_hands(deck: Optional[Sequence[Card]] = None) -> List[str]:
        """All four-card hands from ``deck`` collapsed by normalization.

        Args:
            deck: Cards to draw from; the full deck by default.

        Returns:
            Sorted list of distinct normalized hands.
        """
        cards = list(deck) if deck is not None else full_deck()
        unique = set()
        total = 0
        for hand in combinations(cards, 4):
            normalized = canonical_cards(hand)
            unique.add(format_cards(normalized))
            total += 1
        logger.info("%d starting hands normalized to %d hands", total, len(unique))
        return sorted(unique)

    def rank(self, hands: Optional[Iterable[str]] = None) -> List[HandRanking]:
        """Simulate each hand and order them by win rate, best first.

        Args:
            hands: Hands to rank; every unique starting hand by default.
                Each is normalized before simulation.
        """
        if hands is None:
            candidates = self.unique_starting_hands()
        else:
            candidates = sorted({format_cards(canonical_cards(parse_hand(h, 4))) for h in hands})

        results = []
        for index, hand in enumerate(candidates, start=1):
            result = self.engine.simulate(hand, [], workers=self.workers)
            logger.info("Hand %d/%d %s %.1f%% (sd %.4f, ci %.4f, trials %d)",
                        index, len(candidates), hand, result.win_rate * 100,
                        result.standard_deviation, result.confidence_half_width, result.trials)
            results.append((hand, result))

        results.sort(key=lambda item: item[1].win_rate, reverse=True)
        return [
            HandRanking(
                rank=position,
                normalized_hand=hand,
                win_rate=result.win_rate,
                standard_deviation=result.standard_deviation,
                confidence_interval=result.confidence_half_width,
                simulations=result.trials,
            )
            for position, (hand, result) in enumerate(results, start=1)
        ]


def write_rankings(path: Union[str, Path], rankings: Iterable[HandRanking]) -> None:
    """Write rankings as CSV, floats with six decimals."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for row in rankings:
            writer.writerow((
                row.rank, row.normalized_hand,
                f"{row.win_rate:.6f}", f"{row.standard_deviation:.6f}",
                f"{row.confidence_interval:.6f}", row.simulations,
            ))
