"""Best-hand evaluation for Omaha: two hole cards plus three board cards."""

from itertools import combinations
from typing import Iterator, List, Sequence

from plo_equity.exceptions import InvalidHandError
from plo_equity.models.card import Card
from plo_equity.ranking.cache import RankCache

HOLE_SIZE = 4
BOARD_SIZE = 5


class PLOHandEvaluator:
    """Evaluates four hole cards against a five-card board."""

    def __init__(self, cache: RankCache):
        self.cache = cache

    @staticmethod
    def combinations(hole: Sequence[Card], board: Sequence[Card]) -> Iterator[List[Card]]:
        """Every legal five-card hand: C(4,2) hole pairs x C(5,3) board triples."""
        for pair in combinations(hole, 2):
            for triple in combinations(board, 3):
                yield [*pair, *triple]

    def best_rank(self, hole: Sequence[Card], board: Sequence[Card]) -> int:
        """Rank of the strongest legal hand (lower is stronger).

        Args:
            hole: Exactly four hole cards.
            board: Exactly five community cards.

        Returns:
            The minimum cached rank over all 60 combinations.
        """
        if len(hole) != HOLE_SIZE:
            raise InvalidHandError(f"Hole cards must be exactly {HOLE_SIZE} cards, got {len(hole)}")
        if len(board) != BOARD_SIZE:
            raise InvalidHandError(f"Board must be exactly {BOARD_SIZE} cards, got {len(board)}")

        rank = self.cache.rank
        return min(rank(hand) for hand in self.combinations(hole, board))
