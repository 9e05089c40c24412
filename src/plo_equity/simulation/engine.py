"""Adaptive Monte-Carlo equity engine."""

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional, Sequence, Tuple

from plo_equity import config
from plo_equity.exceptions import CardConflictError
from plo_equity.models.card import Card, CardsLike, format_cards, parse_hand
from plo_equity.models.simulation import SimulationResult, SimulationStats, StoppingCriteria
from plo_equity.ranking.cache import RankCache
from plo_equity.simulation.deck import Deck
from plo_equity.simulation.evaluator import BOARD_SIZE, HOLE_SIZE, PLOHandEvaluator
from plo_equity.simulation.stopping import crossed_checkpoint, should_check

logger = logging.getLogger(__name__)


def validate_hands(hero: CardsLike,
                   opponents: Optional[Iterable[CardsLike]] = None
                   ) -> Tuple[List[Card], List[List[Card]]]:
    """Parse and check the hands of one equity query.

    Args:
        hero: Hero's four hole cards.
        opponents: Zero or more opponent hands of four cards each.

    Returns:
        Tuple of (hero cards, list of opponent hands).

    Raises:
        InvalidHandError: if a hand is malformed.
        CardConflictError: if a card appears in more than one hand.
    """
    hero_cards = parse_hand(hero, HOLE_SIZE, "Hero")
    opponent_hands = [
        parse_hand(hand, HOLE_SIZE, f"Opponent {i}")
        for i, hand in enumerate(opponents or [], start=1)
    ]

    seen = {card: "Hero" for card in hero_cards}
    for i, hand in enumerate(opponent_hands, start=1):
        owner = f"Opponent {i}"
        for card in hand:
            if card in seen:
                raise CardConflictError(
                    f"Card {card.to_short()} is used by both {seen[card]} and {owner}"
                )
            seen[card] = owner
    return hero_cards, opponent_hands


class EquityEngine:
    """Estimates how often a hand strictly beats its opponents.

    Trials are repeated until the win rate's standard error and 95%
    confidence half-width fall under the stopping criteria. A tie with any
    opponent counts as a loss for the hero.
    """

    def __init__(self, cache: RankCache,
                 criteria: Optional[StoppingCriteria] = None,
                 batch_size: Optional[int] = None,
                 observer=None):
        """Initialize the engine.

        Args:
            cache: Loaded rank cache, shared read-only by every worker.
            criteria: Stopping thresholds; defaults come from config.
            batch_size: Trials per worker between merges in parallel mode.
            observer: Optional object with an ``on_checkpoint(stats)``
                method, called with the cumulative statistics at every
                checkpoint.
        """
        self.cache = cache
        self.evaluator = PLOHandEvaluator(cache)
        self.criteria = criteria or StoppingCriteria.from_config()
        self.batch_size = batch_size or config.BATCH_SIZE
        self.observer = observer

    def simulate(self, hero: CardsLike,
                 opponents: Optional[Iterable[CardsLike]] = None,
                 workers: Optional[int] = 1,
                 seed: Optional[int] = None,
                 max_trials: Optional[int] = None) -> SimulationResult:
        """Run one equity query.

        Args:
            hero: Hero's four hole cards, e.g. "KsKh8d7c".
            opponents: Opponent hands. When empty, one random opponent is
                dealt afresh for every trial.
            workers: Worker threads; 1 runs on the calling thread and None
                uses the configured default.
            seed: Seed for reproducible runs.
            max_trials: Optional hard cap on the number of trials.

        Returns:
            The SimulationResult computed from the cumulative tally.

        Raises:
            InvalidHandError: on invalid input, before any trial runs.
            RankTableError: if the rank table lacks a hand.
        """
        hero_cards, opponent_hands = validate_hands(hero, opponents)
        if workers is None:
            workers = config.WORKERS

        if workers <= 1:
            stats = self._run_single(hero_cards, opponent_hands, seed, max_trials)
        else:
            stats = self._run_parallel(hero_cards, opponent_hands, workers, seed, max_trials)

        converged = stats.satisfies(self.criteria)
        result = SimulationResult.from_stats(stats, converged=converged)
        logger.info(
            "%s vs %s: win rate %.4f (sd %.4f, ci %.4f) after %d trials",
            format_cards(hero_cards),
            ", ".join(format_cards(h) for h in opponent_hands) or "random",
            result.win_rate, result.standard_deviation,
            result.confidence_half_width, result.trials,
        )
        if not converged:
            logger.warning("Stopped at the %d trial cap before the stopping criteria held",
                           stats.trials)
        return result

    def play_trial(self, hero: Sequence[Card], opponents: Sequence[Sequence[Card]],
                   deck: Deck) -> bool:
        """Deal one board and report whether the hero strictly beats everyone."""
        deck.reset()
        if opponents:
            hands = opponents
        else:
            hands = [deck.deal(HOLE_SIZE)]
        board = deck.deal(BOARD_SIZE)

        hero_rank = self.evaluator.best_rank(hero, board)
        for hand in hands:
            if self.evaluator.best_rank(hand, board) <= hero_rank:
                return False
        return True

    def _notify(self, stats: SimulationStats) -> None:
        logger.debug("Checkpoint at %d trials: win rate %.4f, sd %.4f, ci %.4f",
                     stats.trials, stats.win_rate, stats.standard_deviation, stats.half_width)
        if self.observer is not None:
            self.observer.on_checkpoint(stats)

    def _run_single(self, hero: List[Card], opponents: List[List[Card]],
                    seed: Optional[int], max_trials: Optional[int]) -> SimulationStats:
        deck = Deck(exclude=self._known_cards(hero, opponents), rng=random.Random(seed))
        stats = SimulationStats()

        while True:
            stats.record(self.play_trial(hero, opponents, deck))
            if should_check(stats.trials):
                self._notify(stats)
                if stats.satisfies(self.criteria):
                    break
            if max_trials is not None and stats.trials >= max_trials:
                break
        return stats

    def _run_parallel(self, hero: List[Card], opponents: List[List[Card]], workers: int,
                      seed: Optional[int], max_trials: Optional[int]) -> SimulationStats:
        known = self._known_cards(hero, opponents)
        shared = SimulationStats()
        lock = threading.Lock()
        stop = threading.Event()

        seeder = random.Random(seed)
        seeds = [seeder.getrandbits(64) if seed is not None else None for _ in range(workers)]

        def worker(worker_seed: Optional[int]) -> None:
            deck = Deck(exclude=known, rng=random.Random(worker_seed))
            try:
                while not stop.is_set():
                    wins = 0
                    for _ in range(self.batch_size):
                        if self.play_trial(hero, opponents, deck):
                            wins += 1
                    with lock:
                        # batches finished after the stop decision are dropped
                        if stop.is_set():
                            return
                        before = shared.trials
                        shared.merge(wins, self.batch_size)
                        if crossed_checkpoint(before, shared.trials):
                            self._notify(shared)
                            if shared.satisfies(self.criteria):
                                stop.set()
                        if max_trials is not None and shared.trials >= max_trials:
                            stop.set()
            except Exception:
                stop.set()
                raise

        logger.debug("Starting %d workers, batch size %d", workers, self.batch_size)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="plo-equity") as pool:
            futures = [pool.submit(worker, s) for s in seeds]
            try:
                for future in as_completed(futures):
                    future.result()
            finally:
                stop.set()
        return shared

    @staticmethod
    def _known_cards(hero: List[Card], opponents: List[List[Card]]) -> List[Card]:
        known = list(hero)
        for hand in opponents:
            known.extend(hand)
        return known
