"""Data models for Monte-Carlo equity queries."""

import math
from dataclasses import dataclass

from plo_equity import config

# z-score of a two-sided 95% confidence interval
Z_95 = 1.96


@dataclass(frozen=True)
class StoppingCriteria:
    """Thresholds an equity estimate must meet before a query stops."""
    min_trials: int = 100
    max_sigma: float = 0.005
    max_half_width: float = 0.01

    @classmethod
    def from_config(cls) -> "StoppingCriteria":
        return cls(
            min_trials=config.MIN_TRIALS,
            max_sigma=config.MAX_SIGMA,
            max_half_width=config.MAX_HALF_WIDTH,
        )


@dataclass
class SimulationStats:
    """Running (wins, trials) tally of one equity query."""
    wins: int = 0
    trials: int = 0

    def record(self, won: bool) -> None:
        self.trials += 1
        if won:
            self.wins += 1

    def merge(self, wins: int, trials: int) -> None:
        """Fold a finished batch into the tally."""
        self.wins += wins
        self.trials += trials

    @property
    def win_rate(self) -> float:
        if self.trials == 0:
            return 0.0
        return self.wins / self.trials

    @property
    def standard_deviation(self) -> float:
        """Binomial standard error of the win rate."""
        if self.trials == 0:
            return 0.0
        p = self.win_rate
        return math.sqrt(p * (1 - p) / self.trials)

    @property
    def half_width(self) -> float:
        """Half-width of the 95% confidence interval."""
        return Z_95 * self.standard_deviation

    def satisfies(self, criteria: StoppingCriteria) -> bool:
        return (
            self.trials >= criteria.min_trials
            and self.standard_deviation <= criteria.max_sigma
            and self.half_width <= criteria.max_half_width
        )


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of an equity query."""
    win_rate: float
    standard_deviation: float
    confidence_half_width: float
    trials: int
    # False only when a trial cap ended the run before the criteria held
    converged: bool = True

    @classmethod
    def from_stats(cls, stats: SimulationStats, converged: bool = True) -> "SimulationResult":
        return cls(
            win_rate=stats.win_rate,
            standard_deviation=stats.standard_deviation,
            confidence_half_width=stats.half_width,
            trials=stats.trials,
            converged=converged,
        )
