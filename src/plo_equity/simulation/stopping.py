"""Checkpoint cadence for the adaptive stopping rule.

Statistics are checked every 100 trials up to 1,000, every 1,000 up to
10,000, and so on, one order of magnitude per decade, capped at every
1,000,000 trials.
"""

# (upper bound of the range, check interval inside it)
CHECKPOINT_SCHEDULE = (
    (1_000, 100),
    (10_000, 1_000),
    (100_000, 10_000),
    (1_000_000, 100_000),
)
FINAL_INTERVAL = 1_000_000


def checkpoint_interval(trials: int) -> int:
    """Check interval that applies at a given trial count."""
    for upper, interval in CHECKPOINT_SCHEDULE:
        if trials <= upper:
            return interval
    return FINAL_INTERVAL


def should_check(trials: int) -> bool:
    """True when ``trials`` is a checkpoint."""
    return trials > 0 and trials % checkpoint_interval(trials) == 0


def next_checkpoint(trials: int) -> int:
    """The first checkpoint strictly after ``trials``."""
    interval = checkpoint_interval(trials + 1)
    return (trials // interval + 1) * interval


def crossed_checkpoint(before: int, after: int) -> bool:
    """True when a checkpoint lies in (before, after]."""
    return next_checkpoint(before) <= after
