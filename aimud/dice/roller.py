"""Percentile-style roll source for probability checks.

Checks use a single uniform integer roll on [0, 1000] (inclusive), which
gives backend-authored thresholds a resolution of one tenth of a percent.
"""

import random

from aimud.config import settings


def roll_check(
    low: int | None = None,
    high: int | None = None,
    rng: random.Random | None = None,
) -> int:
    """Roll one uniformly distributed integer.

    Args:
        low: Inclusive lower bound (defaults to settings.roll_min).
        high: Inclusive upper bound (defaults to settings.roll_max).
        rng: Optional seeded generator for reproducible sequences.

    Returns:
        The roll.

    Examples:
        >>> 0 <= roll_check() <= 1000
        True
        >>> roll_check(rng=random.Random(7)) == roll_check(rng=random.Random(7))
        True
    """
    low = settings.roll_min if low is None else low
    high = settings.roll_max if high is None else high
    source = rng or random
    return source.randint(low, high)
