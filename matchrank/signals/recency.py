"""Recency calculators.

Two distinct calculators serve the two call sites: a coarse day-based step
function for job postings and a continuous half-life decay for social
content. Both take ``now`` explicitly so scoring stays deterministic.
"""

from datetime import datetime

from matchrank.signals.constants import (
    DEFAULT_HALF_LIFE_HOURS,
    RECENCY_FLOOR,
    RECENCY_STEPS,
)


_SECONDS_PER_HOUR = 60 * 60
_SECONDS_PER_DAY = 24 * _SECONDS_PER_HOUR


def age_seconds(created_at: datetime, now: datetime) -> float:
    """Age of an item in seconds; future timestamps count as zero.

    Raises:
        TypeError: If one timestamp is naive and the other aware.
    """
    return max(0.0, (now - created_at).total_seconds())


def recency_step(created_at: datetime, now: datetime) -> float:
    """Step-function recency over age in days.

    <=1d -> 1.0, <=7d -> 0.9, <=14d -> 0.7, <=30d -> 0.5, <=60d -> 0.3,
    otherwise 0.1.

    Args:
        created_at: When the item was created.
        now: Reference time.

    Returns:
        Recency score in [0.1, 1].
    """
    age_days = age_seconds(created_at, now) / _SECONDS_PER_DAY
    for max_days, score in RECENCY_STEPS:
        if age_days <= max_days:
            return score
    return RECENCY_FLOOR


def recency_decay(
    created_at: datetime,
    now: datetime,
    half_life_hours: float = DEFAULT_HALF_LIFE_HOURS,
) -> float:
    """Continuous exponential decay: 0.5 ** (age_hours / half_life_hours).

    Args:
        created_at: When the item was created.
        now: Reference time.
        half_life_hours: Hours after which the score halves.

    Returns:
        Recency score in [0, 1].
    """
    if half_life_hours <= 0:
        msg = f"half_life_hours must be positive, got {half_life_hours}"
        raise ValueError(msg)
    age_hours = age_seconds(created_at, now) / _SECONDS_PER_HOUR
    return max(0.0, min(1.0, 0.5 ** (age_hours / half_life_hours)))
