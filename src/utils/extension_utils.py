from datetime import datetime
import math

import pendulum

from core import constants


def to_utc(value: datetime) -> pendulum.DateTime:
    # Naive datetimes are treated as UTC
    return pendulum.instance(value).in_tz(pendulum.UTC)


def days_between(start: datetime, end: datetime) -> float:
    """
    Fractional number of days from ``start`` to ``end``.

    Args:
        start (datetime): Earlier moment.
        end (datetime): Later moment.

    Returns:
        float: ``(end - start)`` in days, negative if ``end`` precedes ``start``.
    """
    diff = to_utc(end) - to_utc(start)
    return diff.total_seconds() / constants.SECONDS_PER_DAY


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
