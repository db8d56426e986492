from __future__ import annotations
import math
from numbers import Real
from typing import Tuple

from .types import TimeConfig, TimeOfDay


def floor_seconds(t: Real) -> int:
    """World time as whole seconds; floats and Fractions are floored."""
    if isinstance(t, int):
        return t
    return math.floor(t)


def time_to_seconds(tod: TimeOfDay | None, cfg: TimeConfig) -> int:
    if tod is None:
        return 0
    return tod.hour * cfg.seconds_per_hour + tod.minute * cfg.seconds_in_minute + tod.second


def split_seconds(total: int, cfg: TimeConfig) -> Tuple[int, TimeOfDay]:
    """
    Split absolute seconds into (days, time of day) using the calendar's own
    hour/minute/second bases. Floor semantics, so negative totals land on
    the previous day with a non-negative time of day.
    """
    days, sec = divmod(total, cfg.seconds_per_day)
    hour, rem = divmod(sec, cfg.seconds_per_hour)
    minute, second = divmod(rem, cfg.seconds_in_minute)
    return days, TimeOfDay(hour, minute, second)


def carry_month(year: int, month: int, n_months: int) -> Tuple[int, int]:
    """Add n_months to (year, month) with carry over n_months-per-year."""
    if n_months <= 0:
        return year, 1
    dy, m0 = divmod(month - 1, n_months)
    return year + dy, m0 + 1
