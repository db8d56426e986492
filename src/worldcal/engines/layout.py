"""
worldcal.engines.layout
-----------------------
Discrete layout of a single year. A year is an ordered run of slots: for
every month, the intercalary periods placed before it, the month itself,
then the periods placed after it. Each slot knows where it starts both on
the plain day axis and on the weekday-counting axis.

Only two layouts exist per calendar (common and leap year), so engines
build them once and reuse them for every year.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.types import CalendarDefinition, IntercalaryDay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    month: int                       # 1-based; anchor month for intercalary slots
    length: int                      # days on the plain axis
    weekday_length: int              # days advancing the weekday counter
    start: int                       # day-of-year of the first day
    weekday_start: int               # weekday-counting days before this slot
    intercalary: Optional[IntercalaryDay] = None

    @property
    def is_month(self) -> bool:
        return self.intercalary is None


def month_lengths_for(defn: CalendarDefinition, leap: bool) -> Tuple[int, ...]:
    lengths = [m.days for m in defn.months]
    rule = defn.leap_year
    if leap and rule.rule != "none" and rule.month is not None and 1 <= rule.month <= len(lengths):
        i = rule.month - 1
        lengths[i] += rule.extra_days
        if lengths[i] < 1:
            logger.warning(
                "Calendar %s: month '%s' clamped to 1 day (was %d)",
                defn.id, defn.months[i].name, lengths[i],
            )
            lengths[i] = 1
    return tuple(lengths)


class YearLayout:
    """Slot table for one kind of year (leap or common)."""

    def __init__(self, defn: CalendarDefinition, leap: bool):
        self.leap = leap
        self.month_lengths = month_lengths_for(defn, leap)
        active = [ic for ic in defn.intercalary if leap or not ic.leap_year_only]

        slots: List[Slot] = []
        pos = 0
        wpos = 0

        def push(month: int, length: int, wlen: int, ic: Optional[IntercalaryDay]) -> None:
            nonlocal pos, wpos
            slots.append(Slot(month, length, wlen, pos, wpos, ic))
            pos += length
            wpos += wlen

        for m, days in enumerate(self.month_lengths, start=1):
            for ic in active:
                if ic.before_month == m:
                    push(m, ic.days_count, ic.days_count if ic.counts_for_weekdays else 0, ic)
            push(m, days, days, None)
            for ic in active:
                if ic.after_month == m:
                    push(m, ic.days_count, ic.days_count if ic.counts_for_weekdays else 0, ic)

        self.slots: Tuple[Slot, ...] = tuple(slots)
        self.length = pos
        self.weekday_length = wpos
        self._starts = [s.start for s in self.slots]
        self._month_slot = {s.month: s for s in self.slots if s.is_month}

    def month_slot(self, month: int) -> Slot:
        return self._month_slot[month]

    def intercalary_slot(self, name: str, month: Optional[int] = None) -> Optional[Slot]:
        """First slot for the named period, preferring one anchored at ``month``."""
        found = None
        for s in self.slots:
            if s.intercalary is not None and s.intercalary.name == name:
                if month is None or s.month == month:
                    return s
                if found is None:
                    found = s
        return found

    def locate(self, day_of_year: int) -> Tuple[Slot, int]:
        """
        Slot containing the 0-based ``day_of_year`` (0 <= day_of_year < length)
        and the 0-based offset inside it.

        Zero-length slots share their start with the following slot, so the
        rightmost slot starting at or before the day is never empty.
        """
        i = bisect.bisect_right(self._starts, day_of_year) - 1
        s = self.slots[i]
        return s, day_of_year - s.start
