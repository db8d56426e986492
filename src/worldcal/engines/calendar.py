"""
worldcal.engines.calendar
-------------------------
The arithmetic core. Binds a CalendarDefinition to its two year layouts and
translates between world time (seconds since the epoch instant) and
calendar dates.

Counting frames used below:
  days     -- whole days since day 1 of month 1 of the epoch year
  weekday  -- the same, counting only days that advance the weekday cycle
Both are exact for years before the epoch (floor division throughout).
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import replace
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import DateArgumentWarning
from ..core.time import carry_month, floor_seconds, split_seconds, time_to_seconds
from ..core.types import CalendarDate, CalendarDefinition, IntercalaryDay, TimeOfDay
from .layout import Slot, YearLayout

logger = logging.getLogger(__name__)


class CalendarEngine:
    """
    Pure functions of (definition, inputs). The only state is the two
    precomputed year layouts and the leap counts derived from them at
    construction.
    """

    def __init__(self, definition: CalendarDefinition):
        self.definition = definition
        self.id = definition.id
        self._layouts = {
            False: YearLayout(definition, leap=False),
            True: YearLayout(definition, leap=True),
        }
        common, leap = self._layouts[False], self._layouts[True]
        self._extra_days = leap.length - common.length
        self._extra_weekdays = leap.weekday_length - common.weekday_length
        self._leaps_at_epoch = self._leaps_before(definition.year.epoch)

        rule = definition.leap_year
        if rule.rule == "gregorian":
            leap_share = 97 / 400
        elif rule.rule == "custom" and rule.interval:
            leap_share = 1 / rule.interval
        else:
            leap_share = 0.0
        self._mean_year = common.length + self._extra_days * leap_share

        if self._mean_year <= 0:
            logger.warning("Calendar %s has no days in any year; all dates collapse to the epoch", self.id)

    # ---------------------------------------------------------
    # Definition accessors
    # ---------------------------------------------------------

    @property
    def months_per_year(self) -> int:
        return len(self.definition.months)

    @property
    def weekday_count(self) -> int:
        return len(self.definition.weekdays)

    @property
    def seconds_per_day(self) -> int:
        return self.definition.time.seconds_per_day

    def info(self) -> Dict[str, Any]:
        d = self.definition
        return {
            "id": d.id,
            "label": d.label,
            "epoch": d.year.epoch,
            "months": len(d.months),
            "weekdays": len(d.weekdays),
            "intercalary": [ic.name for ic in d.intercalary],
            "leap_rule": d.leap_year.rule,
            "year_length": {"common": self._layouts[False].length, "leap": self._layouts[True].length},
            "seconds_per_day": self.seconds_per_day,
        }

    # ---------------------------------------------------------
    # Leap years and lengths
    # ---------------------------------------------------------

    def is_leap_year(self, year: int) -> bool:
        rule = self.definition.leap_year
        if rule.rule == "gregorian":
            return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
        if rule.rule == "custom":
            if not rule.interval:
                return False
            return (year - rule.offset) % rule.interval == 0
        return False

    def _layout(self, year: int) -> YearLayout:
        return self._layouts[self.is_leap_year(year)]

    def month_lengths(self, year: int) -> Tuple[int, ...]:
        return self._layout(year).month_lengths

    def month_length(self, month: int, year: int) -> int:
        month = self._clamp_month(month, "month_length")
        return self._layout(year).month_lengths[month - 1]

    def year_length(self, year: int) -> int:
        return self._layout(year).length

    def get_intercalary_days_after_month(self, month: int, year: int) -> List[IntercalaryDay]:
        month = self._clamp_month(month, "get_intercalary_days_after_month")
        leap = self.is_leap_year(year)
        return [
            ic for ic in self.definition.intercalary
            if ic.after_month == month and (leap or not ic.leap_year_only)
        ]

    def get_intercalary_days_before_month(self, month: int, year: int) -> List[IntercalaryDay]:
        month = self._clamp_month(month, "get_intercalary_days_before_month")
        leap = self.is_leap_year(year)
        return [
            ic for ic in self.definition.intercalary
            if ic.before_month == month and (leap or not ic.leap_year_only)
        ]

    # ---------------------------------------------------------
    # Argument clamping
    # ---------------------------------------------------------

    def _report(self, msg: str, *args: Any) -> None:
        logger.warning("Calendar %s: " + msg, self.id, *args)
        warnings.warn(f"Calendar {self.id}: " + (msg % args), DateArgumentWarning, stacklevel=4)

    def _clamp_month(self, month: int, op: str) -> int:
        n = self.months_per_year
        if 1 <= month <= n:
            return month
        clamped = min(max(month, 1), n)
        self._report("%s: month %d outside [1, %d], using %d", op, month, n, clamped)
        return clamped

    def _clamp_day(self, day: int, upper: int, op: str) -> int:
        upper = max(upper, 1)
        if 1 <= day <= upper:
            return day
        clamped = min(max(day, 1), upper)
        self._report("%s: day %d outside [1, %d], using %d", op, day, upper, clamped)
        return clamped

    def _clamp_time(self, tod: Optional[TimeOfDay], op: str) -> Optional[TimeOfDay]:
        if tod is None:
            return None
        cfg = self.definition.time
        bounds = (cfg.hours_in_day, cfg.minutes_in_hour, cfg.seconds_in_minute)
        parts = (tod.hour, tod.minute, tod.second)
        fixed = tuple(min(max(v, 0), b - 1) for v, b in zip(parts, bounds))
        if fixed != parts:
            self._report("%s: time %d:%d:%d out of range, using %d:%d:%d", op, *parts, *fixed)
            return TimeOfDay(*fixed)
        return tod

    def _resolve(self, date: CalendarDate, op: str) -> Tuple[CalendarDate, Slot, int]:
        """
        Clamp a caller-supplied date and find its slot and 0-based position
        inside the slot. The returned date carries no derived weekday yet.
        """
        year = date.year
        month = self._clamp_month(date.month, op)
        layout = self._layout(year)

        if date.intercalary is not None:
            slot = layout.intercalary_slot(date.intercalary, month)
            if slot is not None:
                pos = self._clamp_day(date.day, slot.length, op)
                fixed = CalendarDate(year, slot.month, pos, intercalary=date.intercalary,
                                     time=self._clamp_time(date.time, op))
                return fixed, slot, pos - 1
            self._report("%s: no intercalary period '%s' in year %d, treating as a month day",
                         op, date.intercalary, year)

        slot = layout.month_slot(month)
        day = self._clamp_day(date.day, slot.length, op)
        fixed = CalendarDate(year, month, day, time=self._clamp_time(date.time, op))
        return fixed, slot, day - 1

    # ---------------------------------------------------------
    # Day counting
    # ---------------------------------------------------------

    def _leaps_before(self, year: int) -> int:
        """Leap years before ``year``, up to a constant that cancels in differences."""
        rule = self.definition.leap_year
        if rule.rule == "gregorian":
            y = year - 1
            return y // 4 - y // 100 + y // 400
        if rule.rule == "custom" and rule.interval:
            return (year - rule.offset - 1) // rule.interval
        return 0

    def _days_before_year(self, year: int) -> int:
        leaps = self._leaps_before(year) - self._leaps_at_epoch
        return (year - self.definition.year.epoch) * self._layouts[False].length + leaps * self._extra_days

    def _weekday_days_before_year(self, year: int) -> int:
        leaps = self._leaps_before(year) - self._leaps_at_epoch
        return (year - self.definition.year.epoch) * self._layouts[False].weekday_length + leaps * self._extra_weekdays

    def _locate_year(self, days: int) -> Tuple[int, int]:
        """
        (year, 0-based day of year) for an absolute day count. The mean year
        length gives a first guess; the bracket around it is widened by
        doubling and then bisected, so long leap intervals and empty common
        years cost O(log) steps.
        """
        guess = self.definition.year.epoch + math.floor(days / self._mean_year)
        lo, step = guess, 1
        while self._days_before_year(lo) > days:
            lo -= step
            step *= 2
        hi, step = guess + 1, 1
        while self._days_before_year(hi) <= days:
            hi += step
            step *= 2
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if self._days_before_year(mid) <= days:
                lo = mid
            else:
                hi = mid
        return lo, days - self._days_before_year(lo)

    def _weekday_index(self, year: int, slot: Slot, pos: int) -> int:
        counted = slot.weekday_start + (pos if slot.weekday_length else 0)
        raw = self.definition.year.start_day + self._weekday_days_before_year(year) + counted
        return raw % self.weekday_count

    def day_of_year(self, date: CalendarDate) -> int:
        """0-based ordinal of the date inside its year, intercalary slots included."""
        _, slot, pos = self._resolve(date, "day_of_year")
        return slot.start + pos

    def date_to_days(self, date: CalendarDate) -> int:
        """Absolute day index; day 1 of month 1 of the epoch year is 0."""
        fixed, slot, pos = self._resolve(date, "date_to_days")
        return self._days_before_year(fixed.year) + slot.start + pos

    def days_to_date(self, days: int, time: Optional[TimeOfDay] = None) -> CalendarDate:
        if self._mean_year <= 0:
            epoch = self.definition.year
            return CalendarDate(epoch.epoch, 1, 1, epoch.start_day % self.weekday_count, time=time)

        year, doy = self._locate_year(days)
        slot, pos = self._layout(year).locate(doy)
        weekday = self._weekday_index(year, slot, pos)
        if slot.intercalary is not None:
            return CalendarDate(year, slot.month, pos + 1, weekday, slot.intercalary.name, time)
        return CalendarDate(year, slot.month, pos + 1, weekday, None, time)

    # ---------------------------------------------------------
    # Weekdays
    # ---------------------------------------------------------

    def calculate_weekday(self, year: int, month: int, day: int) -> int:
        """
        Weekday index of a month day. Only month days and intercalary days
        with counts_for_weekdays advance the cycle.
        """
        month = self._clamp_month(month, "calculate_weekday")
        slot = self._layout(year).month_slot(month)
        day = self._clamp_day(day, slot.length, "calculate_weekday")
        return self._weekday_index(year, slot, day - 1)

    def make_date(
        self,
        year: int,
        month: int,
        day: int,
        time: Optional[TimeOfDay] = None,
        *,
        intercalary: Optional[str] = None,
    ) -> CalendarDate:
        """Build a date with clamped fields and its derived weekday."""
        return self.normalize(CalendarDate(year, month, day, intercalary=intercalary, time=time))

    def normalize(self, date: CalendarDate) -> CalendarDate:
        fixed, slot, pos = self._resolve(date, "normalize")
        return replace(fixed, weekday=self._weekday_index(fixed.year, slot, pos))

    # ---------------------------------------------------------
    # World time
    # ---------------------------------------------------------

    def _interpretation_shift(self) -> int:
        """Seconds between the epoch instant and world time 0."""
        wt = self.definition.world_time
        if wt is None or wt.interpretation != "real-time-based":
            return 0
        days = self._days_before_year(wt.current_year) - self._days_before_year(wt.epoch_year)
        return days * self.seconds_per_day

    def date_to_world_time(self, date: CalendarDate, world_creation_offset: int = 0) -> int:
        fixed, slot, pos = self._resolve(date, "date_to_world_time")
        days = self._days_before_year(fixed.year) + slot.start + pos
        seconds = days * self.seconds_per_day + time_to_seconds(fixed.time, self.definition.time)
        return seconds - self._interpretation_shift() + world_creation_offset

    def world_time_to_date(self, world_time: Real, world_creation_offset: int = 0) -> CalendarDate:
        internal = floor_seconds(world_time) - world_creation_offset + self._interpretation_shift()
        days, tod = split_seconds(internal, self.definition.time)
        return self.days_to_date(days, tod)

    # ---------------------------------------------------------
    # Date arithmetic
    # ---------------------------------------------------------

    def _add_seconds(self, date: CalendarDate, seconds: int, keep_untimed: bool) -> CalendarDate:
        t = self.date_to_world_time(date) + seconds
        out = self.world_time_to_date(t)
        if keep_untimed and date.time is None:
            out = replace(out, time=None)
        return out

    def add_days(self, date: CalendarDate, days: int) -> CalendarDate:
        return self._add_seconds(date, days * self.seconds_per_day, keep_untimed=True)

    def add_weeks(self, date: CalendarDate, weeks: int) -> CalendarDate:
        return self.add_days(date, weeks * self.weekday_count)

    def add_hours(self, date: CalendarDate, hours: int) -> CalendarDate:
        return self._add_seconds(date, hours * self.definition.time.seconds_per_hour, keep_untimed=False)

    def add_minutes(self, date: CalendarDate, minutes: int) -> CalendarDate:
        return self._add_seconds(date, minutes * self.definition.time.seconds_in_minute, keep_untimed=False)

    def add_months(self, date: CalendarDate, months: int) -> CalendarDate:
        """
        Month carry over months_per_year; the day is clamped to the target
        month so it never spills into the following month. Intercalary dates
        move from their anchor month and land on a month day.
        """
        fixed, _, _ = self._resolve(date, "add_months")
        year, month = carry_month(fixed.year, fixed.month + months, self.months_per_year)
        day = min(fixed.day, max(self.month_length(month, year), 1))
        return self.make_date(year, month, day, fixed.time)

    def add_years(self, date: CalendarDate, years: int) -> CalendarDate:
        fixed, _, _ = self._resolve(date, "add_years")
        year = fixed.year + years
        day = min(fixed.day, max(self.month_length(fixed.month, year), 1))
        return self.make_date(year, fixed.month, day, fixed.time)

    # ---------------------------------------------------------
    # Weeks and display helpers
    # ---------------------------------------------------------

    def week_of_month(self, date: CalendarDate) -> Optional[int]:
        """
        1-based week number inside the month, or None when the calendar has
        no month-based week configuration or the day is an unnumbered
        remainder day.
        """
        weeks = self.definition.weeks
        if weeks is None or weeks.type == "year-based" or date.intercalary is not None:
            return None

        per_week = weeks.days_per_week or self.weekday_count
        raw_week = (date.day - 1) // per_week + 1
        month_days = self.month_length(date.month, date.year)
        if month_days % per_week == 0:
            return raw_week

        expected = weeks.per_month if weeks.per_month is not None else month_days // per_week
        if weeks.remainder_handling == "extend-last" and raw_week == expected + 1:
            return expected
        if weeks.remainder_handling == "none" and raw_week > expected:
            return None
        return raw_week

    def display_year(self, year: int) -> int:
        return year + int(self.definition.variant_config.get("yearOffset", 0))
