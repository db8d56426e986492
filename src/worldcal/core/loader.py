"""
worldcal.core.loader
--------------------
Turns parsed calendar JSON (camelCase keys, as in calendar files) into
validated CalendarDefinition values.

Every shape problem is collected and reported in one
CalendarValidationError. Whole sections that are simply missing fall back
to Gregorian defaults with a logged warning, so partial calendar files
still load.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import CalendarValidationError
from .types import (
    CalendarDefinition,
    CalendarVariant,
    CanonicalHour,
    CompatibilityAdjustment,
    IntercalaryDay,
    LeapYearRule,
    MonthDef,
    Moon,
    MoonPhase,
    Season,
    TimeConfig,
    WeekConfig,
    WeekdayDef,
    WeekName,
    WorldTimeConfig,
    YearConfig,
    frozen_mapping,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

GREGORIAN_MONTHS: Tuple[Tuple[str, int], ...] = (
    ("January", 31), ("February", 28), ("March", 31), ("April", 30),
    ("May", 31), ("June", 30), ("July", 31), ("August", 31),
    ("September", 30), ("October", 31), ("November", 30), ("December", 31),
)
GREGORIAN_WEEKDAYS: Tuple[str, ...] = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)

_LEAP_RULES = ("none", "gregorian", "custom")
_INTERPRETATIONS = ("epoch-based", "real-time-based")
_WEEK_TYPES = ("month-based", "year-based")
_REMAINDERS = ("partial-last", "extend-last", "none")
_NAMING = ("ordinal", "numeric", "none")


@dataclass(frozen=True)
class VariantFile:
    """An external variants file: variants for one base calendar."""
    id: str
    base_calendar: str
    variants: Mapping[str, CalendarVariant]


class _Collector:
    def __init__(self) -> None:
        self.errors: List[str] = []

    def add(self, msg: str) -> None:
        self.errors.append(msg)

    def int_field(self, obj: Mapping[str, Any], key: str, where: str, default: Optional[int] = None,
                  *, minimum: Optional[int] = None) -> Optional[int]:
        value = obj.get(key)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            self.add(f"{where}.{key} must be an integer, got {value!r}")
            return default
        if minimum is not None and value < minimum:
            self.add(f"{where}.{key} must be >= {minimum}, got {value}")
            return default
        return value

    def number_field(self, obj: Mapping[str, Any], key: str, where: str, default: float = 0.0) -> float:
        value = obj.get(key, default)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self.add(f"{where}.{key} must be a number, got {value!r}")
            return default
        return value

    def str_field(self, obj: Mapping[str, Any], key: str, where: str, *, required: bool = False) -> Optional[str]:
        value = obj.get(key)
        if value is None:
            if required:
                self.add(f"{where}.{key} is required")
            return None
        if not isinstance(value, str):
            self.add(f"{where}.{key} must be a string, got {value!r}")
            return None
        return value

    def choice(self, obj: Mapping[str, Any], key: str, where: str, options: Tuple[str, ...], default: str) -> str:
        value = obj.get(key, default)
        if value not in options:
            self.add(f"{where}.{key} must be one of {list(options)}, got {value!r}")
            return default
        return value

    def list_of_dicts(self, obj: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
        value = obj.get(key)
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            self.add(f"{key} must be a list")
            return []
        out = []
        for i, item in enumerate(value):
            if isinstance(item, Mapping):
                out.append(item)
            else:
                self.add(f"{key}[{i}] must be an object")
        return out


def _label_of(data: Mapping[str, Any], cal_id: str) -> Tuple[str, Optional[str]]:
    translations = data.get("translations")
    if isinstance(translations, dict):
        entry = translations.get("en") or next(iter(translations.values()), None)
        if isinstance(entry, dict) and isinstance(entry.get("label"), str):
            return entry["label"], entry.get("description")
    label = data.get("label") or data.get("name") or cal_id
    return str(label), data.get("description")


def _unique(names: List[str], what: str, col: _Collector) -> None:
    if len(names) != len(set(names)):
        col.add(f"{what} names must be unique")


def _months(data: Mapping[str, Any], cal_id: str, col: _Collector) -> Tuple[MonthDef, ...]:
    if "months" not in data:
        logger.warning("Calendar %s has no months section; using Gregorian months", cal_id)
        return tuple(MonthDef(n, d, n[:3]) for n, d in GREGORIAN_MONTHS)

    raw = col.list_of_dicts(data, "months")
    if not raw:
        col.add("months must contain at least one month")
    out = []
    for i, m in enumerate(raw):
        name = col.str_field(m, "name", f"months[{i}]", required=True) or f"Month {i + 1}"
        days = col.int_field(m, "days", f"months[{i}]", default=0, minimum=0)
        out.append(MonthDef(name, days or 0, m.get("abbreviation"), m.get("description")))
    _unique([m.name for m in out], "Month", col)
    return tuple(out)


def _weekdays(data: Mapping[str, Any], cal_id: str, col: _Collector) -> Tuple[WeekdayDef, ...]:
    if "weekdays" not in data:
        logger.warning("Calendar %s has no weekdays section; using the Gregorian week", cal_id)
        return tuple(WeekdayDef(n, n[:3]) for n in GREGORIAN_WEEKDAYS)

    raw = col.list_of_dicts(data, "weekdays")
    if not raw:
        col.add("weekdays must contain at least one weekday")
    out = []
    for i, w in enumerate(raw):
        name = col.str_field(w, "name", f"weekdays[{i}]", required=True) or f"Day {i + 1}"
        out.append(WeekdayDef(name, w.get("abbreviation"), w.get("description")))
    _unique([w.name for w in out], "Weekday", col)
    return tuple(out)


def _month_ref(value: Any, months: Tuple[MonthDef, ...], where: str, col: _Collector) -> Optional[int]:
    """Accepts a month name or a 1-based index."""
    if value is None:
        return None
    if isinstance(value, str):
        for i, m in enumerate(months, start=1):
            if m.name == value:
                return i
        col.add(f"{where} references non-existent month '{value}'")
        return None
    if isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= len(months):
        return value
    col.add(f"{where} references non-existent month {value!r}")
    return None


def _year(data: Mapping[str, Any], cal_id: str, col: _Collector) -> YearConfig:
    raw = data.get("year")
    if raw is None:
        logger.warning("Calendar %s has no year section; using epoch 0", cal_id)
        return YearConfig()
    if not isinstance(raw, dict):
        col.add("year must be an object")
        return YearConfig()
    return YearConfig(
        epoch=col.int_field(raw, "epoch", "year", default=0),
        current_year=col.int_field(raw, "currentYear", "year", default=0),
        prefix=col.str_field(raw, "prefix", "year") or "",
        suffix=col.str_field(raw, "suffix", "year") or "",
        start_day=col.int_field(raw, "startDay", "year", default=0),
    )


def _leap_year(data: Mapping[str, Any], months: Tuple[MonthDef, ...], cal_id: str, col: _Collector) -> LeapYearRule:
    raw = data.get("leapYear")
    if raw is None:
        logger.warning("Calendar %s has no leapYear section; using the Gregorian rule", cal_id)
        feb = 2 if len(months) >= 2 else None
        return LeapYearRule("gregorian", month=feb)
    if not isinstance(raw, dict):
        col.add("leapYear must be an object")
        return LeapYearRule()

    rule = col.choice(raw, "rule", "leapYear", _LEAP_RULES, "none")
    interval = col.int_field(raw, "interval", "leapYear", minimum=1)
    if rule == "custom" and interval is None:
        col.add("leapYear.interval is required for the custom rule")
    month = _month_ref(raw.get("month"), months, "leapYear.month", col)
    extra = col.int_field(raw, "extraDays", "leapYear", default=1)
    offset = col.int_field(raw, "offset", "leapYear", default=0)

    if month is not None and extra is not None and extra < 0 and months[month - 1].days + extra < 1:
        logger.warning(
            "Calendar %s: leap adjustment of %d days would reduce '%s' below 1 day; it will be clamped",
            cal_id, extra, months[month - 1].name,
        )
    return LeapYearRule(rule, interval, month, extra, offset)


def _intercalary(data: Mapping[str, Any], months: Tuple[MonthDef, ...], col: _Collector) -> Tuple[IntercalaryDay, ...]:
    out = []
    for i, ic in enumerate(col.list_of_dicts(data, "intercalary")):
        where = f"intercalary[{i}]"
        name = col.str_field(ic, "name", where, required=True) or f"Intercalary {i + 1}"
        after = _month_ref(ic.get("after"), months, f"{where}.after", col)
        before = _month_ref(ic.get("before"), months, f"{where}.before", col)
        if ("after" in ic) == ("before" in ic):
            col.add(f"{where} must set exactly one of 'after' or 'before'")
        out.append(IntercalaryDay(
            name=name,
            after_month=after,
            before_month=before if after is None else None,
            days_count=col.int_field(ic, "days", where, default=1, minimum=1) or 1,
            leap_year_only=bool(ic.get("leapYearOnly", False)),
            counts_for_weekdays=bool(ic.get("countsForWeekdays", True)),
            description=ic.get("description"),
        ))
    return tuple(out)


def _time(data: Mapping[str, Any], cal_id: str, col: _Collector) -> TimeConfig:
    raw = data.get("time")
    if raw is None:
        logger.warning("Calendar %s has no time section; using 24/60/60", cal_id)
        return TimeConfig()
    if not isinstance(raw, dict):
        col.add("time must be an object")
        return TimeConfig()
    return TimeConfig(
        hours_in_day=col.int_field(raw, "hoursInDay", "time", default=24, minimum=1),
        minutes_in_hour=col.int_field(raw, "minutesInHour", "time", default=60, minimum=1),
        seconds_in_minute=col.int_field(raw, "secondsInMinute", "time", default=60, minimum=1),
    )


def _world_time(data: Mapping[str, Any], col: _Collector) -> Optional[WorldTimeConfig]:
    raw = data.get("worldTime")
    if raw is None:
        return None
    if not isinstance(raw, dict):
        col.add("worldTime must be an object")
        return None
    return WorldTimeConfig(
        interpretation=col.choice(raw, "interpretation", "worldTime", _INTERPRETATIONS, "epoch-based"),
        epoch_year=col.int_field(raw, "epochYear", "worldTime", default=0),
        current_year=col.int_field(raw, "currentYear", "worldTime", default=0),
    )


def _moons(raw: List[Mapping[str, Any]], col: _Collector) -> Tuple[Moon, ...]:
    out = []
    for i, m in enumerate(raw):
        where = f"moons[{i}]"
        ref = m.get("firstNewMoon")
        if not isinstance(ref, Mapping):
            col.add(f"{where}.firstNewMoon is required")
            ref = {}
        phases = []
        for j, p in enumerate(col.list_of_dicts(m, "phases")):
            phases.append(MoonPhase(
                name=col.str_field(p, "name", f"{where}.phases[{j}]", required=True) or f"Phase {j + 1}",
                length=col.number_field(p, "length", f"{where}.phases[{j}]", 1),
                single_day=bool(p.get("singleDay", False)),
                icon=p.get("icon"),
            ))
        cycle = col.number_field(m, "cycleLength", where, 0)
        if cycle <= 0:
            col.add(f"{where}.cycleLength must be positive")
        out.append(Moon(
            name=col.str_field(m, "name", where, required=True) or f"Moon {i + 1}",
            cycle_length=cycle,
            first_new_moon=(
                col.int_field(ref, "year", f"{where}.firstNewMoon", default=0),
                col.int_field(ref, "month", f"{where}.firstNewMoon", default=1, minimum=1),
                col.int_field(ref, "day", f"{where}.firstNewMoon", default=1, minimum=1),
            ),
            phases=tuple(phases),
            color=m.get("color"),
        ))
    return tuple(out)


def _canonical_hours(raw: List[Mapping[str, Any]], col: _Collector) -> Tuple[CanonicalHour, ...]:
    out = []
    for i, h in enumerate(raw):
        where = f"canonicalHours[{i}]"
        out.append(CanonicalHour(
            name=col.str_field(h, "name", where, required=True) or f"Hour {i + 1}",
            start_hour=col.int_field(h, "startHour", where, default=0, minimum=0),
            end_hour=col.int_field(h, "endHour", where, default=0, minimum=0),
            start_minute=col.int_field(h, "startMinute", where, default=0, minimum=0),
            end_minute=col.int_field(h, "endMinute", where, default=0, minimum=0),
            description=h.get("description"),
        ))
    return tuple(out)


def moons_from_list(raw: Any, owner: str = "<moons>") -> Tuple[Moon, ...]:
    """Parse a bare ``moons`` list, as carried by variant overrides."""
    col = _Collector()
    moons = _moons(col.list_of_dicts({"moons": raw}, "moons"), col)
    if col.errors:
        raise CalendarValidationError(owner, col.errors)
    return moons


def canonical_hours_from_list(raw: Any, owner: str = "<canonicalHours>") -> Tuple[CanonicalHour, ...]:
    col = _Collector()
    hours = _canonical_hours(col.list_of_dicts({"canonicalHours": raw}, "canonicalHours"), col)
    if col.errors:
        raise CalendarValidationError(owner, col.errors)
    return hours


def _seasons(data: Mapping[str, Any], months: Tuple[MonthDef, ...], col: _Collector) -> Tuple[Season, ...]:
    out = []
    for i, s in enumerate(col.list_of_dicts(data, "seasons")):
        where = f"seasons[{i}]"
        start = col.int_field(s, "startMonth", where, default=1, minimum=1)
        if start > len(months):
            col.add(f"{where}.startMonth {start} exceeds the month count")
        out.append(Season(
            name=col.str_field(s, "name", where, required=True) or f"Season {i + 1}",
            start_month=start,
            start_day=col.int_field(s, "startDay", where, default=1, minimum=1),
            end_month=col.int_field(s, "endMonth", where, minimum=1),
            end_day=col.int_field(s, "endDay", where, minimum=1),
            description=s.get("description"),
        ))
    return tuple(out)


def _weeks(data: Mapping[str, Any], col: _Collector) -> Optional[WeekConfig]:
    raw = data.get("weeks")
    if raw is None:
        return None
    if not isinstance(raw, dict):
        col.add("weeks must be an object")
        return None
    wtype = col.choice(raw, "type", "weeks", _WEEK_TYPES, "month-based")
    per_month = col.int_field(raw, "perMonth", "weeks", minimum=1)
    if wtype == "month-based" and "perMonth" not in raw:
        col.add("weeks.perMonth is required when weeks.type is 'month-based'")
    names = tuple(
        WeekName(str(n.get("name", "")), n.get("abbreviation"))
        for n in col.list_of_dicts(raw, "names")
    )
    _unique([n.name for n in names], "Week", col)
    return WeekConfig(
        type=wtype,
        per_month=per_month,
        days_per_week=col.int_field(raw, "daysPerWeek", "weeks", minimum=1),
        remainder_handling=col.choice(raw, "remainderHandling", "weeks", _REMAINDERS, "partial-last"),
        names=names,
        naming_pattern=col.choice(raw, "namingPattern", "weeks", _NAMING, "numeric"),
    )


def variant_from_dict(raw: Mapping[str, Any]) -> CalendarVariant:
    """
    ``config`` and ``overrides`` are not shape-checked here: a malformed one
    only disables its own variant when the variant is resolved.
    """
    return CalendarVariant(
        name=str(raw.get("name", "")),
        description=str(raw.get("description", "")),
        default=bool(raw.get("default", False)),
        config=frozen_mapping(raw.get("config")),
        overrides=frozen_mapping(raw.get("overrides")),
    )


def _variants(data: Mapping[str, Any], col: _Collector) -> Dict[str, CalendarVariant]:
    raw = data.get("variants")
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        col.add("variants must be an object")
        return {}
    out = {}
    for vid, v in raw.items():
        if not isinstance(v, dict):
            col.add(f"variants.{vid} must be an object")
            continue
        out[vid] = variant_from_dict(v)
    return out


def _compatibility(data: Mapping[str, Any], col: _Collector) -> Dict[str, CompatibilityAdjustment]:
    raw = data.get("compatibility")
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        col.add("compatibility must be an object")
        return {}
    out = {}
    for system_id, adj in raw.items():
        if not isinstance(adj, dict):
            col.add(f"compatibility.{system_id} must be an object")
            continue
        fmt = adj.get("dateFormatting") or {}
        where = f"compatibility.{system_id}"
        out[system_id] = CompatibilityAdjustment(
            weekday_offset=col.int_field(adj, "weekdayOffset", where, default=0),
            month_offset=col.int_field(fmt, "monthOffset", where + ".dateFormatting", default=0),
            day_offset=col.int_field(fmt, "dayOffset", where + ".dateFormatting", default=0),
            description=adj.get("description"),
        )
    return out


def definition_from_dict(data: Mapping[str, Any]) -> CalendarDefinition:
    """Validate a parsed calendar file and build its definition."""
    if not isinstance(data, dict):
        raise CalendarValidationError("<unknown>", ["Calendar must be a valid object"])

    col = _Collector()
    cal_id = data.get("id")
    if not isinstance(cal_id, str) or not cal_id:
        col.add("Calendar must have a valid id string")
        cal_id = "<unknown>"

    label, description = _label_of(data, cal_id)
    months = _months(data, cal_id, col)
    weekdays = _weekdays(data, cal_id, col)
    year = _year(data, cal_id, col)
    leap_year = _leap_year(data, months, cal_id, col)
    intercalary = _intercalary(data, months, col)
    time = _time(data, cal_id, col)
    world_time = _world_time(data, col)
    moons = _moons(col.list_of_dicts(data, "moons"), col)
    seasons = _seasons(data, months, col)
    canonical_hours = _canonical_hours(col.list_of_dicts(data, "canonicalHours"), col)
    weeks = _weeks(data, col)
    variants = _variants(data, col)
    compatibility = _compatibility(data, col)

    date_formats = data.get("dateFormats") or {}
    if not isinstance(date_formats, dict):
        col.add("dateFormats must be an object")
        date_formats = {}

    if col.errors:
        raise CalendarValidationError(cal_id, col.errors)

    return CalendarDefinition(
        id=cal_id,
        label=label,
        description=description,
        year=year,
        leap_year=leap_year,
        months=months,
        weekdays=weekdays,
        intercalary=intercalary,
        time=time,
        world_time=world_time,
        moons=moons,
        seasons=seasons,
        canonical_hours=canonical_hours,
        weeks=weeks,
        date_formats=frozen_mapping(date_formats),
        variants=frozen_mapping(variants),
        compatibility=frozen_mapping(compatibility),
    )


def variant_file_from_dict(data: Mapping[str, Any]) -> VariantFile:
    errors = []
    if not isinstance(data, dict):
        raise CalendarValidationError("<unknown>", ["Variants file must be a valid object"])
    file_id = data.get("id")
    base = data.get("baseCalendar")
    raw = data.get("variants")
    if not isinstance(file_id, str) or not file_id:
        errors.append("Variants file must have a valid id string")
    if not isinstance(base, str) or not base:
        errors.append("baseCalendar must be a string")
    if not isinstance(raw, dict):
        errors.append("variants must be an object")
    else:
        errors.extend(f"variants.{k} must be an object" for k, v in raw.items() if not isinstance(v, dict))
    if errors:
        raise CalendarValidationError(str(file_id or "<unknown>"), errors)
    variants = {vid: variant_from_dict(v) for vid, v in raw.items()}
    return VariantFile(file_id, base, frozen_mapping(variants))


def _read_json(path: PathLike) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_calendar(path: PathLike) -> CalendarDefinition:
    defn = definition_from_dict(_read_json(path))
    logger.debug("Loaded calendar %s from %s", defn.id, path)
    return defn


def load_variant_file(path: PathLike) -> VariantFile:
    vf = variant_file_from_dict(_read_json(path))
    logger.debug("Loaded %d variants for %s from %s", len(vf.variants), vf.base_calendar, path)
    return vf
