from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

from ..core.types import CalendarDate, CalendarDefinition, Moon, Season
from .registry import AttributeRegistry, days_since

PHASE_TOLERANCE = 1e-6


def _moon_phase(engine, date: CalendarDate, moon: Moon) -> Dict[str, Any]:
    y, m, d = moon.first_new_moon
    elapsed = days_since(engine, date, CalendarDate(y, m, d))
    pos = elapsed % moon.cycle_length  # float mod is non-negative here

    start = 0.0
    index = len(moon.phases) - 1
    for i, phase in enumerate(moon.phases):
        if pos < start + phase.length - PHASE_TOLERANCE:
            index = i
            break
        start += phase.length
    else:
        start -= moon.phases[-1].length

    phase = moon.phases[index]
    in_phase = min(max(round(pos - start, 6), 0.0), phase.length)
    return {
        "moon": moon.name,
        "phase": phase.name,
        "phase_index": index,
        "day_in_phase": int(in_phase),
        "phase_progress": in_phase / phase.length if phase.length > 0 else 0.0,
    }


def moons(engine, date: CalendarDate) -> Dict[str, Any]:
    ms = engine.definition.moons
    return {"moons": [_moon_phase(engine, date, m) for m in ms if m.phases]}


def _season_key(engine, date: CalendarDate) -> Tuple[int, int]:
    # intercalary days sort at the edge of their anchor month
    if date.intercalary is None:
        return date.month, date.day
    month_days = engine.month_length(date.month, date.year)
    for ic in engine.get_intercalary_days_before_month(date.month, date.year):
        if ic.name == date.intercalary:
            return date.month, 0
    return date.month, month_days + date.day


def find_season(defn: CalendarDefinition, key: Tuple[int, int]) -> Optional[Season]:
    """
    Seasons with an explicit end cover [start, end]; open-ended seasons run
    until the next season starts. Ranges may cross the year boundary.
    """
    seasons = defn.seasons
    for i, s in enumerate(seasons):
        start = (s.start_month, s.start_day)
        if s.end_month is not None:
            end = (s.end_month, s.end_day if s.end_day is not None else 10 ** 9)
            inside = start <= key <= end if start <= end else (key >= start or key <= end)
        else:
            nxt = seasons[(i + 1) % len(seasons)]
            stop = (nxt.start_month, nxt.start_day)
            inside = start <= key < stop if start < stop else (key >= start or key < stop)
        if inside:
            return s
    return None


def season(engine, date: CalendarDate) -> Dict[str, Any]:
    s = find_season(engine.definition, _season_key(engine, date))
    return {"season": s.name if s is not None else None}


_ORDINALS = {1: "st", 2: "nd", 3: "rd"}


def _ordinal(n: int) -> str:
    suffix = "th" if 10 <= n % 100 <= 20 else _ORDINALS.get(n % 10, "th")
    return f"{n}{suffix}"


def week(engine, date: CalendarDate) -> Dict[str, Any]:
    n = engine.week_of_month(date)
    cfg = engine.definition.weeks
    name = None
    if n is not None and cfg is not None:
        if n <= len(cfg.names):
            name = cfg.names[n - 1].name
        elif cfg.naming_pattern == "ordinal":
            name = f"{_ordinal(n)} Week"
        elif cfg.naming_pattern == "numeric":
            name = f"Week {n}"
    return {"week_of_month": n, "week_name": name}


def canonical_hour(engine, date: CalendarDate) -> Dict[str, Any]:
    """Start is inclusive, end exclusive; ranges may wrap past midnight."""
    if date.time is None:
        return {"canonical_hour": None}
    per_hour = engine.definition.time.minutes_in_hour
    t = date.time.hour * per_hour + date.time.minute
    for ch in engine.definition.canonical_hours:
        start = ch.start_hour * per_hour + ch.start_minute
        end = ch.end_hour * per_hour + ch.end_minute
        inside = start <= t < end if start < end else (t >= start or t < end)
        if inside:
            return {"canonical_hour": ch.name}
    return {"canonical_hour": None}


def standard_attributes() -> AttributeRegistry:
    reg = AttributeRegistry()
    reg.register("moons", moons)
    reg.register("season", season)
    reg.register("week", week)
    reg.register("canonical_hour", canonical_hour)
    return reg
