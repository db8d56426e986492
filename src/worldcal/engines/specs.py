from __future__ import annotations

from typing import Dict, Sequence, Tuple

from ..core.types import (
    CalendarDefinition,
    CanonicalHour,
    IntercalaryDay,
    LeapYearRule,
    MonthDef,
    Moon,
    MoonPhase,
    Season,
    WeekConfig,
    WeekdayDef,
    WeekName,
    YearConfig,
    frozen_mapping,
)
from .factory import EngineSpec


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def months_of(*pairs: Tuple[str, int]) -> Tuple[MonthDef, ...]:
    """(name, days) pairs; the abbreviation is the first three letters."""
    return tuple(MonthDef(name, days, name[:3]) for name, days in pairs)


def weekdays_of(names: Sequence[str], abbr_len: int = 3) -> Tuple[WeekdayDef, ...]:
    return tuple(WeekdayDef(n, n[:abbr_len]) for n in names)


def festival(name: str, after: int, *, leap_only: bool = False, description: str | None = None) -> IntercalaryDay:
    """One-day holiday outside the week cycle."""
    return IntercalaryDay(
        name=name,
        after_month=after,
        leap_year_only=leap_only,
        counts_for_weekdays=False,
        description=description,
    )


def eight_phases(cycle: float) -> Tuple[MoonPhase, ...]:
    """Four single-day principal phases with the remainder split evenly between them."""
    span = (cycle - 4) / 4
    names = (
        ("New Moon", True), ("Waxing Crescent", False),
        ("First Quarter", True), ("Waxing Gibbous", False),
        ("Full Moon", True), ("Waning Gibbous", False),
        ("Last Quarter", True), ("Waning Crescent", False),
    )
    return tuple(MoonPhase(n, 1 if single else span, single) for n, single in names)


# ============================================================
# GREGORIAN
# ============================================================

# Epoch 1970 with Thursday as day one, so world time is Unix time.
GREGORIAN_DEF = CalendarDefinition(
    id="gregorian",
    label="Gregorian Calendar",
    description="Standard Earth calendar",
    year=YearConfig(epoch=1970, current_year=2024, suffix=" CE", start_day=4),
    leap_year=LeapYearRule("gregorian", month=2),
    months=months_of(
        ("January", 31), ("February", 28), ("March", 31), ("April", 30),
        ("May", 31), ("June", 30), ("July", 31), ("August", 31),
        ("September", 30), ("October", 31), ("November", 30), ("December", 31),
    ),
    weekdays=weekdays_of(("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")),
    moons=(
        Moon("Luna", 29.530588, (2000, 1, 6), eight_phases(29.530588), "#f0f0e0"),
    ),
    seasons=(
        Season("Spring", 3, 20, 6, 20),
        Season("Summer", 6, 21, 9, 21),
        Season("Autumn", 9, 22, 12, 20),
        Season("Winter", 12, 21, 3, 19),
    ),
    date_formats=frozen_mapping({
        "iso": "{{year}}-{{month}}-{{day}}",
        "widgets": {"mini": "{{month:short}} {{day}}", "main": "{{weekday}}, {{month}} {{day}}"},
    }),
)

GREGORIAN = EngineSpec(kind="calendar", id=GREGORIAN_DEF.id, payload=GREGORIAN_DEF)


# ============================================================
# HARPTOS (tenday weeks, festivals outside the week)
# ============================================================

HARPTOS_MONTHS = months_of(
    ("Hammer", 30), ("Alturiak", 30), ("Ches", 30), ("Tarsakh", 30),
    ("Mirtul", 30), ("Kythorn", 30), ("Flamerule", 30), ("Eleasis", 30),
    ("Eleint", 30), ("Marpenoth", 30), ("Uktar", 30), ("Nightal", 30),
)

HARPTOS_DEF = CalendarDefinition(
    id="harptos",
    label="Calendar of Harptos",
    description="Twelve months of three tendays, with festival days between them",
    year=YearConfig(epoch=0, current_year=1492, suffix=" DR", start_day=0),
    leap_year=LeapYearRule("custom", interval=4),
    months=HARPTOS_MONTHS,
    weekdays=weekdays_of(
        ("First-day", "Second-day", "Third-day", "Fourth-day", "Fifth-day",
         "Sixth-day", "Seventh-day", "Eighth-day", "Ninth-day", "Tenth-day"),
        abbr_len=2,
    ),
    intercalary=(
        festival("Midwinter", 1),
        festival("Greengrass", 4),
        festival("Midsummer", 7),
        festival("Shieldmeet", 7, leap_only=True, description="Follows Midsummer once every four years"),
        festival("Highharvestide", 9),
        festival("Feast of the Moon", 11),
    ),
    moons=(
        Moon("Selune", 30.4375, (1372, 1, 1), eight_phases(30.4375), "#e0e8ff"),
    ),
    seasons=(
        Season("Winter", 1, 1),
        Season("Spring", 3, 19),
        Season("Summer", 6, 20),
        Season("Autumn", 9, 21),
        Season("Winter", 12, 20),
    ),
    canonical_hours=(
        CanonicalHour("Dawn", 5, 7),
        CanonicalHour("Highsun", 11, 13),
        CanonicalHour("Dusk", 18, 20),
        CanonicalHour("Midnight", 23, 1),
    ),
    weeks=WeekConfig(
        type="month-based",
        per_month=3,
        days_per_week=10,
        names=(WeekName("First Tenday"), WeekName("Second Tenday"), WeekName("Third Tenday")),
        naming_pattern="ordinal",
    ),
)

HARPTOS = EngineSpec(kind="calendar", id=HARPTOS_DEF.id, payload=HARPTOS_DEF)


ALL_SPECS: Dict[str, EngineSpec] = {
    GREGORIAN.id: GREGORIAN,
    HARPTOS.id: HARPTOS,
}
