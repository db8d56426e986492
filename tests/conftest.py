# tests/conftest.py

import pytest

from worldcal.core.types import (
    CalendarDefinition,
    IntercalaryDay,
    LeapYearRule,
    MonthDef,
    WeekdayDef,
    YearConfig,
)
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.factory import build_registry
from worldcal.engines.specs import GREGORIAN_DEF, HARPTOS_DEF


def make_def(
    *,
    id="test",
    months=(("One", 10), ("Two", 10), ("Three", 10)),
    weekdays=("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    intercalary=(),
    leap=LeapYearRule(),
    epoch=0,
    start_day=0,
    **kw,
):
    return CalendarDefinition(
        id=id,
        label=id.title(),
        year=YearConfig(epoch=epoch, start_day=start_day),
        leap_year=leap,
        months=tuple(MonthDef(n, d) for n, d in months),
        weekdays=tuple(WeekdayDef(n) for n in weekdays),
        intercalary=tuple(intercalary),
        **kw,
    )


@pytest.fixture
def gregorian():
    return CalendarEngine(GREGORIAN_DEF)


@pytest.fixture
def harptos():
    return CalendarEngine(HARPTOS_DEF)


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def mixed_def():
    """Leap month, a leap-only period, a before-month period and an uncounted festival."""
    return make_def(
        id="mixed",
        months=(("Frost", 20), ("Thaw", 15), ("Bloom", 25), ("Ember", 20)),
        weekdays=("A", "B", "C", "D", "E"),
        leap=LeapYearRule("custom", interval=3, month=2, extra_days=2),
        intercalary=(
            IntercalaryDay("Turning", after_month=1, days_count=2, counts_for_weekdays=False),
            IntercalaryDay("Leapfeast", after_month=3, leap_year_only=True),
            IntercalaryDay("Eve", before_month=4, days_count=3),
        ),
        epoch=100,
        start_day=2,
    )
