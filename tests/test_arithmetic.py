# tests/test_arithmetic.py

from worldcal.core.types import CalendarDate, TimeOfDay
from worldcal.engines.calendar import CalendarEngine


def test_add_months_clamps_to_shorter_month(gregorian):
    d = gregorian.add_months(gregorian.make_date(2024, 1, 31), 1)
    assert (d.year, d.month, d.day) == (2024, 2, 29)
    d = gregorian.add_months(gregorian.make_date(2023, 1, 31), 1)
    assert (d.year, d.month, d.day) == (2023, 2, 28)
    assert d.weekday == gregorian.calculate_weekday(2023, 2, 28)


def test_add_months_carries_years(gregorian):
    d = gregorian.make_date(2024, 11, 15)
    assert gregorian.add_months(d, 3) == gregorian.make_date(2025, 2, 15)
    assert gregorian.add_months(d, -11) == gregorian.make_date(2023, 12, 15)
    assert gregorian.add_months(d, -23) == gregorian.make_date(2022, 12, 15)
    assert gregorian.add_months(d, 0) == d


def test_add_months_keeps_time(gregorian):
    d = gregorian.make_date(2024, 3, 31, TimeOfDay(8, 15, 0))
    out = gregorian.add_months(d, 1)
    assert out == gregorian.make_date(2024, 4, 30, TimeOfDay(8, 15, 0))


def test_add_years_feb_29(gregorian):
    d = gregorian.make_date(2024, 2, 29)
    assert gregorian.add_years(d, 1) == gregorian.make_date(2025, 2, 28)
    assert gregorian.add_years(d, 4) == gregorian.make_date(2028, 2, 29)
    assert gregorian.add_years(d, -2024) == gregorian.make_date(0, 2, 29)


def test_add_days_crosses_leap_day(gregorian):
    d = gregorian.add_days(gregorian.make_date(2024, 2, 28), 1)
    assert (d.month, d.day) == (2, 29)
    d = gregorian.add_days(gregorian.make_date(2023, 2, 28), 1)
    assert (d.month, d.day) == (3, 1)
    assert gregorian.add_days(gregorian.make_date(2000, 1, 1), -1) == gregorian.make_date(1999, 12, 31)


def test_add_days_keeps_untimed_dates_untimed(gregorian):
    d = gregorian.add_days(gregorian.make_date(2024, 5, 1), 10)
    assert d.time is None
    timed = gregorian.add_days(gregorian.make_date(2024, 5, 1, TimeOfDay(6, 0, 0)), 10)
    assert timed.time == TimeOfDay(6, 0, 0)


def test_add_hours_and_minutes(gregorian):
    d = gregorian.make_date(2024, 12, 31, TimeOfDay(23, 30, 0))
    out = gregorian.add_hours(d, 1)
    assert (out.year, out.month, out.day) == (2025, 1, 1)
    assert out.time == TimeOfDay(0, 30, 0)
    out = gregorian.add_minutes(d, -31)
    assert out.time == TimeOfDay(22, 59, 0)
    assert gregorian.add_hours(gregorian.make_date(2024, 1, 1), 5).time == TimeOfDay(5, 0, 0)


def test_add_weeks_uses_week_length(gregorian, harptos):
    d = gregorian.add_weeks(gregorian.make_date(2024, 1, 1), 2)
    assert (d.month, d.day) == (1, 15)
    h = harptos.add_weeks(harptos.make_date(1492, 3, 1), 2)
    assert (h.month, h.day) == (3, 21)


def test_add_days_walks_through_festivals(harptos):
    d = harptos.make_date(1492, 1, 30)
    mw = harptos.add_days(d, 1)
    assert mw.intercalary == "Midwinter"
    assert harptos.add_days(mw, 1) == harptos.make_date(1492, 2, 1)
    # Shieldmeet follows Midsummer in leap years only
    ms = harptos.add_days(harptos.make_date(1372, 7, 30), 1)
    assert ms.intercalary == "Midsummer"
    assert harptos.add_days(ms, 1).intercalary == "Shieldmeet"
    assert harptos.add_days(ms, 2) == harptos.make_date(1372, 8, 1)
    ms = harptos.add_days(harptos.make_date(1373, 7, 30), 1)
    assert harptos.add_days(ms, 1) == harptos.make_date(1373, 8, 1)


def test_add_days_matches_day_count(mixed_def):
    eng = CalendarEngine(mixed_def)
    start = eng.make_date(95, 2, 3)
    for n in (-400, -37, 0, 1, 88, 1000):
        out = eng.add_days(start, n)
        assert eng.date_to_days(out) - eng.date_to_days(start) == n


def test_add_months_from_intercalary_lands_on_month_day(harptos):
    mw = harptos.make_date(1492, 1, 1, intercalary="Midwinter")
    out = harptos.add_months(mw, 1)
    assert out.intercalary is None
    assert (out.year, out.month, out.day) == (1492, 2, 1)


def test_arithmetic_never_mutates_input(gregorian):
    d = CalendarDate(2024, 1, 31, weekday=3)
    gregorian.add_months(d, 1)
    gregorian.add_days(d, 5)
    assert d == CalendarDate(2024, 1, 31, weekday=3)
