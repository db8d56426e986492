# tests/test_compatibility.py

from worldcal.compat.adjuster import CompatibilityAdjuster
from worldcal.core.types import CalendarDate, CompatibilityAdjustment, frozen_mapping
from worldcal.engines.specs import GREGORIAN_DEF, HARPTOS_DEF


def lookup(*defs):
    table = {d.id: d for d in defs}
    return table.get


def test_identity_when_nothing_registered():
    adj = CompatibilityAdjuster(lookup(GREGORIAN_DEF))
    assert adj.adjust_weekday(5, "gregorian", "dnd5e") == 5
    assert not adj.has("gregorian", "dnd5e")


def test_negative_offset_wraps_into_range():
    adj = CompatibilityAdjuster(lookup(GREGORIAN_DEF))
    adj.register_offset("pf2e", "gregorian", -5)
    assert [adj.adjust_weekday(r, "gregorian", "pf2e") for r in range(7)] == [2, 3, 4, 5, 6, 0, 1]
    adj.register_offset("pf2e", "gregorian", -19)
    assert all(0 <= adj.adjust_weekday(r, "gregorian", "pf2e") < 7 for r in range(7))


def test_modulus_follows_calendar_weekdays():
    adj = CompatibilityAdjuster(lookup(HARPTOS_DEF))
    adj.register_offset("sys", "harptos", 7)
    assert adj.adjust_weekday(5, "harptos", "sys") == 2


def test_unknown_calendar_uses_seven_day_week():
    adj = CompatibilityAdjuster()
    adj.register_offset("sys", "homebrew", 3)
    assert adj.adjust_weekday(6, "homebrew", "sys") == 2


def test_calendar_defined_adjustment_wins():
    defn = GREGORIAN_DEF.tweak(compatibility=frozen_mapping({"pf2e": CompatibilityAdjustment(weekday_offset=2)}))
    adj = CompatibilityAdjuster(lookup(defn))
    adj.register_offset("pf2e", "gregorian", 5)
    assert adj.adjust_weekday(0, "gregorian", "pf2e") == 2
    assert adj.get("gregorian", "pf2e").weekday_offset == 2


def test_scoped_by_system_and_calendar():
    adj = CompatibilityAdjuster(lookup(GREGORIAN_DEF, HARPTOS_DEF))
    adj.register_offset("pf2e", "gregorian", 1)
    assert adj.adjust_weekday(0, "harptos", "pf2e") == 0
    assert adj.adjust_weekday(0, "gregorian", "dnd5e") == 0
    assert adj.list_entries() == [("pf2e", "gregorian", CompatibilityAdjustment(weekday_offset=1))]


def test_adjust_date_format():
    adj = CompatibilityAdjuster(lookup(GREGORIAN_DEF))
    adj.register("sys", "gregorian", CompatibilityAdjustment(weekday_offset=1, month_offset=-1, day_offset=1))
    d = CalendarDate(2024, 3, 9, weekday=6)
    out = adj.adjust_date_format(d, "gregorian", "sys")
    assert (out.month, out.day, out.weekday) == (2, 10, 0)
    assert d.month == 3
    assert adj.adjust_date_format(d, "gregorian", "other") is d
