# tests/test_variants.py

import pytest

from worldcal.core.errors import VariantOverrideError, VariantWarning
from worldcal.core.types import CalendarVariant, frozen_mapping
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.specs import GREGORIAN_DEF
from worldcal.variants.resolver import default_variant_id, expand_variants, resolve_variant


def variant(name="V", default=False, config=None, **overrides):
    return CalendarVariant(
        name=name,
        default=default,
        config=frozen_mapping(config),
        overrides=frozen_mapping(overrides),
    )


def test_identity_fields():
    out = resolve_variant(GREGORIAN_DEF, "eberron", variant("Eberron"))
    assert out.id == "gregorian(eberron)"
    assert out.label == "Gregorian Calendar (Eberron)"
    assert out.variants == {}
    assert out.months == GREGORIAN_DEF.months


def test_year_is_shallow_merged():
    out = resolve_variant(GREGORIAN_DEF, "v", variant(year={"epoch": 0, "suffix": " YK"}))
    assert out.year.epoch == 0
    assert out.year.suffix == " YK"
    assert out.year.start_day == GREGORIAN_DEF.year.start_day
    assert GREGORIAN_DEF.year.epoch == 1970


def test_months_merge_by_current_name():
    out = resolve_variant(GREGORIAN_DEF, "v", variant(months={
        "January": {"name": "Deepwinter"},
        "Deepwinter": {"days": 40},
        "Smarch": {"days": 99},
    }))
    assert out.months[0].name == "Deepwinter"
    assert out.months[0].days == 40
    assert out.months[0].abbreviation == "Jan"
    assert [m.name for m in out.months[1:]] == [m.name for m in GREGORIAN_DEF.months[1:]]
    assert GREGORIAN_DEF.months[0].name == "January"


def test_weekdays_merge_by_name():
    out = resolve_variant(GREGORIAN_DEF, "v", variant(weekdays={"Sunday": {"name": "Sul", "abbreviation": "Su"}}))
    assert out.weekdays[0].name == "Sul"
    assert out.weekdays[0].abbreviation == "Su"
    assert len(out.weekdays) == 7


def test_date_formats_widgets_merge_key_by_key():
    out = resolve_variant(GREGORIAN_DEF, "v", variant(dateFormats={
        "iso": "{{year}}/{{month}}",
        "long": "{{weekday}}",
        "widgets": {"mini": "{{day}}"},
    }))
    assert out.date_formats["iso"] == "{{year}}/{{month}}"
    assert out.date_formats["long"] == "{{weekday}}"
    assert out.date_formats["widgets"] == {
        "mini": "{{day}}",
        "main": GREGORIAN_DEF.date_formats["widgets"]["main"],
    }


def test_moons_replaced_even_when_empty():
    assert resolve_variant(GREGORIAN_DEF, "v", variant(moons=[])).moons == ()
    out = resolve_variant(GREGORIAN_DEF, "v", variant(moons=[{
        "name": "Zarantyr", "cycleLength": 28,
        "firstNewMoon": {"year": 998, "month": 1, "day": 1},
        "phases": [{"name": "New", "length": 14}, {"name": "Full", "length": 14}],
    }]))
    assert [m.name for m in out.moons] == ["Zarantyr"]
    assert resolve_variant(GREGORIAN_DEF, "v", variant()).moons == GREGORIAN_DEF.moons


def test_canonical_hours_replaced():
    out = resolve_variant(GREGORIAN_DEF, "v", variant(canonicalHours=[{"name": "Vespers", "startHour": 18, "endHour": 19}]))
    assert [h.name for h in out.canonical_hours] == ["Vespers"]


def test_config_becomes_variant_config_and_year_offset():
    out = resolve_variant(GREGORIAN_DEF, "v", variant(config={"yearOffset": 2700}))
    assert out.variant_config["yearOffset"] == 2700
    eng = CalendarEngine(out)
    assert eng.display_year(2024) == 4724
    assert CalendarEngine(GREGORIAN_DEF).display_year(2024) == 2024


@pytest.mark.parametrize("overrides", [
    {"months": "January"},
    {"months": {"January": {"days": "thirty"}}},
    {"months": {"January": {"days": -1}}},
    {"year": {"epoch": "zero"}},
    {"year": 5},
    {"dateFormats": ["x"]},
    {"moons": [{"name": "M", "cycleLength": -1, "firstNewMoon": {"year": 0, "month": 1, "day": 1}}]},
])
def test_malformed_overrides_raise(overrides):
    with pytest.raises(VariantOverrideError):
        resolve_variant(GREGORIAN_DEF, "bad", variant(**overrides))


def test_expand_skips_bad_entries_and_keeps_the_rest():
    variants = {
        "good": variant("Good", year={"epoch": 0}),
        "bad": variant("Bad", months="nope"),
        "also": variant("Also"),
    }
    with pytest.warns(VariantWarning, match=r"gregorian\(bad\)"):
        out = expand_variants(GREGORIAN_DEF, variants)
    assert sorted(out) == ["gregorian(also)", "gregorian(good)"]
    assert out["gregorian(good)"].year.epoch == 0
    assert GREGORIAN_DEF.year.epoch == 1970


def test_default_variant_scans_inline_variants():
    base = GREGORIAN_DEF.tweak(variants=frozen_mapping({
        "a": variant("A"),
        "b": variant("B", default=True),
    }))
    assert default_variant_id(base) == "gregorian(b)"
    assert default_variant_id(GREGORIAN_DEF) is None


def test_definitions_are_immutable():
    out = resolve_variant(GREGORIAN_DEF, "v", variant())
    with pytest.raises(TypeError):
        out.date_formats["iso"] = "x"
    with pytest.raises(AttributeError):
        out.id = "other"
