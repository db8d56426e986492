"""
worldcal.variants.resolver
--------------------------
Derives variant calendars from a base definition.

A variant is a partial overlay (year fields, months and weekdays by name,
date formats, moons, canonical hours). Resolution builds a new definition
field by field; the base is never touched, so one bad variant cannot leak
into the base or into its siblings.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Tuple, TypeVar

from ..core.errors import CalendarValidationError, VariantOverrideError, VariantWarning
from ..core.loader import canonical_hours_from_list, moons_from_list
from ..core.types import (
    CalendarDefinition,
    CalendarVariant,
    MonthDef,
    WeekdayDef,
    YearConfig,
    frozen_mapping,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", MonthDef, WeekdayDef)

_YEAR_FIELDS = {
    "epoch": ("epoch", int),
    "currentYear": ("current_year", int),
    "prefix": ("prefix", str),
    "suffix": ("suffix", str),
    "startDay": ("start_day", int),
}
_MONTH_FIELDS = {
    "name": ("name", str),
    "days": ("days", int),
    "abbreviation": ("abbreviation", str),
    "description": ("description", str),
}
_WEEKDAY_FIELDS = {k: v for k, v in _MONTH_FIELDS.items() if k != "days"}


def variant_id_of(base_id: str, variant_id: str) -> str:
    return f"{base_id}({variant_id})"


def _typed_changes(patch: Any, fields: Mapping[str, Tuple[str, type]], where: str) -> Dict[str, Any]:
    """camelCase patch -> dataclass field changes, checking value types."""
    if not isinstance(patch, Mapping):
        raise VariantOverrideError(f"{where} must be an object, got {type(patch).__name__}")
    changes: Dict[str, Any] = {}
    for key, value in patch.items():
        if key not in fields:
            logger.debug("Ignoring unknown override key %s.%s", where, key)
            continue
        attr, typ = fields[key]
        if isinstance(value, bool) or not isinstance(value, typ):
            raise VariantOverrideError(f"{where}.{key} must be {typ.__name__}, got {value!r}")
        changes[attr] = value
    if changes.get("days", 0) < 0:
        raise VariantOverrideError(f"{where}.days must be >= 0")
    return changes


def _merge_by_name(items: Tuple[T, ...], patch: Any, fields: Mapping[str, Tuple[str, type]], where: str) -> Tuple[T, ...]:
    """
    Apply per-name patches in order. Lookups use the names as they stand
    after earlier patches, so a rename is visible to later entries.
    Names that match nothing are ignored.
    """
    if not isinstance(patch, Mapping):
        raise VariantOverrideError(f"{where} must be an object keyed by name")
    out = list(items)
    for name, entry in patch.items():
        changes = _typed_changes(entry, fields, f"{where}.{name}")
        for i, item in enumerate(out):
            if item.name == name:
                out[i] = replace(item, **changes)
                break
        else:
            logger.debug("Override %s.%s matches nothing; ignored", where, name)
    return tuple(out)


def _merge_date_formats(base: Mapping[str, Any], patch: Any) -> Mapping[str, Any]:
    if not isinstance(patch, Mapping):
        raise VariantOverrideError("overrides.dateFormats must be an object")
    merged = dict(base)
    merged.update(patch)
    base_widgets = base.get("widgets")
    patch_widgets = patch.get("widgets")
    if base_widgets or patch_widgets:
        if patch_widgets is not None and not isinstance(patch_widgets, Mapping):
            raise VariantOverrideError("overrides.dateFormats.widgets must be an object")
        widgets = dict(base_widgets or {})
        widgets.update(patch_widgets or {})
        merged["widgets"] = widgets
    return frozen_mapping(merged)


def resolve_variant(base: CalendarDefinition, variant_id: str, variant: CalendarVariant) -> CalendarDefinition:
    """
    Build the definition for ``base(variant_id)``.

    Raises VariantOverrideError when the overrides have the wrong shape.
    """
    ov = variant.overrides
    if not isinstance(ov, Mapping):
        raise VariantOverrideError(f"variant {variant_id}: overrides must be an object")
    if not isinstance(variant.config, Mapping):
        raise VariantOverrideError(f"variant {variant_id}: config must be an object")

    year: YearConfig = base.year
    if "year" in ov:
        year = replace(base.year, **_typed_changes(ov["year"], _YEAR_FIELDS, "overrides.year"))

    months = base.months
    if "months" in ov:
        months = _merge_by_name(base.months, ov["months"], _MONTH_FIELDS, "overrides.months")

    weekdays = base.weekdays
    if "weekdays" in ov:
        weekdays = _merge_by_name(base.weekdays, ov["weekdays"], _WEEKDAY_FIELDS, "overrides.weekdays")

    date_formats = base.date_formats
    if "dateFormats" in ov:
        date_formats = _merge_date_formats(base.date_formats, ov["dateFormats"])

    new_id = variant_id_of(base.id, variant_id)
    moons = base.moons
    canonical_hours = base.canonical_hours
    try:
        # present-but-empty replaces too
        if "moons" in ov:
            moons = moons_from_list(ov["moons"], new_id)
        if "canonicalHours" in ov:
            canonical_hours = canonical_hours_from_list(ov["canonicalHours"], new_id)
    except CalendarValidationError as e:
        raise VariantOverrideError(str(e)) from e

    return base.tweak(
        id=new_id,
        label=f"{base.label} ({variant.name})",
        year=year,
        months=months,
        weekdays=weekdays,
        date_formats=date_formats,
        moons=moons,
        canonical_hours=canonical_hours,
        variants=frozen_mapping(None),
        variant_config=frozen_mapping(variant.config),
    )


def expand_variants(
    base: CalendarDefinition,
    variants: Optional[Mapping[str, CalendarVariant]] = None,
    source: str = "inline",
) -> Dict[str, CalendarDefinition]:
    """
    Resolve every variant of ``base`` (its inline variants when ``variants``
    is None). Malformed entries are skipped with a VariantWarning.
    """
    if variants is None:
        variants = base.variants
    out: Dict[str, CalendarDefinition] = {}
    for vid, variant in variants.items():
        try:
            derived = resolve_variant(base, vid, variant)
        except VariantOverrideError as e:
            msg = f"Skipping {source} variant {variant_id_of(base.id, vid)}: {e}"
            logger.warning(msg)
            warnings.warn(msg, VariantWarning, stacklevel=2)
            continue
        out[derived.id] = derived
        logger.debug("Created %s calendar variant: %s", source, derived.id)
    return out


def default_variant_id(base: CalendarDefinition) -> Optional[str]:
    """Full id of the first inline variant marked default, if any."""
    for vid, variant in base.variants.items():
        if variant.default:
            return variant_id_of(base.id, vid)
    return None
