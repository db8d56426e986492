from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from .errors import VariantWarning
from .loader import VariantFile
from .types import CalendarDate, CalendarDefinition, IntercalaryDay
from ..compat.adjuster import CompatibilityAdjuster
from ..engines.calendar import CalendarEngine
from ..variants.resolver import default_variant_id, expand_variants

logger = logging.getLogger(__name__)


class Engine(Protocol):
    definition: CalendarDefinition

    def info(self) -> Dict[str, Any]: ...
    def is_leap_year(self, year: int) -> bool: ...
    def year_length(self, year: int) -> int: ...
    def month_length(self, month: int, year: int) -> int: ...
    def calculate_weekday(self, year: int, month: int, day: int) -> int: ...
    def date_to_world_time(self, date: CalendarDate, world_creation_offset: int = 0) -> int: ...
    def world_time_to_date(self, world_time: Any, world_creation_offset: int = 0) -> CalendarDate: ...
    def get_intercalary_days_after_month(self, month: int, year: int) -> List[IntercalaryDay]: ...


def _new_engine(defn: CalendarDefinition) -> Engine:
    return CalendarEngine(defn)


@dataclass
class CalendarRegistry:
    """
    Loaded calendars, their engines and the active selection. Variant
    calendars are stored under their full ``base(variant)`` ids next to
    their bases.
    """
    _engines: Dict[str, Engine] = field(default_factory=dict)
    _active: Optional[str] = None
    _inline_ids: Dict[str, List[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.compatibility = CompatibilityAdjuster(self._lookup_definition)

    def _lookup_definition(self, calendar_id: str) -> Optional[CalendarDefinition]:
        eng = self._engines.get(calendar_id)
        return eng.definition if eng is not None else None

    def get(self, name: str) -> Engine:
        if name not in self._engines:
            raise KeyError(f"Unknown calendar '{name}'. Available: {sorted(self._engines)}")
        return self._engines[name]

    def definition(self, name: str) -> CalendarDefinition:
        return self.get(name).definition

    def list(self) -> List[str]:
        return sorted(self._engines.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._engines

    def register(self, name: str, engine: Engine, *, overwrite: bool = False) -> None:
        if (not overwrite) and (name in self._engines):
            raise KeyError(f"Calendar '{name}' already exists. Use overwrite=True to replace.")
        self._engines[name] = engine

    def load(self, definition: CalendarDefinition, *, overwrite: bool = False) -> List[str]:
        """
        Register a base calendar and one engine per inline variant. Returns the
        new ids. Reloading a base drops the inline variants it no longer declares.
        """
        self.register(definition.id, _new_engine(definition), overwrite=overwrite)
        derived = expand_variants(definition, source="inline")
        for stale in self._inline_ids.pop(definition.id, []):
            if stale in derived:
                continue
            self._engines.pop(stale, None)
            if stale == self._active:
                logger.info("Active calendar %s was removed by a reload", stale)
                self._active = None
        for vid, variant_def in derived.items():
            self.register(vid, _new_engine(variant_def), overwrite=True)
        self._inline_ids[definition.id] = list(derived)
        logger.info("Loaded calendar %s (%d variants)", definition.id, len(derived))
        return [definition.id, *derived]

    def load_external_variants(self, variant_file: VariantFile) -> List[str]:
        """
        Add the variants of an external file to its base calendar. They are
        reachable by full id only and never become the base's default.
        """
        base = self._lookup_definition(variant_file.base_calendar)
        if base is None:
            msg = f"Base calendar '{variant_file.base_calendar}' not found for variant file: {variant_file.id}"
            logger.warning(msg)
            warnings.warn(msg, VariantWarning, stacklevel=2)
            return []
        added = []
        for vid, derived in expand_variants(base, variant_file.variants, source="external").items():
            self.register(vid, _new_engine(derived), overwrite=True)
            added.append(vid)
        logger.debug("Loaded external variant file %s (%d variants)", variant_file.id, len(added))
        return added

    def resolve_default_variant(self, calendar_id: str) -> str:
        if "(" in calendar_id and ")" in calendar_id:
            return calendar_id
        base = self._lookup_definition(calendar_id)
        if base is not None:
            default = default_variant_id(base)
            if default is not None and default in self._engines:
                return default
        return calendar_id

    def set_active(self, calendar_id: str) -> str:
        resolved = self.resolve_default_variant(calendar_id)
        self.get(resolved)
        if resolved != self._active:
            logger.info("Active calendar: %s", resolved)
        self._active = resolved
        return resolved

    @property
    def active_id(self) -> Optional[str]:
        return self._active

    def active_engine(self) -> Engine:
        if self._active is None:
            raise KeyError("No active calendar. Call set_active() first.")
        return self.get(self._active)
