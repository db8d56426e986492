"""
worldcal.compat.adjuster
------------------------
Per-system display adjustments for engine output. Host game systems may
count weekdays (or number months and days) differently from the calendar
itself; the adjuster maps raw values into a system's convention without
touching the definition or the engine.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from ..core.types import CalendarDate, CalendarDefinition, CompatibilityAdjustment

logger = logging.getLogger(__name__)

DefinitionLookup = Callable[[str], Optional[CalendarDefinition]]

DEFAULT_WEEKDAY_COUNT = 7


class CompatibilityAdjuster:
    """
    Adjustments keyed by (system_id, calendar_id). An adjustment declared by
    the calendar itself (``definition.compatibility``) wins over a
    registered one. Missing adjustments are identity transforms.
    """

    def __init__(self, definitions: Optional[DefinitionLookup] = None):
        self._definitions = definitions or (lambda _id: None)
        self._entries: Dict[Tuple[str, str], CompatibilityAdjustment] = {}

    def register(self, system_id: str, calendar_id: str, adjustment: CompatibilityAdjustment) -> None:
        key = (system_id, calendar_id)
        if key in self._entries:
            logger.debug("Replacing compatibility adjustment for %s on %s", calendar_id, system_id)
        self._entries[key] = adjustment

    def register_offset(self, system_id: str, calendar_id: str, offset: int, *, description: Optional[str] = None) -> None:
        self.register(system_id, calendar_id, CompatibilityAdjustment(weekday_offset=offset, description=description))

    def get(self, calendar_id: str, system_id: str) -> Optional[CompatibilityAdjustment]:
        defn = self._definitions(calendar_id)
        if defn is not None and system_id in defn.compatibility:
            return defn.compatibility[system_id]
        return self._entries.get((system_id, calendar_id))

    def has(self, calendar_id: str, system_id: str) -> bool:
        return self.get(calendar_id, system_id) is not None

    def list_entries(self) -> List[Tuple[str, str, CompatibilityAdjustment]]:
        return [(s, c, adj) for (s, c), adj in sorted(self._entries.items())]

    def _weekday_count(self, calendar_id: str) -> int:
        defn = self._definitions(calendar_id)
        if defn is None or not defn.weekdays:
            return DEFAULT_WEEKDAY_COUNT
        return len(defn.weekdays)

    def adjust_weekday(self, raw: int, calendar_id: str, system_id: str) -> int:
        adj = self.get(calendar_id, system_id)
        if adj is None or adj.weekday_offset == 0:
            return raw
        return (raw + adj.weekday_offset) % self._weekday_count(calendar_id)

    def adjust_date_format(self, date: CalendarDate, calendar_id: str, system_id: str) -> CalendarDate:
        """Shift displayed month/day numbers; the weekday gets the weekday offset."""
        adj = self.get(calendar_id, system_id)
        if adj is None:
            return date
        return replace(
            date,
            month=date.month + adj.month_offset,
            day=date.day + adj.day_offset,
            weekday=None if date.weekday is None else self.adjust_weekday(date.weekday, calendar_id, system_id),
        )
