from __future__ import annotations
from typing import Any, Callable, Dict, List, Sequence

from ..core.types import CalendarDate

AttrFunc = Callable[[Any, CalendarDate], Dict[str, Any]]


class AttributeRegistry:
    """Named per-day attribute functions ``(engine, date) -> dict``."""

    def __init__(self) -> None:
        self._fns: Dict[str, AttrFunc] = {}

    def register(self, name: str, fn: AttrFunc) -> None:
        self._fns[name] = fn

    def names(self) -> List[str]:
        return sorted(self._fns)

    def compute(self, engine: Any, date: CalendarDate, names: Sequence[str]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for name in names:
            if name not in self._fns:
                raise KeyError(f"Unknown attribute '{name}'. Available: {sorted(self._fns)}")
            out.update(self._fns[name](engine, date))
        return out


# helper for attribute implementations
def days_since(engine: Any, date: CalendarDate, ref: CalendarDate) -> int:
    return engine.date_to_days(date) - engine.date_to_days(ref)
