"""
worldcal.engines.factory
------------------------
Transforms pure data specifications into live, executable engine objects
and assembles the built-in registry.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Literal

from ..core.engine import CalendarRegistry
from ..core.types import CalendarDefinition
from .calendar import CalendarEngine

EngineKind = Literal["calendar"]


@dataclass(frozen=True)
class EngineSpec:
    kind: EngineKind
    id: str
    payload: CalendarDefinition

    @staticmethod
    def like(name: str) -> "EngineSpec":
        from .specs import ALL_SPECS
        if name not in ALL_SPECS:
            raise KeyError(f"Unknown base spec '{name}'. Available: {sorted(ALL_SPECS)}")
        return ALL_SPECS[name]

    def tweak(self, **kwargs) -> "EngineSpec":
        payload = self.payload.tweak(**kwargs)
        return replace(self, id=payload.id, payload=payload)


def make_engine(spec: EngineSpec | CalendarDefinition) -> CalendarEngine:
    """The universal entry point."""
    if isinstance(spec, CalendarDefinition):
        return CalendarEngine(spec)
    if spec.kind == "calendar":
        return CalendarEngine(spec.payload)
    raise NotImplementedError(f"Unknown engine kind {spec.kind!r}")


def build_registry(*, active: str | None = None) -> CalendarRegistry:
    """Registry holding every built-in calendar and its inline variants."""
    from .specs import ALL_SPECS

    reg = CalendarRegistry()
    for spec in ALL_SPECS.values():
        reg.load(spec.payload)
    if active is not None:
        reg.set_active(active)
    return reg
