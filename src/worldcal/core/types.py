from __future__ import annotations
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional, Tuple

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def frozen_mapping(data: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    Read-only deep copy of ``data``: nested mappings become read-only views
    over their own copies and lists become tuples. Values that are not
    mappings pass through (frozen) so callers can still reject them.
    """
    if data is None:
        return _EMPTY
    return _freeze(data)


def _empty() -> Mapping[str, Any]:
    return _EMPTY


@dataclass(frozen=True)
class YearConfig:
    epoch: int = 0
    current_year: int = 0
    prefix: str = ""
    suffix: str = ""
    start_day: int = 0  # weekday index of the epoch's first day


@dataclass(frozen=True)
class LeapYearRule:
    rule: Literal["none", "gregorian", "custom"] = "none"
    interval: Optional[int] = None
    month: Optional[int] = None  # 1-based month receiving extra_days
    extra_days: int = 1
    offset: int = 0


@dataclass(frozen=True)
class MonthDef:
    name: str
    days: int
    abbreviation: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class WeekdayDef:
    name: str
    abbreviation: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class IntercalaryDay:
    name: str
    after_month: Optional[int] = None
    before_month: Optional[int] = None
    days_count: int = 1
    leap_year_only: bool = False
    counts_for_weekdays: bool = True
    description: Optional[str] = None

    @property
    def anchor_month(self) -> int:
        return self.after_month if self.after_month is not None else self.before_month  # type: ignore[return-value]


@dataclass(frozen=True)
class TimeConfig:
    hours_in_day: int = 24
    minutes_in_hour: int = 60
    seconds_in_minute: int = 60

    @property
    def seconds_per_hour(self) -> int:
        return self.minutes_in_hour * self.seconds_in_minute

    @property
    def seconds_per_day(self) -> int:
        return self.hours_in_day * self.seconds_per_hour


@dataclass(frozen=True)
class WorldTimeConfig:
    interpretation: Literal["epoch-based", "real-time-based"] = "epoch-based"
    epoch_year: int = 0
    current_year: int = 0


@dataclass(frozen=True)
class MoonPhase:
    name: str
    length: float
    single_day: bool = False
    icon: Optional[str] = None


@dataclass(frozen=True)
class Moon:
    name: str
    cycle_length: float
    first_new_moon: Tuple[int, int, int]  # (year, month, day)
    phases: Tuple[MoonPhase, ...]
    color: Optional[str] = None


@dataclass(frozen=True)
class Season:
    name: str
    start_month: int
    start_day: int = 1
    end_month: Optional[int] = None
    end_day: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CanonicalHour:
    name: str
    start_hour: int
    end_hour: int
    start_minute: int = 0
    end_minute: int = 0
    description: Optional[str] = None


@dataclass(frozen=True)
class WeekName:
    name: str
    abbreviation: Optional[str] = None


@dataclass(frozen=True)
class WeekConfig:
    type: Literal["month-based", "year-based"] = "month-based"
    per_month: Optional[int] = None
    days_per_week: Optional[int] = None
    remainder_handling: Literal["partial-last", "extend-last", "none"] = "partial-last"
    names: Tuple[WeekName, ...] = ()
    naming_pattern: Literal["ordinal", "numeric", "none"] = "numeric"


@dataclass(frozen=True)
class CompatibilityAdjustment:
    weekday_offset: int = 0
    month_offset: int = 0
    day_offset: int = 0
    description: Optional[str] = None
    provider: Optional[str] = None


@dataclass(frozen=True)
class CalendarVariant:
    name: str
    description: str = ""
    default: bool = False
    config: Mapping[str, Any] = field(default_factory=_empty)
    overrides: Mapping[str, Any] = field(default_factory=_empty)


@dataclass(frozen=True)
class CalendarDefinition:
    """Immutable rules of one calendar. Engines borrow it read-only."""
    id: str
    label: str
    year: YearConfig
    leap_year: LeapYearRule
    months: Tuple[MonthDef, ...]
    weekdays: Tuple[WeekdayDef, ...]
    intercalary: Tuple[IntercalaryDay, ...] = ()
    time: TimeConfig = TimeConfig()
    description: Optional[str] = None
    world_time: Optional[WorldTimeConfig] = None
    moons: Tuple[Moon, ...] = ()
    seasons: Tuple[Season, ...] = ()
    canonical_hours: Tuple[CanonicalHour, ...] = ()
    weeks: Optional[WeekConfig] = None
    date_formats: Mapping[str, Any] = field(default_factory=_empty)
    variants: Mapping[str, CalendarVariant] = field(default_factory=_empty)
    compatibility: Mapping[str, CompatibilityAdjustment] = field(default_factory=_empty)
    variant_config: Mapping[str, Any] = field(default_factory=_empty)

    def tweak(self, **kwargs) -> "CalendarDefinition":
        return replace(self, **kwargs)

    def month_index(self, name: str) -> Optional[int]:
        for i, m in enumerate(self.months, start=1):
            if m.name == name:
                return i
        return None


@dataclass(frozen=True)
class TimeOfDay:
    hour: int = 0
    minute: int = 0
    second: int = 0


@dataclass(frozen=True)
class CalendarDate:
    year: int
    month: int
    day: int
    weekday: Optional[int] = field(default=None, compare=False)  # derived by the engine
    intercalary: Optional[str] = None
    time: Optional[TimeOfDay] = None

    @property
    def is_intercalary(self) -> bool:
        return self.intercalary is not None
