"""worldcal public API.

Keep this surface small: users should mostly interact with names re-exported here.
"""

from .core.types import (
    CalendarDate,
    CalendarDefinition,
    CalendarVariant,
    CompatibilityAdjustment,
    IntercalaryDay,
    LeapYearRule,
    MonthDef,
    TimeConfig,
    TimeOfDay,
    WeekdayDef,
    YearConfig,
)
from .core.errors import (
    CalendarValidationError,
    DateArgumentWarning,
    VariantOverrideError,
    VariantWarning,
    WorldcalError,
)
from .core.engine import CalendarRegistry
from .core.loader import definition_from_dict, load_calendar, load_variant_file, variant_file_from_dict
from .engines.calendar import CalendarEngine
from .engines.factory import EngineSpec, build_registry, make_engine
from .compat.adjuster import CompatibilityAdjuster
from .variants.resolver import default_variant_id, expand_variants, resolve_variant
from .attributes.standard import standard_attributes

__all__ = [
    "CalendarDate",
    "CalendarDefinition",
    "CalendarVariant",
    "CompatibilityAdjustment",
    "IntercalaryDay",
    "LeapYearRule",
    "MonthDef",
    "TimeConfig",
    "TimeOfDay",
    "WeekdayDef",
    "YearConfig",
    "CalendarValidationError",
    "DateArgumentWarning",
    "VariantOverrideError",
    "VariantWarning",
    "WorldcalError",
    "CalendarRegistry",
    "definition_from_dict",
    "load_calendar",
    "load_variant_file",
    "variant_file_from_dict",
    "CalendarEngine",
    "EngineSpec",
    "build_registry",
    "make_engine",
    "CompatibilityAdjuster",
    "default_variant_id",
    "expand_variants",
    "resolve_variant",
    "standard_attributes",
]
