class WorldcalError(Exception):
    """Base error."""

class CalendarValidationError(WorldcalError, ValueError):
    """Raised when a calendar definition has the wrong shape."""

    def __init__(self, calendar_id: str, errors: list[str]):
        self.calendar_id = calendar_id
        self.errors = list(errors)
        super().__init__(f"Invalid calendar '{calendar_id}': " + "; ".join(self.errors))

class VariantOverrideError(WorldcalError, ValueError):
    """Raised when a variant's overrides cannot be applied."""

class DateArgumentWarning(UserWarning):
    """A date argument was out of range and has been clamped."""

class VariantWarning(UserWarning):
    """A variant entry was skipped."""
