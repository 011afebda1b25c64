"""Domain errors raised by the scheduling and portfolio services."""


class DCAFolioError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DCAFolioError, ValueError):
    """Input rejected by a domain rule."""


class InvalidFrequencyError(ValidationError):
    """Unrecognized reminder frequency."""

    def __init__(self, value):
        super().__init__(f"Unknown DCA frequency: {value!r}")
        self.value = value


class InvalidChoiceError(ValidationError):
    """Value outside a fixed set such as a risk condition or transaction type."""

    def __init__(self, field: str, value, choices):
        allowed = ", ".join(str(c) for c in choices)
        super().__init__(f"Unknown {field}: {value!r} (expected one of: {allowed})")
        self.field = field
        self.value = value


class InvalidRiskScoreError(ValidationError):
    """Risk score or threshold outside the 0-100 scale."""


class SellValidationError(ValidationError):
    """Sell parameters rejected before touching the holding."""


class ReminderCompletedError(ValidationError):
    """Invest or skip on a reminder that reached its planned purchase count."""


class InvalidStateTransitionError(DCAFolioError):
    """Risk reminder action not allowed from its current state."""
