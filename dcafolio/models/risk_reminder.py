"""Risk-based DCA reminder model."""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from dcafolio.core.exceptions import InvalidChoiceError, InvalidRiskScoreError, ValidationError

RISK_SCALE_MIN = 0.0
RISK_SCALE_MAX = 100.0


def validate_risk_score(value: float, label: str = "Risk score") -> float:
    """Reject values outside the 0-100 scale."""
    if value is None or not (RISK_SCALE_MIN <= value <= RISK_SCALE_MAX):
        raise InvalidRiskScoreError(f"{label} must be between 0 and 100, got {value}")
    return float(value)


class RiskCondition(str, enum.Enum):
    ABOVE = "above"
    BELOW = "below"

    @classmethod
    def parse(cls, value) -> "RiskCondition":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidChoiceError("risk condition", value, [c.value for c in cls]) from None

    @property
    def description(self) -> str:
        if self is RiskCondition.ABOVE:
            return "Risk rises above threshold"
        return "Risk falls below threshold"


class RiskReminderState(str, enum.Enum):
    MONITORING = "monitoring"
    TRIGGERED = "triggered"
    PAUSED = "paused"

    @classmethod
    def parse(cls, value) -> "RiskReminderState":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidChoiceError("reminder state", value, [s.value for s in cls]) from None


class RiskCategory(str, enum.Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @classmethod
    def from_score(cls, score: float) -> "RiskCategory":
        score = validate_risk_score(score)
        if score < 20:
            return cls.VERY_LOW
        if score < 40:
            return cls.LOW
        if score < 60:
            return cls.MODERATE
        if score < 80:
            return cls.HIGH
        return cls.VERY_HIGH


class RiskBand(str, enum.Enum):
    """Risk bands a risk-based DCA plan can target."""

    VERY_LOW = "very_low"
    LOW = "low"
    NEUTRAL = "neutral"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def risk_range(self) -> Tuple[float, float]:
        return _BAND_RANGES[self]

    @property
    def investment_advice(self) -> str:
        return _BAND_ADVICE[self]

    @classmethod
    def recommended_for_dca(cls) -> Tuple["RiskBand", ...]:
        return (cls.VERY_LOW, cls.LOW, cls.NEUTRAL)


_BAND_RANGES = {
    RiskBand.VERY_LOW: (0.0, 20.0),
    RiskBand.LOW: (20.0, 40.0),
    RiskBand.NEUTRAL: (40.0, 60.0),
    RiskBand.HIGH: (60.0, 80.0),
    RiskBand.VERY_HIGH: (80.0, 100.0),
}

_BAND_ADVICE = {
    RiskBand.VERY_LOW: "Excellent time to accumulate",
    RiskBand.LOW: "Good buying opportunity",
    RiskBand.NEUTRAL: "Consider dollar cost averaging",
    RiskBand.HIGH: "Be cautious, consider taking profits",
    RiskBand.VERY_HIGH: "High risk, avoid large purchases",
}


@dataclass(frozen=True)
class RiskBasedDCAReminder:
    """Reminder that fires on a risk-score threshold instead of a calendar."""

    user_id: uuid.UUID
    symbol: str
    name: str
    amount: float
    risk_threshold: float
    risk_condition: RiskCondition
    state: RiskReminderState = RiskReminderState.MONITORING
    last_triggered_risk_level: Optional[float] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(self, "risk_condition", RiskCondition.parse(self.risk_condition))
        object.__setattr__(self, "state", RiskReminderState.parse(self.state))
        validate_risk_score(self.risk_threshold, "Risk threshold")
        if self.amount <= 0:
            raise ValidationError("Reminder amount must be greater than zero")

    @property
    def is_active(self) -> bool:
        return self.state != RiskReminderState.PAUSED

    @property
    def is_triggered(self) -> bool:
        return self.state == RiskReminderState.TRIGGERED

    @property
    def trigger_description(self) -> str:
        return f"When risk {self.risk_condition.value} {int(self.risk_threshold)}%"
