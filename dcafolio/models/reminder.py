"""DCA reminder model."""

import enum
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Optional

from dcafolio.core.exceptions import InvalidFrequencyError, ValidationError

logger = logging.getLogger(__name__)


class DCAFrequency(str, enum.Enum):
    DAILY = "daily"
    TWICE_WEEKLY = "twice_weekly"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @property
    def display_name(self) -> str:
        return _FREQUENCY_LABELS[self]

    @classmethod
    def parse(cls, value) -> "DCAFrequency":
        """Coerce a raw value to a frequency, rejecting unknown ones."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidFrequencyError(value) from None


_FREQUENCY_LABELS = {
    DCAFrequency.DAILY: "Daily",
    DCAFrequency.TWICE_WEEKLY: "Twice Weekly",
    DCAFrequency.WEEKLY: "Weekly",
    DCAFrequency.BIWEEKLY: "Bi-weekly",
    DCAFrequency.MONTHLY: "Monthly",
}


class FrequencyOption(str, enum.Enum):
    """Coarse frequency choices offered when creating a reminder."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"

    def to_frequency(self) -> DCAFrequency:
        """Map the option to a concrete frequency.

        ``custom`` has no cadence of its own and falls back to weekly.
        """
        if self is FrequencyOption.CUSTOM:
            logger.info("Custom frequency option mapped to weekly")
            return DCAFrequency.WEEKLY
        return DCAFrequency(self.value)

    @classmethod
    def resolve(cls, value) -> DCAFrequency:
        """Frequency for a raw value that may be a concrete frequency or an option."""
        if isinstance(value, cls):
            return value.to_frequency()
        if isinstance(value, str) and value.strip().lower() == cls.CUSTOM.value:
            return cls.CUSTOM.to_frequency()
        return DCAFrequency.parse(value)

    @classmethod
    def from_frequency(cls, frequency: DCAFrequency) -> "FrequencyOption":
        if frequency == DCAFrequency.DAILY:
            return cls.DAILY
        if frequency == DCAFrequency.MONTHLY:
            return cls.MONTHLY
        return cls.WEEKLY


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DCAReminder:
    """Recurring purchase reminder.

    ``next_reminder_date`` may be left unset on a freshly created reminder;
    the scheduler then treats the first scheduled date on or after
    ``start_date`` as the next occurrence.
    """

    user_id: uuid.UUID
    symbol: str
    name: str
    amount: float
    frequency: DCAFrequency
    start_date: date
    notification_time: time = time(9, 0)
    total_purchases: Optional[int] = None
    completed_purchases: int = 0
    next_reminder_date: Optional[date] = None
    is_active: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        object.__setattr__(self, "frequency", DCAFrequency.parse(self.frequency))
        if self.amount <= 0:
            raise ValidationError("Reminder amount must be greater than zero")
        if self.completed_purchases < 0:
            raise ValidationError("Completed purchases cannot be negative")
        if self.total_purchases is not None:
            if self.total_purchases < 1:
                raise ValidationError("Total purchases must be at least 1 when set")
            if self.completed_purchases > self.total_purchases:
                raise ValidationError(
                    f"Completed purchases ({self.completed_purchases}) exceed "
                    f"total purchases ({self.total_purchases})"
                )
        if self.next_reminder_date is not None and self.next_reminder_date < self.start_date:
            raise ValidationError("Next reminder date cannot precede the start date")

    @property
    def is_completed(self) -> bool:
        if self.total_purchases is None:
            return False
        return self.completed_purchases >= self.total_purchases

    @property
    def progress(self) -> float:
        if not self.total_purchases:
            return 0.0
        return self.completed_purchases / self.total_purchases

    @property
    def progress_text(self) -> str:
        if self.total_purchases is not None:
            return f"{self.completed_purchases}/{self.total_purchases}"
        return f"{self.completed_purchases} purchases"

    @property
    def remaining_purchases(self) -> Optional[int]:
        if self.total_purchases is None:
            return None
        return self.total_purchases - self.completed_purchases

    @property
    def total_invested(self) -> float:
        return self.completed_purchases * self.amount


@dataclass(frozen=True)
class DCAInvestment:
    """Executed purchase recorded against a reminder."""

    reminder_id: uuid.UUID
    amount: float
    price_at_purchase: float
    purchase_date: date
    risk_level_at_purchase: Optional[float] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def quantity(self) -> float:
        if self.price_at_purchase <= 0:
            return 0.0
        return self.amount / self.price_at_purchase
