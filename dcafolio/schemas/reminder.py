"""DCA reminder schemas."""

from datetime import date, datetime, time
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from dcafolio.models.reminder import DCAFrequency, DCAReminder, FrequencyOption


class DCAReminderBase(BaseModel):
    """Base reminder schema."""

    user_id: UUID
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    frequency: DCAFrequency
    total_purchases: Optional[int] = Field(None, ge=1)
    completed_purchases: int = Field(default=0, ge=0)
    notification_time: time = time(9, 0)
    start_date: date
    next_reminder_date: Optional[date] = None
    is_active: bool = True

    @field_validator("frequency", mode="before")
    @classmethod
    def resolve_frequency(cls, v):
        """Accept the coarse creation options too; ``custom`` becomes weekly."""
        return FrequencyOption.resolve(v)


class DCAReminderIn(DCAReminderBase):
    """Reminder record supplied by the caller."""

    id: UUID = Field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    def to_model(self) -> DCAReminder:
        return DCAReminder(**self.model_dump(exclude_none=True))


class DCAReminderResponse(DCAReminderBase):
    """Reminder with derived progress fields."""

    id: UUID
    created_at: datetime
    is_completed: bool
    progress: float
    progress_text: str
    remaining_purchases: Optional[int]
    total_invested: float

    class Config:
        from_attributes = True


class DCAInvestmentResponse(BaseModel):
    """Recorded purchase."""

    id: UUID
    reminder_id: UUID
    amount: float
    price_at_purchase: float
    quantity: float
    purchase_date: date
    risk_level_at_purchase: Optional[float] = None

    class Config:
        from_attributes = True


class FrequencyInfo(BaseModel):
    """Frequency listing entry."""

    value: DCAFrequency
    label: str
    option: FrequencyOption


class NextOccurrenceRequest(BaseModel):
    """Parameters for a next-occurrence computation."""

    last_date: date
    frequency: DCAFrequency
    anchor_day: Optional[int] = Field(None, ge=1, le=31)

    @field_validator("frequency", mode="before")
    @classmethod
    def resolve_frequency(cls, v):
        return FrequencyOption.resolve(v)


class NextOccurrenceResponse(BaseModel):
    """Computed next occurrence."""

    frequency: DCAFrequency
    last_date: date
    next_date: date


class DueRemindersRequest(BaseModel):
    """Reminders to filter by due date."""

    reminders: List[DCAReminderIn]
    today: Optional[date] = None


class DueRemindersResponse(BaseModel):
    """Reminders due on ``today``."""

    today: date
    reminders: List[DCAReminderResponse]


class ReminderActionRequest(BaseModel):
    """Single reminder to skip or toggle."""

    reminder: DCAReminderIn


class ReminderInvestRequest(ReminderActionRequest):
    """Invest action; a price also records the purchase."""

    price_at_purchase: Optional[float] = Field(None, gt=0)
    purchase_date: Optional[date] = None


class ReminderInvestResponse(BaseModel):
    """Updated reminder and the optional purchase record."""

    reminder: DCAReminderResponse
    investment: Optional[DCAInvestmentResponse] = None


class DCAPlanRequest(BaseModel):
    """Parameters for a time-based DCA plan."""

    total_amount: float = Field(..., gt=0)
    symbol: str = Field(..., min_length=1, max_length=20)
    frequency: DCAFrequency = DCAFrequency.WEEKLY
    duration_months: int = Field(default=12, ge=1, le=120)
    start_date: Optional[date] = None
    selected_days: List[int] = Field(default=[], max_length=7)

    @field_validator("frequency", mode="before")
    @classmethod
    def resolve_frequency(cls, v):
        return FrequencyOption.resolve(v)


class DCAPlanResponse(BaseModel):
    """Generated DCA plan."""

    total_amount: float
    symbol: str
    frequency: DCAFrequency
    frequency_description: str
    duration_months: int
    start_date: date
    end_date: Optional[date]
    number_of_purchases: int
    amount_per_purchase: float
    purchase_dates: List[date]
