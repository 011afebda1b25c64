"""Risk-based reminder schemas."""

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from dcafolio.models.risk_reminder import (
    RiskBasedDCAReminder,
    RiskCategory,
    RiskCondition,
    RiskReminderState,
)
from dcafolio.schemas.reminder import DCAInvestmentResponse


class RiskReminderBase(BaseModel):
    """Base risk reminder schema."""

    user_id: UUID
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    risk_threshold: float = Field(..., ge=0, le=100)
    risk_condition: RiskCondition
    state: RiskReminderState = RiskReminderState.MONITORING
    last_triggered_risk_level: Optional[float] = Field(None, ge=0, le=100)


class RiskReminderIn(RiskReminderBase):
    """Risk reminder record supplied by the caller."""

    id: UUID = Field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    def to_model(self) -> RiskBasedDCAReminder:
        return RiskBasedDCAReminder(**self.model_dump(exclude_none=True))


class RiskReminderResponse(RiskReminderBase):
    """Risk reminder with derived flags."""

    id: UUID
    created_at: datetime
    is_active: bool
    is_triggered: bool
    trigger_description: str

    class Config:
        from_attributes = True


class RiskEvaluateRequest(BaseModel):
    """Latest score for one reminder."""

    reminder: RiskReminderIn
    current_risk: float = Field(..., ge=0, le=100)


class RiskEvaluateResponse(BaseModel):
    """Evaluation outcome and resulting reminder."""

    triggered: bool
    risk_level: float
    reminder: RiskReminderResponse


class RiskActionRequest(BaseModel):
    """Dismiss or pause action."""

    reminder: RiskReminderIn


class RiskInvestRequest(RiskActionRequest):
    """Invest action; price and risk level also record the purchase."""

    price_at_purchase: Optional[float] = Field(None, gt=0)
    risk_level: Optional[float] = Field(None, ge=0, le=100)
    purchase_date: Optional[date] = None


class RiskInvestResponse(BaseModel):
    """Re-armed reminder and the optional purchase record."""

    reminder: RiskReminderResponse
    investment: Optional[DCAInvestmentResponse] = None


class RiskResumeRequest(RiskEvaluateRequest):
    """Resume a paused reminder against the current score."""


class RiskCheckRequest(BaseModel):
    """Batch evaluation against per-symbol scores."""

    reminders: List[RiskReminderIn]
    risk_levels: Dict[str, float]


class RiskCheckResponse(BaseModel):
    """All reminders after evaluation, and those that fired now."""

    reminders: List[RiskReminderResponse]
    newly_triggered: List[RiskReminderResponse]


class RiskCategoryResponse(BaseModel):
    """Category for a risk score."""

    score: float
    category: RiskCategory
