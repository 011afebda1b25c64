"""Risk-based reminder endpoints."""

from fastapi import APIRouter, Query, Request

from dcafolio.core.rate_limit import RATE_LIMITS, limiter
from dcafolio.models.risk_reminder import RiskCategory
from dcafolio.schemas.reminder import DCAInvestmentResponse
from dcafolio.schemas.risk import (
    RiskActionRequest,
    RiskCategoryResponse,
    RiskCheckRequest,
    RiskCheckResponse,
    RiskEvaluateRequest,
    RiskEvaluateResponse,
    RiskInvestRequest,
    RiskInvestResponse,
    RiskReminderResponse,
    RiskResumeRequest,
)
from dcafolio.services.risk_trigger import risk_trigger_evaluator

router = APIRouter()


@router.post("/evaluate", response_model=RiskEvaluateResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def evaluate(request: Request, data: RiskEvaluateRequest) -> RiskEvaluateResponse:
    """Compare the latest score to the reminder's threshold.

    ``triggered`` reports the comparison itself; the returned reminder
    only moves to ``triggered`` from ``monitoring``.
    """
    reminder = data.reminder.to_model()
    evaluation = risk_trigger_evaluator.evaluate(
        data.current_risk, reminder.risk_threshold, reminder.risk_condition
    )
    updated = risk_trigger_evaluator.apply(reminder, data.current_risk)
    return RiskEvaluateResponse(
        triggered=evaluation.triggered,
        risk_level=evaluation.risk_level,
        reminder=RiskReminderResponse.model_validate(updated),
    )


@router.post("/check", response_model=RiskCheckResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def check(request: Request, data: RiskCheckRequest) -> RiskCheckResponse:
    """Evaluate a batch of reminders against per-symbol scores."""
    reminders, newly_triggered = risk_trigger_evaluator.check_reminders(
        [r.to_model() for r in data.reminders], data.risk_levels
    )
    return RiskCheckResponse(
        reminders=[RiskReminderResponse.model_validate(r) for r in reminders],
        newly_triggered=[RiskReminderResponse.model_validate(r) for r in newly_triggered],
    )


@router.post("/dismiss", response_model=RiskReminderResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def dismiss(request: Request, data: RiskActionRequest) -> RiskReminderResponse:
    updated = risk_trigger_evaluator.dismiss(data.reminder.to_model())
    return RiskReminderResponse.model_validate(updated)


@router.post("/invest", response_model=RiskInvestResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def invest(request: Request, data: RiskInvestRequest) -> RiskInvestResponse:
    """Acknowledge a purchase and return to monitoring.

    The purchase record is returned when both price and risk level are given.
    """
    reminder = data.reminder.to_model()
    updated = risk_trigger_evaluator.invest(reminder)

    investment = None
    if data.price_at_purchase is not None and data.risk_level is not None:
        investment = risk_trigger_evaluator.record_investment(
            reminder,
            data.price_at_purchase,
            data.risk_level,
            purchase_date=data.purchase_date,
        )

    return RiskInvestResponse(
        reminder=RiskReminderResponse.model_validate(updated),
        investment=DCAInvestmentResponse.model_validate(investment) if investment else None,
    )


@router.post("/pause", response_model=RiskReminderResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def pause(request: Request, data: RiskActionRequest) -> RiskReminderResponse:
    updated = risk_trigger_evaluator.pause(data.reminder.to_model())
    return RiskReminderResponse.model_validate(updated)


@router.post("/resume", response_model=RiskReminderResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def resume(request: Request, data: RiskResumeRequest) -> RiskReminderResponse:
    """Reactivate a paused reminder against the current score."""
    updated = risk_trigger_evaluator.resume(data.reminder.to_model(), data.current_risk)
    return RiskReminderResponse.model_validate(updated)


@router.get("/category", response_model=RiskCategoryResponse)
@limiter.limit(RATE_LIMITS["api_read"])
async def category(
    request: Request,
    score: float = Query(..., description="Risk score on the 0-100 scale"),
) -> RiskCategoryResponse:
    return RiskCategoryResponse(score=score, category=RiskCategory.from_score(score))
