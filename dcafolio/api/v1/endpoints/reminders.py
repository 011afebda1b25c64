"""DCA reminder scheduling endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Request

from dcafolio.core.rate_limit import RATE_LIMITS, limiter
from dcafolio.models.reminder import DCAFrequency, FrequencyOption
from dcafolio.schemas.reminder import (
    DCAInvestmentResponse,
    DCAPlanRequest,
    DCAPlanResponse,
    DCAReminderResponse,
    DueRemindersRequest,
    DueRemindersResponse,
    FrequencyInfo,
    NextOccurrenceRequest,
    NextOccurrenceResponse,
    ReminderActionRequest,
    ReminderInvestRequest,
    ReminderInvestResponse,
)
from dcafolio.services.dca_calculator import dca_calculator
from dcafolio.services.reminder_scheduler import reminder_scheduler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/frequencies", response_model=List[FrequencyInfo])
@limiter.limit(RATE_LIMITS["api_read"])
async def list_frequencies(request: Request) -> List[FrequencyInfo]:
    """Supported reminder frequencies with their display labels."""
    return [
        FrequencyInfo(
            value=frequency,
            label=frequency.display_name,
            option=FrequencyOption.from_frequency(frequency),
        )
        for frequency in DCAFrequency
    ]


@router.post("/next-occurrence", response_model=NextOccurrenceResponse)
@limiter.limit(RATE_LIMITS["api_read"])
async def next_occurrence(request: Request, data: NextOccurrenceRequest) -> NextOccurrenceResponse:
    """Compute the occurrence that follows ``last_date``."""
    next_date = reminder_scheduler.next_occurrence(
        data.last_date, data.frequency, anchor_day=data.anchor_day
    )
    return NextOccurrenceResponse(
        frequency=data.frequency,
        last_date=data.last_date,
        next_date=next_date,
    )


@router.post("/due", response_model=DueRemindersResponse)
@limiter.limit(RATE_LIMITS["api_read"])
async def due_reminders(request: Request, data: DueRemindersRequest) -> DueRemindersResponse:
    """Filter the given reminders down to those due today."""
    today = data.today or reminder_scheduler.today()
    reminders = [r.to_model() for r in data.reminders]
    due = reminder_scheduler.due_reminders(reminders, today)
    logger.debug("%d of %d reminders due on %s", len(due), len(reminders), today)
    return DueRemindersResponse(
        today=today,
        reminders=[
            DCAReminderResponse.model_validate(reminder_scheduler.with_initial_schedule(r))
            for r in due
        ],
    )


@router.post("/invest", response_model=ReminderInvestResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def invest(request: Request, data: ReminderInvestRequest) -> ReminderInvestResponse:
    """Count a purchase and advance the reminder.

    When ``price_at_purchase`` is given the purchase record is returned too.
    """
    reminder = data.reminder.to_model()
    updated = reminder_scheduler.mark_invested(reminder)

    investment = None
    if data.price_at_purchase is not None:
        investment = reminder_scheduler.record_investment(
            reminder, data.price_at_purchase, purchase_date=data.purchase_date
        )

    return ReminderInvestResponse(
        reminder=DCAReminderResponse.model_validate(updated),
        investment=DCAInvestmentResponse.model_validate(investment) if investment else None,
    )


@router.post("/skip", response_model=DCAReminderResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def skip(request: Request, data: ReminderActionRequest) -> DCAReminderResponse:
    """Advance the reminder without counting a purchase."""
    updated = reminder_scheduler.skip(data.reminder.to_model())
    return DCAReminderResponse.model_validate(updated)


@router.post("/toggle", response_model=DCAReminderResponse)
@limiter.limit(RATE_LIMITS["api_write"])
async def toggle(request: Request, data: ReminderActionRequest) -> DCAReminderResponse:
    """Pause an active reminder or reactivate a paused one."""
    updated = reminder_scheduler.toggle(data.reminder.to_model())
    return DCAReminderResponse.model_validate(updated)


@router.post("/plan", response_model=DCAPlanResponse)
@limiter.limit(RATE_LIMITS["plan_generate"])
async def generate_plan(request: Request, data: DCAPlanRequest) -> DCAPlanResponse:
    """Build a time-based DCA plan with its purchase dates."""
    plan = dca_calculator.calculate_plan(
        total_amount=data.total_amount,
        symbol=data.symbol,
        frequency=data.frequency,
        duration_months=data.duration_months,
        start_date=data.start_date or reminder_scheduler.today(),
        selected_days=data.selected_days,
    )
    return DCAPlanResponse(
        total_amount=plan.total_amount,
        symbol=plan.symbol,
        frequency=plan.frequency,
        frequency_description=dca_calculator.frequency_description(
            plan.frequency, plan.selected_days
        ),
        duration_months=plan.duration_months,
        start_date=plan.start_date,
        end_date=plan.end_date,
        number_of_purchases=plan.number_of_purchases,
        amount_per_purchase=round(plan.amount_per_purchase, 2),
        purchase_dates=plan.purchase_dates,
    )
