"""DCA plan calculator: purchase schedules and per-purchase amounts."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from dcafolio.core.config import settings
from dcafolio.core.exceptions import ValidationError
from dcafolio.models.reminder import DCAFrequency
from dcafolio.models.risk_reminder import RiskBand
from dcafolio.services.reminder_scheduler import ReminderScheduler, add_months, reminder_scheduler

logger = logging.getLogger(__name__)

WEEKS_PER_MONTH = 4.33
DAYS_PER_MONTH = 30.44
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass
class DCAPlan:
    """Time-based DCA plan."""

    total_amount: float
    symbol: str
    frequency: DCAFrequency
    duration_months: int
    start_date: date
    selected_days: Tuple[int, ...] = ()
    purchase_dates: List[date] = field(default_factory=list)

    @property
    def number_of_purchases(self) -> int:
        return len(self.purchase_dates)

    @property
    def amount_per_purchase(self) -> float:
        if not self.purchase_dates:
            return 0.0
        return self.total_amount / len(self.purchase_dates)

    @property
    def end_date(self) -> Optional[date]:
        return self.purchase_dates[-1] if self.purchase_dates else None


def _normalize_days(selected_days: Optional[Iterable[int]]) -> Tuple[int, ...]:
    days = tuple(sorted(set(selected_days or ())))
    if any(d < 0 or d > 6 for d in days):
        raise ValidationError("Selected days must be weekdays between 0 (Monday) and 6 (Sunday)")
    return days


class DCACalculatorService:
    """Builds DCA purchase schedules."""

    def __init__(self, scheduler: Optional[ReminderScheduler] = None):
        self.scheduler = scheduler or reminder_scheduler

    def estimate_purchase_count(
        self,
        frequency: DCAFrequency,
        duration_months: int,
        selected_days: Optional[Sequence[int]] = None,
    ) -> int:
        """Approximate purchase count without a concrete start date."""
        frequency = DCAFrequency.parse(frequency)
        weeks = int(duration_months * WEEKS_PER_MONTH)

        if frequency == DCAFrequency.DAILY:
            return int(duration_months * DAYS_PER_MONTH)
        if frequency == DCAFrequency.TWICE_WEEKLY:
            return weeks * 2
        if frequency == DCAFrequency.WEEKLY:
            return weeks * max(len(_normalize_days(selected_days)), 1)
        if frequency == DCAFrequency.BIWEEKLY:
            return weeks // 2
        return duration_months

    def purchase_dates(
        self,
        frequency: DCAFrequency,
        duration_months: int,
        start_date: date,
        selected_days: Optional[Sequence[int]] = None,
    ) -> List[date]:
        """All purchase dates from ``start_date`` through ``duration_months`` later."""
        frequency = DCAFrequency.parse(frequency)
        if duration_months < 1:
            raise ValidationError("Duration must be at least one month")
        end_date = add_months(start_date, duration_months)

        if frequency == DCAFrequency.TWICE_WEEKLY:
            return self._weekday_dates(start_date, end_date, self.scheduler.twice_weekly_days)
        if frequency == DCAFrequency.WEEKLY:
            # Monday when no day was picked
            days = _normalize_days(selected_days) or (0,)
            return self._weekday_dates(start_date, end_date, days)
        if frequency == DCAFrequency.MONTHLY:
            dates = []
            months = 0
            current = start_date
            while current <= end_date:
                dates.append(current)
                months += 1
                current = add_months(start_date, months, anchor_day=start_date.day)
            return dates

        dates = []
        current = start_date
        while current <= end_date:
            dates.append(current)
            current = self.scheduler.next_occurrence(current, frequency)
        return dates

    def _weekday_dates(self, start_date: date, end_date: date, weekdays: Iterable[int]) -> List[date]:
        targets = set(weekdays)
        span = (end_date - start_date).days
        return [
            start_date + timedelta(days=offset)
            for offset in range(span + 1)
            if (start_date + timedelta(days=offset)).weekday() in targets
        ]

    def calculate_plan(
        self,
        total_amount: float,
        symbol: str,
        frequency: DCAFrequency,
        duration_months: int,
        start_date: date,
        selected_days: Optional[Sequence[int]] = None,
    ) -> DCAPlan:
        """Build a time-based plan after validating its inputs."""
        errors = self.validate_plan(total_amount, symbol, duration_months)
        if errors:
            raise ValidationError("; ".join(errors))

        frequency = DCAFrequency.parse(frequency)
        days = _normalize_days(selected_days)
        plan = DCAPlan(
            total_amount=total_amount,
            symbol=symbol.upper(),
            frequency=frequency,
            duration_months=duration_months,
            start_date=start_date,
            selected_days=days,
            purchase_dates=self.purchase_dates(frequency, duration_months, start_date, days),
        )
        logger.debug(
            "Plan for %s: %d purchases of %.2f",
            plan.symbol,
            plan.number_of_purchases,
            plan.amount_per_purchase,
        )
        return plan

    def validate_plan(
        self,
        total_amount: Optional[float],
        symbol: Optional[str],
        duration_months: Optional[int],
    ) -> List[str]:
        """Return user-facing validation messages, empty when valid."""
        errors = []
        if total_amount is None or total_amount <= 0:
            errors.append("Please enter a valid investment amount")
        elif total_amount < settings.MIN_DCA_AMOUNT:
            errors.append(f"Minimum investment amount is ${settings.MIN_DCA_AMOUNT:,.0f}")
        if not symbol:
            errors.append("Please select an asset to invest in")
        if not duration_months or duration_months < 1:
            errors.append("Please select a duration for your DCA plan")
        return errors

    @staticmethod
    def frequency_description(frequency: DCAFrequency, selected_days: Optional[Sequence[int]] = None) -> str:
        """Human-readable cadence."""
        frequency = DCAFrequency.parse(frequency)
        if frequency == DCAFrequency.DAILY:
            return "Every day"
        if frequency == DCAFrequency.TWICE_WEEKLY:
            return "Twice a week"
        if frequency == DCAFrequency.BIWEEKLY:
            return "Every 2 weeks"
        if frequency == DCAFrequency.MONTHLY:
            return "Every month"

        days = _normalize_days(selected_days)
        if not days:
            return "Every week"
        if len(days) == 1:
            return f"Every {WEEKDAY_NAMES[days[0]]}"
        return "Every " + ", ".join(WEEKDAY_NAMES[d][:3] for d in days)

    @staticmethod
    def risk_range_description(bands: Iterable[RiskBand]) -> str:
        """Span covered by the selected risk bands, e.g. ``"0 - 40"``."""
        ordered = sorted((RiskBand(b) for b in bands), key=lambda b: b.risk_range[0])
        if not ordered:
            return ""
        return f"{int(ordered[0].risk_range[0])} - {int(ordered[-1].risk_range[1])}"


# Singleton instance
dca_calculator = DCACalculatorService()
