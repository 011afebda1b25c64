"""Scheduling service for recurring DCA reminders."""

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Union
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from dcafolio.core.config import settings
from dcafolio.core.exceptions import InvalidFrequencyError, ReminderCompletedError, ValidationError
from dcafolio.models.reminder import DCAFrequency, DCAInvestment, DCAReminder

logger = logging.getLogger(__name__)

FIXED_INTERVAL_DAYS = {
    DCAFrequency.DAILY: 1,
    DCAFrequency.WEEKLY: 7,
    DCAFrequency.BIWEEKLY: 14,
}


def add_months(d: date, months: int, anchor_day: Optional[int] = None) -> date:
    """Shift ``d`` by whole calendar months, clamping to the month's last day.

    ``anchor_day`` overrides the day-of-month to aim for, so a schedule
    started on the 31st returns to the 31st after passing through a
    shorter month.
    """
    if anchor_day is not None and not 1 <= anchor_day <= 31:
        raise ValidationError(f"Anchor day must be between 1 and 31, got {anchor_day}")
    return d + relativedelta(months=months, day=anchor_day or d.day)


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class ReminderScheduler:
    """Computes occurrence dates and due status for DCA reminders."""

    def __init__(
        self,
        twice_weekly_days: Optional[Sequence[int]] = None,
        timezone_name: Optional[str] = None,
    ):
        days = twice_weekly_days if twice_weekly_days is not None else settings.TWICE_WEEKLY_DAYS
        if len(set(days)) != 2 or any(d < 0 or d > 6 for d in days):
            raise ValidationError("Twice-weekly schedule needs two distinct weekdays (0-6)")
        self.twice_weekly_days = tuple(sorted(days))
        self.tz = ZoneInfo(timezone_name or settings.TIMEZONE)

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        return datetime.now(self.tz).date()

    def next_occurrence(
        self,
        last_date: Union[date, datetime],
        frequency: Union[DCAFrequency, str],
        anchor_day: Optional[int] = None,
    ) -> date:
        """Return the occurrence following ``last_date``.

        The result is always strictly after ``last_date``. ``anchor_day``
        only affects monthly reminders.
        """
        frequency = DCAFrequency.parse(frequency)
        last_date = _as_date(last_date)

        if frequency in FIXED_INTERVAL_DAYS:
            return last_date + timedelta(days=FIXED_INTERVAL_DAYS[frequency])
        if frequency == DCAFrequency.TWICE_WEEKLY:
            return min(
                last_date + timedelta(days=(weekday - last_date.weekday() - 1) % 7 + 1)
                for weekday in self.twice_weekly_days
            )
        if frequency == DCAFrequency.MONTHLY:
            return add_months(last_date, 1, anchor_day)

        raise InvalidFrequencyError(frequency)

    def first_occurrence(
        self, start_date: Union[date, datetime], frequency: Union[DCAFrequency, str]
    ) -> date:
        """First scheduled date on or after ``start_date``."""
        frequency = DCAFrequency.parse(frequency)
        start_date = _as_date(start_date)
        if frequency == DCAFrequency.TWICE_WEEKLY:
            return min(
                start_date + timedelta(days=(weekday - start_date.weekday()) % 7)
                for weekday in self.twice_weekly_days
            )
        return start_date

    def scheduled_date(self, reminder: DCAReminder) -> date:
        """The reminder's pending occurrence."""
        if reminder.next_reminder_date is not None:
            return reminder.next_reminder_date
        return self.first_occurrence(reminder.start_date, reminder.frequency)

    def with_initial_schedule(self, reminder: DCAReminder) -> DCAReminder:
        """Fill in ``next_reminder_date`` for a newly created reminder."""
        if reminder.next_reminder_date is not None:
            return reminder
        return replace(reminder, next_reminder_date=self.scheduled_date(reminder))

    def advance(self, reminder: DCAReminder) -> date:
        """Occurrence after the reminder's pending one."""
        return self.next_occurrence(
            self.scheduled_date(reminder),
            reminder.frequency,
            anchor_day=reminder.start_date.day,
        )

    def is_due_today(
        self, reminder: DCAReminder, today: Optional[Union[date, datetime]] = None
    ) -> bool:
        """Active, not completed, and scheduled for ``today``."""
        if not reminder.is_active or reminder.is_completed:
            return False
        today = _as_date(today) if today is not None else self.today()
        return self.scheduled_date(reminder) == today

    def due_reminders(
        self,
        reminders: Iterable[DCAReminder],
        today: Optional[Union[date, datetime]] = None,
    ) -> List[DCAReminder]:
        """Filter reminders due on ``today``."""
        today = _as_date(today) if today is not None else self.today()
        return [r for r in reminders if self.is_due_today(r, today)]

    def mark_invested(self, reminder: DCAReminder) -> DCAReminder:
        """Count one purchase and move to the next occurrence."""
        if reminder.is_completed:
            raise ReminderCompletedError(
                f"Reminder {reminder.id} already completed {reminder.progress_text} purchases"
            )
        updated = replace(
            reminder,
            completed_purchases=reminder.completed_purchases + 1,
            next_reminder_date=self.advance(reminder),
        )
        logger.debug(
            "Reminder %s invested (%s), next on %s",
            reminder.id,
            updated.progress_text,
            updated.next_reminder_date,
        )
        return updated

    def skip(self, reminder: DCAReminder) -> DCAReminder:
        """Move to the next occurrence without counting a purchase."""
        if reminder.is_completed:
            raise ReminderCompletedError(f"Reminder {reminder.id} is already completed")
        updated = replace(reminder, next_reminder_date=self.advance(reminder))
        logger.debug("Reminder %s skipped, next on %s", reminder.id, updated.next_reminder_date)
        return updated

    def toggle(self, reminder: DCAReminder) -> DCAReminder:
        """Flip the active flag."""
        return replace(reminder, is_active=not reminder.is_active)

    def record_investment(
        self,
        reminder: DCAReminder,
        price_at_purchase: float,
        purchase_date: Optional[date] = None,
        amount: Optional[float] = None,
    ) -> DCAInvestment:
        """Build the investment record for a purchase made from a reminder."""
        if price_at_purchase <= 0:
            raise ValidationError("Purchase price must be greater than zero")
        return DCAInvestment(
            reminder_id=reminder.id,
            amount=amount if amount is not None else reminder.amount,
            price_at_purchase=price_at_purchase,
            purchase_date=purchase_date or self.today(),
        )


# Singleton instance
reminder_scheduler = ReminderScheduler()
