"""Trigger evaluation for risk-based DCA reminders."""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from dcafolio.core.exceptions import InvalidStateTransitionError, ValidationError
from dcafolio.models.reminder import DCAInvestment
from dcafolio.models.risk_reminder import (
    RiskBasedDCAReminder,
    RiskCondition,
    RiskReminderState,
    validate_risk_score,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskEvaluation:
    """Outcome of comparing a risk score to a threshold."""

    triggered: bool
    risk_level: float


class RiskTriggerEvaluator:
    """Drives the monitoring / triggered / paused cycle of risk reminders.

    A triggered reminder stays triggered until the user dismisses it or
    invests; a later score on the other side of the threshold does not
    re-arm it.
    """

    def evaluate(
        self, current_risk: float, threshold: float, condition: RiskCondition
    ) -> RiskEvaluation:
        """Strict comparison: a score equal to the threshold never fires."""
        current_risk = validate_risk_score(current_risk)
        threshold = validate_risk_score(threshold, "Risk threshold")
        condition = RiskCondition.parse(condition)

        if condition == RiskCondition.ABOVE:
            triggered = current_risk > threshold
        else:
            triggered = current_risk < threshold
        return RiskEvaluation(triggered=triggered, risk_level=current_risk)

    def apply(self, reminder: RiskBasedDCAReminder, current_risk: float) -> RiskBasedDCAReminder:
        """Re-evaluate a reminder against the latest score."""
        evaluation = self.evaluate(current_risk, reminder.risk_threshold, reminder.risk_condition)
        if reminder.state != RiskReminderState.MONITORING or not evaluation.triggered:
            return reminder

        logger.info(
            "Risk reminder %s triggered: %s risk %.1f %s %.1f",
            reminder.id,
            reminder.symbol,
            evaluation.risk_level,
            reminder.risk_condition.value,
            reminder.risk_threshold,
        )
        return replace(
            reminder,
            state=RiskReminderState.TRIGGERED,
            last_triggered_risk_level=evaluation.risk_level,
        )

    def check_reminders(
        self,
        reminders: Iterable[RiskBasedDCAReminder],
        risk_levels: Dict[str, float],
    ) -> Tuple[List[RiskBasedDCAReminder], List[RiskBasedDCAReminder]]:
        """Evaluate a batch against per-symbol scores.

        Returns ``(all_reminders, newly_triggered)``; reminders whose symbol
        has no score are passed through unchanged.
        """
        scores = {symbol.upper(): score for symbol, score in risk_levels.items()}
        updated: List[RiskBasedDCAReminder] = []
        newly_triggered: List[RiskBasedDCAReminder] = []

        for reminder in reminders:
            score = scores.get(reminder.symbol.upper())
            if score is None:
                updated.append(reminder)
                continue
            result = self.apply(reminder, score)
            if result.is_triggered and not reminder.is_triggered:
                newly_triggered.append(result)
            updated.append(result)

        return updated, newly_triggered

    def dismiss(self, reminder: RiskBasedDCAReminder) -> RiskBasedDCAReminder:
        """Clear a trigger without investing."""
        if reminder.state == RiskReminderState.PAUSED:
            raise InvalidStateTransitionError("Cannot dismiss a paused reminder")
        return replace(reminder, state=RiskReminderState.MONITORING)

    def invest(self, reminder: RiskBasedDCAReminder) -> RiskBasedDCAReminder:
        """Acknowledge a purchase and go back to monitoring."""
        if reminder.state == RiskReminderState.PAUSED:
            raise InvalidStateTransitionError("Cannot invest from a paused reminder")
        return replace(reminder, state=RiskReminderState.MONITORING)

    def pause(self, reminder: RiskBasedDCAReminder) -> RiskBasedDCAReminder:
        return replace(reminder, state=RiskReminderState.PAUSED)

    def resume(self, reminder: RiskBasedDCAReminder, current_risk: float) -> RiskBasedDCAReminder:
        """Reactivate a paused reminder, re-evaluated against ``current_risk``."""
        if reminder.state != RiskReminderState.PAUSED:
            raise InvalidStateTransitionError(
                f"Only paused reminders can be resumed (state: {reminder.state.value})"
            )
        return self.apply(replace(reminder, state=RiskReminderState.MONITORING), current_risk)

    def record_investment(
        self,
        reminder: RiskBasedDCAReminder,
        price_at_purchase: float,
        risk_level: float,
        purchase_date: Optional[date] = None,
    ) -> DCAInvestment:
        """Investment record carrying the risk level it was made at."""
        if price_at_purchase <= 0:
            raise ValidationError("Purchase price must be greater than zero")
        return DCAInvestment(
            reminder_id=reminder.id,
            amount=reminder.amount,
            price_at_purchase=price_at_purchase,
            purchase_date=purchase_date or datetime.now(timezone.utc).date(),
            risk_level_at_purchase=validate_risk_score(risk_level),
        )


# Singleton instance
risk_trigger_evaluator = RiskTriggerEvaluator()
