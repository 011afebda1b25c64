"""Tests for risk-based reminder triggers."""

from datetime import date

import pytest

from dcafolio.core.exceptions import (
    DCAFolioError,
    InvalidChoiceError,
    InvalidRiskScoreError,
    InvalidStateTransitionError,
)
from dcafolio.models.risk_reminder import RiskCategory, RiskCondition, RiskReminderState
from dcafolio.services.risk_trigger import RiskTriggerEvaluator


@pytest.fixture
def evaluator():
    return RiskTriggerEvaluator()


class TestEvaluate:
    def test_below(self, evaluator):
        assert evaluator.evaluate(29, 30, RiskCondition.BELOW).triggered
        assert not evaluator.evaluate(35, 30, RiskCondition.BELOW).triggered

    def test_above(self, evaluator):
        assert evaluator.evaluate(71, 70, "above").triggered
        assert not evaluator.evaluate(65, 70, "above").triggered

    def test_equality_never_triggers(self, evaluator):
        assert not evaluator.evaluate(30, 30, RiskCondition.BELOW).triggered
        assert not evaluator.evaluate(30, 30, RiskCondition.ABOVE).triggered

    @pytest.mark.parametrize("score", [-1, 100.5, None])
    def test_out_of_range_score(self, evaluator, score):
        with pytest.raises(InvalidRiskScoreError):
            evaluator.evaluate(score, 30, RiskCondition.BELOW)

    def test_unknown_condition(self, evaluator):
        with pytest.raises(InvalidChoiceError) as exc_info:
            evaluator.evaluate(50, 30, "sideways")
        assert isinstance(exc_info.value, DCAFolioError)
        assert exc_info.value.field == "risk condition"


class TestStateMachine:
    def test_trigger_is_sticky_until_dismissed(self, evaluator, make_risk_reminder):
        reminder = make_risk_reminder()

        reminder = evaluator.apply(reminder, 35)
        assert reminder.state == RiskReminderState.MONITORING

        reminder = evaluator.apply(reminder, 29)
        assert reminder.is_triggered
        assert reminder.last_triggered_risk_level == 29

        reminder = evaluator.apply(reminder, 40)
        assert reminder.is_triggered
        assert reminder.last_triggered_risk_level == 29

        reminder = evaluator.dismiss(reminder)
        assert reminder.state == RiskReminderState.MONITORING
        assert evaluator.apply(reminder, 40).state == RiskReminderState.MONITORING

    def test_invest_rearms(self, evaluator, make_risk_reminder):
        reminder = evaluator.apply(make_risk_reminder(), 10)
        assert evaluator.invest(reminder).state == RiskReminderState.MONITORING

    def test_paused_ignores_scores(self, evaluator, make_risk_reminder):
        reminder = evaluator.pause(make_risk_reminder())
        assert not reminder.is_active
        assert evaluator.apply(reminder, 5).state == RiskReminderState.PAUSED

    def test_resume_reevaluates(self, evaluator, make_risk_reminder):
        paused = evaluator.pause(make_risk_reminder())
        assert evaluator.resume(paused, 10).state == RiskReminderState.TRIGGERED
        assert evaluator.resume(paused, 50).state == RiskReminderState.MONITORING

    def test_resume_requires_paused(self, evaluator, make_risk_reminder):
        with pytest.raises(InvalidStateTransitionError):
            evaluator.resume(make_risk_reminder(), 10)

    def test_dismiss_and_invest_rejected_when_paused(self, evaluator, make_risk_reminder):
        paused = evaluator.pause(make_risk_reminder())
        with pytest.raises(InvalidStateTransitionError):
            evaluator.dismiss(paused)
        with pytest.raises(InvalidStateTransitionError):
            evaluator.invest(paused)


class TestCheckReminders:
    def test_reports_newly_triggered(self, evaluator, make_risk_reminder):
        eth = make_risk_reminder()
        btc = make_risk_reminder(symbol="BTC", name="Bitcoin")
        already = make_risk_reminder(state=RiskReminderState.TRIGGERED)

        updated, newly = evaluator.check_reminders([eth, btc, already], {"eth": 20})

        assert [r.id for r in newly] == [eth.id]
        assert updated[1] is btc
        assert updated[2].is_triggered

    def test_no_scores(self, evaluator, make_risk_reminder):
        reminder = make_risk_reminder()
        updated, newly = evaluator.check_reminders([reminder], {})
        assert updated == [reminder]
        assert newly == []


class TestRiskModel:
    @pytest.mark.parametrize(
        "score,category",
        [
            (0, RiskCategory.VERY_LOW),
            (19.9, RiskCategory.VERY_LOW),
            (20, RiskCategory.LOW),
            (59.99, RiskCategory.MODERATE),
            (60, RiskCategory.HIGH),
            (80, RiskCategory.VERY_HIGH),
            (100, RiskCategory.VERY_HIGH),
        ],
    )
    def test_category_from_score(self, score, category):
        assert RiskCategory.from_score(score) == category

    def test_threshold_out_of_range(self, make_risk_reminder):
        with pytest.raises(InvalidRiskScoreError):
            make_risk_reminder(risk_threshold=150)

    @pytest.mark.parametrize("overrides", [{"risk_condition": "sideways"}, {"state": "armed"}])
    def test_unknown_condition_or_state(self, make_risk_reminder, overrides):
        with pytest.raises(InvalidChoiceError):
            make_risk_reminder(**overrides)

    def test_trigger_description(self, make_risk_reminder):
        assert make_risk_reminder().trigger_description == "When risk below 30%"

    def test_record_investment(self, evaluator, make_risk_reminder):
        reminder = make_risk_reminder(amount=250.0)
        investment = evaluator.record_investment(reminder, 2500.0, 25, purchase_date=date(2024, 5, 1))
        assert investment.risk_level_at_purchase == 25
        assert investment.quantity == pytest.approx(0.1)
