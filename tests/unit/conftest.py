"""Shared fixtures for service unit tests."""

import uuid
from datetime import date

import pytest

from dcafolio.models.portfolio import PortfolioHolding
from dcafolio.models.reminder import DCAFrequency, DCAReminder
from dcafolio.models.risk_reminder import RiskBasedDCAReminder, RiskCondition


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def portfolio_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def make_reminder(user_id):
    """Factory for DCA reminders with sensible defaults."""

    def _make(**overrides) -> DCAReminder:
        fields = {
            "user_id": user_id,
            "symbol": "BTC",
            "name": "Bitcoin",
            "amount": 100.0,
            "frequency": DCAFrequency.WEEKLY,
            "start_date": date(2024, 1, 1),
        }
        fields.update(overrides)
        return DCAReminder(**fields)

    return _make


@pytest.fixture
def make_risk_reminder(user_id):
    def _make(**overrides) -> RiskBasedDCAReminder:
        fields = {
            "user_id": user_id,
            "symbol": "ETH",
            "name": "Ethereum",
            "amount": 250.0,
            "risk_threshold": 30.0,
            "risk_condition": RiskCondition.BELOW,
        }
        fields.update(overrides)
        return RiskBasedDCAReminder(**fields)

    return _make


@pytest.fixture
def make_holding(portfolio_id):
    def _make(**overrides) -> PortfolioHolding:
        fields = {
            "portfolio_id": portfolio_id,
            "asset_type": "crypto",
            "symbol": "BTC",
            "name": "Bitcoin",
            "quantity": 1.0,
            "average_buy_price": 10000.0,
            "current_price": 20000.0,
        }
        fields.update(overrides)
        return PortfolioHolding(**fields)

    return _make
