"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

# Set test env vars before any app import
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dcafolio.core.rate_limit import limiter
from dcafolio.main import app


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Start every test with empty rate-limit counters."""
    limiter.reset()
    yield


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async test client bound to the app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_id() -> str:
    return "7f1d2c9e-3b4a-4c5d-8e6f-0a1b2c3d4e5f"


@pytest.fixture
def portfolio_id() -> str:
    return "11111111-2222-4333-8444-555555555555"


@pytest.fixture
def reminder_payload(user_id: str) -> dict:
    """Weekly BTC reminder, 2 of 10 purchases done."""
    return {
        "user_id": user_id,
        "symbol": "BTC",
        "name": "Bitcoin",
        "amount": 100.0,
        "frequency": "weekly",
        "total_purchases": 10,
        "completed_purchases": 2,
        "start_date": "2024-01-01",
        "next_reminder_date": "2024-01-15",
    }


@pytest.fixture
def risk_reminder_payload(user_id: str) -> dict:
    """ETH reminder firing when risk falls below 30."""
    return {
        "user_id": user_id,
        "symbol": "ETH",
        "name": "Ethereum",
        "amount": 250.0,
        "risk_threshold": 30,
        "risk_condition": "below",
    }


@pytest.fixture
def btc_holding_payload(portfolio_id: str) -> dict:
    return {
        "portfolio_id": portfolio_id,
        "asset_type": "crypto",
        "symbol": "BTC",
        "name": "Bitcoin",
        "quantity": 1.0,
        "average_buy_price": 10000.0,
        "current_price": 20000.0,
    }
