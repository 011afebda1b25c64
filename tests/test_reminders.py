"""DCA reminder endpoint tests."""

import pytest
from httpx import AsyncClient

BASE = "/api/v1/reminders"


@pytest.mark.asyncio
async def test_list_frequencies(client: AsyncClient):
    response = await client.get(f"{BASE}/frequencies")
    assert response.status_code == 200
    data = {item["value"]: item for item in response.json()}
    assert set(data) == {"daily", "twice_weekly", "weekly", "biweekly", "monthly"}
    assert data["twice_weekly"]["label"] == "Twice Weekly"
    assert data["twice_weekly"]["option"] == "weekly"


@pytest.mark.asyncio
async def test_next_occurrence_end_of_month(client: AsyncClient):
    response = await client.post(
        f"{BASE}/next-occurrence",
        json={"last_date": "2024-01-31", "frequency": "monthly"},
    )
    assert response.status_code == 200
    assert response.json()["next_date"] == "2024-02-29"


@pytest.mark.asyncio
async def test_next_occurrence_with_anchor(client: AsyncClient):
    response = await client.post(
        f"{BASE}/next-occurrence",
        json={"last_date": "2024-02-29", "frequency": "monthly", "anchor_day": 31},
    )
    assert response.json()["next_date"] == "2024-03-31"


@pytest.mark.asyncio
async def test_next_occurrence_unknown_frequency(client: AsyncClient):
    response = await client.post(
        f"{BASE}/next-occurrence",
        json={"last_date": "2024-01-31", "frequency": "hourly"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_due_reminders(client: AsyncClient, reminder_payload: dict):
    later = {**reminder_payload, "symbol": "ETH", "name": "Ethereum", "next_reminder_date": "2024-01-22"}
    paused = {**reminder_payload, "is_active": False}
    response = await client.post(
        f"{BASE}/due",
        json={"reminders": [reminder_payload, later, paused], "today": "2024-01-15"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["today"] == "2024-01-15"
    assert [r["symbol"] for r in data["reminders"]] == ["BTC"]


@pytest.mark.asyncio
async def test_invest(client: AsyncClient, reminder_payload: dict):
    response = await client.post(
        f"{BASE}/invest",
        json={"reminder": reminder_payload, "price_at_purchase": 50000, "purchase_date": "2024-01-15"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["reminder"]["completed_purchases"] == 3
    assert data["reminder"]["next_reminder_date"] == "2024-01-22"
    assert data["reminder"]["progress_text"] == "3/10"
    assert data["investment"]["quantity"] == pytest.approx(0.002)


@pytest.mark.asyncio
async def test_invest_without_price(client: AsyncClient, reminder_payload: dict):
    response = await client.post(f"{BASE}/invest", json={"reminder": reminder_payload})
    assert response.status_code == 200
    assert response.json()["investment"] is None


@pytest.mark.asyncio
async def test_invest_completed_reminder(client: AsyncClient, reminder_payload: dict):
    completed = {**reminder_payload, "total_purchases": 2}
    response = await client.post(f"{BASE}/invest", json={"reminder": completed})
    assert response.status_code == 422
    assert response.json()["error"] == "ReminderCompletedError"


@pytest.mark.asyncio
async def test_invalid_reminder_record(client: AsyncClient, reminder_payload: dict):
    broken = {**reminder_payload, "total_purchases": 1}
    response = await client.post(f"{BASE}/skip", json={"reminder": broken})
    assert response.status_code == 422
    assert "exceed" in response.json()["detail"]


@pytest.mark.asyncio
async def test_skip(client: AsyncClient, reminder_payload: dict):
    response = await client.post(f"{BASE}/skip", json={"reminder": reminder_payload})
    assert response.status_code == 200
    data = response.json()
    assert data["completed_purchases"] == 2
    assert data["next_reminder_date"] == "2024-01-22"


@pytest.mark.asyncio
async def test_toggle(client: AsyncClient, reminder_payload: dict):
    response = await client.post(f"{BASE}/toggle", json={"reminder": reminder_payload})
    assert response.status_code == 200
    assert response.json()["is_active"] is False


@pytest.mark.asyncio
async def test_generate_plan(client: AsyncClient):
    response = await client.post(
        f"{BASE}/plan",
        json={
            "total_amount": 1200,
            "symbol": "btc",
            "frequency": "monthly",
            "duration_months": 12,
            "start_date": "2024-01-15",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["symbol"] == "BTC"
    assert data["number_of_purchases"] == 13
    assert data["amount_per_purchase"] == 92.31
    assert data["end_date"] == "2025-01-15"
    assert data["frequency_description"] == "Every month"


@pytest.mark.asyncio
async def test_generate_plan_below_minimum(client: AsyncClient):
    response = await client.post(
        f"{BASE}/plan",
        json={"total_amount": 50, "symbol": "BTC", "frequency": "weekly", "start_date": "2024-01-01"},
    )
    assert response.status_code == 422
    assert "Minimum investment amount" in response.json()["detail"]


@pytest.mark.asyncio
async def test_due_reminders_fills_initial_date(client: AsyncClient, reminder_payload: dict):
    fresh = {**reminder_payload, "completed_purchases": 0}
    fresh.pop("next_reminder_date")
    response = await client.post(
        f"{BASE}/due",
        json={"reminders": [fresh], "today": "2024-01-01"},
    )
    assert response.status_code == 200
    [reminder] = response.json()["reminders"]
    assert reminder["next_reminder_date"] == "2024-01-01"


@pytest.mark.asyncio
async def test_custom_frequency_option_on_reminder(client: AsyncClient, reminder_payload: dict):
    custom = {**reminder_payload, "frequency": "custom"}
    response = await client.post(f"{BASE}/skip", json={"reminder": custom})
    assert response.status_code == 200
    data = response.json()
    assert data["frequency"] == "weekly"
    assert data["next_reminder_date"] == "2024-01-22"


@pytest.mark.asyncio
async def test_generate_plan_custom_frequency(client: AsyncClient):
    response = await client.post(
        f"{BASE}/plan",
        json={"total_amount": 1200, "symbol": "BTC", "frequency": "custom", "start_date": "2024-01-01"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["frequency"] == "weekly"
    assert data["purchase_dates"][1] == "2024-01-08"
