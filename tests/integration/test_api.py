"""Integration tests for API endpoints."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.agents.messaging.drafter import MessageDrafter
from app.config import PostcodeConfig, WeatherConfig
from app.db.store import SqlStore
from app.dependencies import get_drafter, get_forecast, get_job_service, get_postcodes
from app.errors import ExternalServiceUnavailable
from app.main import app
from app.models import Base
from app.services.job_service import JobService
from app.services.postcodes import PostcodeLookup
from app.services.weather import ForecastService, OpenMeteoProvider

NOW = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)
TODAY = NOW.date().isoformat()


def _no_llm():
    raise ExternalServiceUnavailable("no key")


def _weather(request: httpx.Request) -> httpx.Response:
    if "geocoding" in request.url.host:
        return httpx.Response(200, json={"results": [{"latitude": 51.5, "longitude": -0.12}]})
    return httpx.Response(200, json={"daily": {
        "time": [TODAY],
        "temperature_2m_max": [18.0],
        "precipitation_probability_max": [80],
        "wind_speed_10m_max": [10.0],
        "relative_humidity_2m_mean": [50],
        "weather_code": [63],
    }})


def _postcodes(request: httpx.Request) -> httpx.Response:
    points = {"/postcodes/SW1A%201AA": (51.501, -0.1416), "/postcodes/BN1%201AA": (50.8225, -0.1372)}
    point = points.get(request.url.raw_path.decode())
    if point is None:
        return httpx.Response(404)
    return httpx.Response(200, json={"result": {"latitude": point[0], "longitude": point[1]}})


@pytest_asyncio.fixture
async def client():
    """Test client over an in-memory store with mocked weather, postcodes and no LLM."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    service = JobService(SqlStore(factory), "org", clock=lambda: NOW)
    await service.load()
    forecast = ForecastService(
        OpenMeteoProvider(WeatherConfig(), transport=httpx.MockTransport(_weather)), "London"
    )
    postcodes = PostcodeLookup(PostcodeConfig(), transport=httpx.MockTransport(_postcodes))
    drafter = MessageDrafter(provider_factory=_no_llm)

    app.dependency_overrides[get_job_service] = lambda: service
    app.dependency_overrides[get_forecast] = lambda: forecast
    app.dependency_overrides[get_postcodes] = lambda: postcodes
    app.dependency_overrides[get_drafter] = lambda: drafter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await engine.dispose()


async def _create_scheduled(client, name="Ann", day=TODAY, **extra):
    r = await client.post("/api/jobs", json={
        "customer_name": name,
        "address": f"{name} Cottage",
        "status": "Scheduled",
        "scheduled_date": day,
        "price_quote": 35,
        **extra,
    })
    assert r.status_code == 201
    return r.json()


async def test_quote_medium_weekly(client):
    r = await client.post("/api/quotes", json={"lawn_size": "Medium", "frequency": "Weekly"})
    assert r.status_code == 200
    data = r.json()
    assert data["estimated_price"] == 29.75
    assert data["estimated_duration_minutes"] == 45
    assert data["price_breakdown"]["discount"] == 5.25


async def test_lead_accept_complete_flow(client):
    r = await client.post("/api/jobs", json={"customer_name": "Ann", "address": "1 High St"})
    assert r.status_code == 201
    job_id = r.json()["id"]
    assert r.json()["status"] == "Pending"

    r = await client.post(f"/api/jobs/{job_id}/accept", json={"scheduled_date": "2024-06-03"})
    assert r.status_code == 200
    assert r.json()["status"] == "Scheduled"

    r = await client.post(f"/api/jobs/{job_id}/complete")
    assert r.status_code == 200
    data = r.json()
    assert data["job"]["status"] == "Completed"
    assert data["job"]["payment_status"] == "Unpaid"
    assert data["next_job"] is None

    r = await client.get(f"/api/jobs/{job_id}/communications")
    subjects = [c["subject"] for c in r.json()]
    assert "Lead Created" in subjects
    assert "Status Update: Completed" in subjects


async def test_invalid_transition_is_conflict(client):
    r = await client.post("/api/jobs", json={"customer_name": "Ann", "address": "1 High St"})
    job_id = r.json()["id"]
    r = await client.post(f"/api/jobs/{job_id}/complete")
    assert r.status_code == 409
    assert r.json()["current"] == "Pending"


async def test_accept_without_address_is_unprocessable(client):
    r = await client.post("/api/jobs", json={"customer_name": "Ann"})
    job_id = r.json()["id"]
    r = await client.post(f"/api/jobs/{job_id}/accept", json={"scheduled_date": "2024-06-03"})
    assert r.status_code == 422
    assert r.json()["field"] == "address"


async def test_missing_job_is_404(client):
    r = await client.get("/api/jobs/01NOTAJOB")
    assert r.status_code == 404


async def test_recurring_completion_returns_next_job(client):
    job = await _create_scheduled(client, frequency="Weekly")
    r = await client.post(f"/api/jobs/{job['id']}/complete")
    next_job = r.json()["next_job"]
    assert next_job["scheduled_date"] == "2024-06-10"
    assert next_job["status"] == "Scheduled"


async def test_payment_toggle_drafts_review_request(client):
    job = await _create_scheduled(client)
    await client.post(f"/api/jobs/{job['id']}/complete")

    r = await client.post(f"/api/jobs/{job['id']}/payment")
    assert r.status_code == 200
    assert r.json()["job"]["payment_status"] == "Paid"
    assert r.json()["review_message"].startswith("Thanks for choosing")

    r = await client.post(f"/api/jobs/{job['id']}/payment", json={"status": "Unpaid"})
    assert r.json()["job"]["payment_status"] == "Unpaid"
    assert r.json()["review_message"] is None

    r = await client.get("/api/dashboard/stats")
    assert r.json()["outstanding"] == 35


async def test_timer_endpoints(client):
    job = await _create_scheduled(client)
    r = await client.post(f"/api/jobs/{job['id']}/timer/start")
    assert r.json()["is_timer_running"]
    r = await client.post(f"/api/jobs/{job['id']}/timer/start")
    assert r.status_code == 422
    r = await client.post(f"/api/jobs/{job['id']}/timer/stop")
    assert not r.json()["is_timer_running"]


async def test_eta_message_uses_template_without_llm(client):
    job = await _create_scheduled(client)
    r = await client.post(f"/api/jobs/{job['id']}/eta-message")
    assert r.json() == {"kind": "eta", "message": "Hi Ann, I'm on my way!"}


async def test_day_plan_and_reorder(client):
    a = await _create_scheduled(client, "A")
    b = await _create_scheduled(client, "B")
    c = await _create_scheduled(client, "C")

    r = await client.post("/api/schedule/reorder", json={"ordered_ids": [c["id"], a["id"]]})
    assert r.status_code == 200

    r = await client.get("/api/schedule/day", params={"day": TODAY})
    plan = r.json()
    assert [j["id"] for j in plan["jobs"]] == [c["id"], a["id"], b["id"]]
    assert [s["start_label"] for s in plan["slots"]] == ["8:00", "9:00", "10:00"]


async def test_optimize_without_llm_keeps_order(client):
    a = await _create_scheduled(client, "A")
    b = await _create_scheduled(client, "B")
    r = await client.post("/api/schedule/optimize", params={"day": TODAY})
    data = r.json()
    assert not data["applied"]
    assert [j["id"] for j in data["plan"]["jobs"]] == [a["id"], b["id"]]


async def test_week_view(client):
    await _create_scheduled(client)
    r = await client.get("/api/schedule/week", params={"anchor": TODAY})
    cells = r.json()
    assert len(cells) == 7
    assert cells[0]["is_today"]
    assert len(cells[0]["jobs"]) == 1


async def test_rain_delay(client):
    for name in ("A", "B", "C"):
        await _create_scheduled(client, name)
    later = await _create_scheduled(client, "D", day="2024-06-04")

    r = await client.post("/api/schedule/rain-delay", json={"new_date": "2024-06-06"})
    data = r.json()
    assert len(data["affected"]) == 3
    assert all(j["is_rain_delayed"] for j in data["affected"])
    assert "2024-06-06" in data["message"]

    r = await client.get(f"/api/jobs/{later['id']}")
    assert r.json()["scheduled_date"] == "2024-06-04"


async def test_booking_with_fuel_surcharge(client):
    await client.patch("/api/settings", json={"business_base_postcode": "SW1A 1AA"})
    r = await client.post("/api/bookings", json={
        "customer_name": "Bea",
        "address": "2 Sea Front",
        "postcode": "BN1 1AA",
        "lawn_size": "Small",
        "extras": ["Edging"],
        "apply_dynamic_rules": True,
    })
    assert r.status_code == 201
    data = r.json()
    assert data["quote"]["estimated_price"] == 35.0  # 20 + 10 edging + 5 fuel
    assert data["job"]["status"] == "Pending"
    assert data["job"]["price_quote"] == 35.0
    assert "Extras: Edging" in data["job"]["notes"]


async def test_settings_update(client):
    r = await client.patch("/api/settings", json={"medium_lawn_price": 40})
    assert r.json()["medium_lawn_price"] == 40
    r = await client.post("/api/quotes", json={"lawn_size": "Medium"})
    assert r.json()["estimated_price"] == 40


async def test_weather_outlook(client):
    r = await client.get("/api/weather")
    data = r.json()
    assert data["available"]
    assert data["days"][0]["score"] == 20
    assert data["days"][0]["verdict"] == "reschedule"


async def test_settings_null_is_unprocessable(client):
    r = await client.patch("/api/settings", json={"schedule_start_hour": None})
    assert r.status_code == 422
    r = await client.patch("/api/settings", json={"working_days": [1, 9]})
    assert r.status_code == 422
    assert r.json()["field"] == "working_days"
    r = await client.get("/api/settings")
    assert r.json()["schedule_start_hour"] == 8
    assert r.json()["working_days"] == [1, 2, 3, 4, 5]


async def test_job_patch_null_is_unprocessable(client):
    job = await _create_scheduled(client)
    r = await client.patch(f"/api/jobs/{job['id']}", json={"address": None})
    assert r.status_code == 422
    r = await client.patch(f"/api/jobs/{job['id']}", json={"zone": None, "notes": "Side gate"})
    assert r.status_code == 200
    assert r.json()["address"] == "Ann Cottage"
    assert r.json()["notes"] == "Side gate"


async def test_log_call_and_rename_customer(client):
    job = await _create_scheduled(client)
    r = await client.post("/api/communications", json={
        "type": "Call", "subject": "Call logged", "body": "Asked for stripes", "job_id": job["id"],
    })
    assert r.status_code == 201
    assert r.json()["customer_id"] == "Ann-Ann Cottage"

    r = await client.post("/api/communications", json={"type": "System", "subject": "x", "job_id": job["id"]})
    assert r.status_code == 422

    r = await client.patch("/api/customers/Ann-Ann Cottage", json={"name": "Ann Smith", "address": "Ann Cottage"})
    assert r.status_code == 200
    assert [j["customer_name"] for j in r.json()] == ["Ann Smith"]

    r = await client.get("/api/communications", params={"customer_id": "Ann Smith-Ann Cottage"})
    assert [c["subject"] for c in r.json()] == ["Call logged"]

    r = await client.patch("/api/customers/Nobody-Nowhere", json={"name": "X", "address": "Y"})
    assert r.status_code == 404


async def test_expenses_and_net_profit(client):
    job = await _create_scheduled(client)
    await client.post(f"/api/jobs/{job['id']}/complete")
    await client.post(f"/api/jobs/{job['id']}/payment", json={"status": "Paid"})

    r = await client.post("/api/expenses", json={
        "title": "Fuel", "amount": 10, "category": "Car, Van & Travel Expenses",
    })
    assert r.status_code == 201
    expense = r.json()
    assert expense["date"] == TODAY

    r = await client.get("/api/dashboard/stats")
    assert r.json()["total_expenses"] == 10
    assert r.json()["net_profit"] == 25

    r = await client.delete(f"/api/expenses/{expense['id']}")
    assert r.json() == {"ok": True, "id": expense["id"]}
    assert (await client.get("/api/expenses")).json() == []
    r = await client.delete(f"/api/expenses/{expense['id']}")
    assert r.status_code == 404
