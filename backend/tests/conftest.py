"""Shared fixtures: in-memory database, static exchange rates and an API client."""

import os
import tempfile
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("FX_CACHE_ENABLED", "false")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "tripwise-test-logs"))

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import tripwise.models  # noqa: F401
from tripwise.database import Base, get_db
from tripwise.main import app
from tripwise.services.currency_service import RateTable
from tripwise.services.exchange_rate_client import get_rate_provider

# Units of each currency per US dollar
USD_RATES = {"USD": "1", "EUR": "0.8", "GBP": "0.5", "JPY": "150", "AUD": "1.5"}


class StaticRates:
    """Rate provider backed by a fixed USD table. Records every request."""

    def __init__(self, usd_rates: dict[str, str]):
        self.usd_rates = {code: Decimal(rate) for code, rate in usd_rates.items()}
        self.calls: list[tuple[str, list[str]]] = []

    async def get_rates(self, base: str, symbols: list[str]) -> RateTable:
        self.calls.append((base, list(symbols)))
        base_rate = self.usd_rates.get(base)
        rates = {}
        if base_rate is not None:
            for symbol in symbols:
                if symbol in self.usd_rates:
                    rates[symbol] = self.usd_rates[symbol] / base_rate
        return RateTable(base=base, rates=rates)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def rates():
    return StaticRates(USD_RATES)


@pytest.fixture
async def client(session_factory, rates):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_provider] = lambda: rates
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


# ─── API helpers ───

async def create_trip(client, **overrides) -> dict:
    payload = {"title": "Tokyo spring", "destination_city": "Tokyo", "currency": "USD", **overrides}
    resp = await client.post("/api/trips", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def add_traveler(client, trip_id: str, name: str, **overrides) -> dict:
    resp = await client.post(f"/api/trips/{trip_id}/travelers", json={"name": name, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def leg(order: int, dep: str, arr: str, day: str = "2026-04-01") -> dict:
    return {
        "leg_order": order,
        "departure_airport": dep,
        "arrival_airport": arr,
        "departure_date": day,
        "arrival_date": day,
    }


async def add_flight(client, trip_id: str, **overrides) -> dict:
    payload = {
        "flight_type": "one_way",
        "unit_fare": 500,
        "currency_code": "USD",
        "status": "confirmed",
        "legs": [leg(1, "SFO", "NRT")],
        **overrides,
    }
    resp = await client.post(f"/api/trips/{trip_id}/flights", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def add_adhoc(client, trip_id: str, name: str, amount, currency: str = "USD", **overrides) -> dict:
    payload = {"name": name, "amount": amount, "currency_code": currency, **overrides}
    resp = await client.post(f"/api/trips/{trip_id}/adhoc-expenses", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()
