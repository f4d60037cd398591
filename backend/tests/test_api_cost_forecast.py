"""End-to-end tests for forecast collection, actuals and settlement."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conftest import add_adhoc, add_flight, add_traveler, create_trip
from tripwise.services.cost_forecast_service import cost_forecast_service
from tripwise.services.expense_actuals_service import expense_actuals_service


async def planned_trip(client, fare=500):
    trip = await create_trip(client)
    alice = await add_traveler(client, trip["id"], "Alice", is_primary=True)
    bob = await add_traveler(client, trip["id"], "Bob")
    await add_flight(client, trip["id"], unit_fare=fare, traveler_ids=[alice["id"], bob["id"]])
    return trip, alice, bob


async def collect(client, trip_id, **body):
    return await client.post(f"/api/trips/{trip_id}/cost-forecast", json=body or None)


# ─── Collection ───

async def test_flight_and_hotel_for_two(client):
    trip, _, _ = await planned_trip(client)
    resp = await client.post(f"/api/trips/{trip['id']}/accommodations", json={
        "name": "Park Hotel", "total_price": 500, "currency_code": "USD", "status": "confirmed",
    })
    assert resp.status_code == 201

    report = (await collect(client, trip["id"])).json()

    assert report["total_cost"] == 1500.0
    assert sum(m["total"] for m in report["module_breakdown"]) == report["total_cost"]
    assert [s["share_amount"] for s in report["traveler_shares"]] == [750.0, 750.0]


async def test_forecast_splits_total_between_sharers(client):
    trip, alice, bob = await planned_trip(client)
    await add_adhoc(client, trip["id"], "Rail pass", 500)

    resp = await collect(client, trip["id"])
    assert resp.status_code == 200, resp.text
    report = resp.json()

    assert report["base_currency"] == "USD"
    assert report["total_cost"] == 1500.0
    assert report["status_filter"] == ["confirmed", "shortlisted"]
    modules = {m["module"]: m for m in report["module_breakdown"]}
    assert modules["flights"]["total"] == 1000.0
    assert modules["flights"]["items"][0]["headcount"] == 2
    assert modules["adhoc"]["total"] == 500.0
    assert modules["itinerary"]["items_count"] == 0

    shares = report["traveler_shares"]
    assert [(s["traveler_name"], s["share_amount"]) for s in shares] == [("Alice", 750.0), ("Bob", 750.0)]
    assert shares[0]["is_primary"] == 1
    assert report["cost_sharers_count"] == 2

    stored = await client.get(f"/api/trips/{trip['id']}/cost-forecast")
    assert stored.status_code == 200
    assert stored.json() == report


async def test_foreign_items_are_converted(client, rates):
    trip, _, _ = await planned_trip(client)
    await add_adhoc(client, trip["id"], "Museum", 80, currency="EUR")

    report = (await collect(client, trip["id"])).json()

    assert report["total_cost"] == 1100.0
    assert rates.calls == [("USD", ["EUR"])]
    fx = report["fx_items"]
    assert len(fx) == 1
    assert fx[0]["original_amount"] == 80.0
    assert fx[0]["exchange_rate"] == 1.25
    assert fx[0]["converted_amount"] == 100.0


async def test_primary_traveler_currency_is_the_base(client):
    trip = await create_trip(client, currency="USD")
    await add_traveler(client, trip["id"], "Ana", is_primary=True, currency="EUR")
    await add_adhoc(client, trip["id"], "Dinner", 100)

    report = (await collect(client, trip["id"])).json()

    assert report["base_currency"] == "EUR"
    assert report["total_cost"] == 80.0
    assert report["traveler_shares"][0]["share_currency"] == "EUR"


async def test_status_selection(client):
    trip, _, _ = await planned_trip(client)
    await add_flight(client, trip["id"], unit_fare=999, status="draft")

    report = (await collect(client, trip["id"], statuses=["draft"])).json()
    assert report["total_cost"] == 999.0
    assert report["status_filter"] == ["draft"]


async def test_empty_status_selection_is_rejected(client):
    trip, _, _ = await planned_trip(client)

    resp = await collect(client, trip["id"], statuses=[])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "validation_error"

    resp = await collect(client, trip["id"], statuses=["booked"])
    assert resp.status_code == 400


async def test_no_cost_sharers(client):
    trip = await create_trip(client)
    await add_traveler(client, trip["id"], "Kid", is_cost_sharer=False)
    await add_adhoc(client, trip["id"], "Snacks", 10)

    resp = await collect(client, trip["id"])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "no_cost_sharers"
    assert (await client.get(f"/api/trips/{trip['id']}/cost-forecast")).status_code == 404


async def test_missing_exchange_rate(client):
    trip, _, _ = await planned_trip(client)
    await add_adhoc(client, trip["id"], "Fondue", 60, currency="CHF")

    resp = await collect(client, trip["id"])
    assert resp.status_code == 502
    body = resp.json()
    assert body["error"]["code"] == "fx_unavailable"
    assert "CHF" in body["detail"]


async def test_item_without_currency(client):
    trip, _, _ = await planned_trip(client)
    await add_flight(client, trip["id"], unit_fare=10, currency_code=None)

    resp = await collect(client, trip["id"])
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "data_integrity_error"


async def test_recollecting_replaces_the_snapshot(client):
    trip, _, _ = await planned_trip(client)
    first = (await collect(client, trip["id"])).json()
    await add_adhoc(client, trip["id"], "Taxi", 50)
    second = (await collect(client, trip["id"])).json()

    assert first["total_cost"] == 1000.0
    assert second["total_cost"] == 1050.0
    assert (await client.get(f"/api/trips/{trip['id']}/cost-forecast")).json()["total_cost"] == 1050.0


async def test_unknown_trip(client):
    resp = await collect(client, "00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Trip not found"


async def test_forecast_before_collection(client):
    trip = await create_trip(client)
    resp = await client.get(f"/api/trips/{trip['id']}/cost-forecast")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No cost data collected yet"


async def test_share_in_display_currency(client):
    trip, alice, bob = await planned_trip(client)
    await add_adhoc(client, trip["id"], "Rail pass", 500)
    await collect(client, trip["id"])

    resp = await client.get(
        f"/api/trips/{trip['id']}/cost-forecast/shares/{bob['id']}", params={"currency": "eur"}
    )
    assert resp.status_code == 200, resp.text
    share = resp.json()
    assert share["share_amount"] == 750.0
    assert share["display_currency"] == "EUR"
    assert share["display_amount"] == 600.0
    assert share["exchange_rate"] == 0.8


# ─── Actuals and settlement ───

async def test_actuals_lifecycle_and_settlement(client):
    trip, alice, bob = await planned_trip(client, fare=250)
    base = f"/api/trips/{trip['id']}/expense-actuals"
    await collect(client, trip["id"])

    resp = await client.post(f"{base}/transfer")
    assert resp.status_code == 200
    assert resp.json()["transferred_count"] == 2

    actuals = (await client.get(base)).json()
    assert sorted(a["traveler_name"] for a in actuals) == ["Alice", "Bob"]
    assert all(a["actual_amount"] == 250.0 for a in actuals)

    # Nothing marked as paid yet
    summary = (await client.get(f"{base}/settlement")).json()
    assert summary["total_estimated"] == 500.0
    assert summary["total_actual"] == 0.0
    assert summary["settlements"] == []

    for actual in actuals:
        resp = await client.put(
            f"{base}/{actual['actual_id']}", json={"paid_by_traveler_id": alice["id"]}
        )
        assert resp.status_code == 200
        assert resp.json()["paid_by_name"] == "Alice"

    summary = (await client.get(f"{base}/settlement")).json()
    assert summary["total_actual"] == 500.0
    assert summary["variance"] == 0.0
    balances = {t["traveler_name"]: t for t in summary["travelers"]}
    assert balances["Alice"]["balance"] == 250.0
    assert balances["Bob"]["balance"] == -250.0
    assert summary["settlements"] == [{
        "from_traveler_id": bob["id"],
        "from_name": "Bob",
        "to_traveler_id": alice["id"],
        "to_name": "Alice",
        "amount": 250.0,
    }]

    paid_by_alice = (await client.get(base, params={"paid_by": alice["id"]})).json()
    assert len(paid_by_alice) == 2
    bobs = (await client.get(base, params={"traveler_id": bob["id"]})).json()
    assert [a["traveler_name"] for a in bobs] == ["Bob"]

    resp = await client.post(f"{base}/reset")
    assert resp.json()["deleted_count"] == 2
    summary = (await client.get(f"{base}/settlement")).json()
    assert summary["settlements"] == []
    assert all(t["should_pay"] == 0 and t["actually_paid"] == 0 for t in summary["travelers"])


async def test_transfer_requires_a_forecast(client):
    trip, _, _ = await planned_trip(client)
    resp = await client.post(f"/api/trips/{trip['id']}/expense-actuals/transfer")
    assert resp.status_code == 409
    assert "Collect costs" in resp.json()["detail"]


async def test_transfer_only_once(client):
    trip, _, _ = await planned_trip(client)
    await collect(client, trip["id"])
    base = f"/api/trips/{trip['id']}/expense-actuals"

    assert (await client.post(f"{base}/transfer")).status_code == 200
    resp = await client.post(f"{base}/transfer")
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "conflict"


async def test_collect_blocked_while_actuals_exist(client):
    trip, _, _ = await planned_trip(client)
    await collect(client, trip["id"])
    await client.post(f"/api/trips/{trip['id']}/expense-actuals/transfer")

    assert (await collect(client, trip["id"])).status_code == 409

    await client.post(f"/api/trips/{trip['id']}/expense-actuals/reset")
    assert (await collect(client, trip["id"])).status_code == 200


async def test_editing_an_actual(client):
    trip, alice, bob = await planned_trip(client)
    other_trip = await create_trip(client, title="Elsewhere")
    stranger = await add_traveler(client, other_trip["id"], "Stranger")
    await collect(client, trip["id"])
    base = f"/api/trips/{trip['id']}/expense-actuals"
    await client.post(f"{base}/transfer")
    actual = (await client.get(base)).json()[0]
    url = f"{base}/{actual['actual_id']}"

    resp = await client.put(url, json={
        "actual_amount": 512.345,
        "actual_date": "2026-04-03",
        "payment_method_key": "card",
        "actual_notes": "Paid at the counter",
    })
    assert resp.status_code == 200
    edited = resp.json()
    assert edited["actual_amount"] == 512.35
    assert edited["actual_date"] == "2026-04-03"
    assert edited["payment_method_key"] == "card"
    assert (await client.get(url)).json() == edited

    assert (await client.put(url, json={"actual_amount": None})).status_code == 400
    assert (await client.put(url, json={"actual_amount": -1})).status_code == 422
    resp = await client.put(url, json={"paid_by_traveler_id": stranger["id"]})
    assert resp.status_code == 400

    missing = f"{base}/00000000-0000-0000-0000-000000000000"
    assert (await client.get(missing)).status_code == 404


async def test_transferred_actuals_match_forecast_shares(client):
    trip = await create_trip(client)
    for name in ("Alice", "Bob", "Cara"):
        await add_traveler(client, trip["id"], name, is_primary=name == "Alice")
    for n in range(30):
        await add_adhoc(client, trip["id"], f"Snack {n}", 10)

    report = (await collect(client, trip["id"])).json()
    base = f"/api/trips/{trip['id']}/expense-actuals"
    await client.post(f"{base}/transfer")

    totals = {}
    for actual in (await client.get(base)).json():
        name = actual["traveler_name"]
        totals[name] = round(totals.get(name, 0) + actual["actual_amount"], 2)
    shares = {s["traveler_name"]: s["share_amount"] for s in report["traveler_shares"]}
    assert shares == {"Alice": 100.0, "Bob": 100.0, "Cara": 100.0}
    assert totals == shares


async def test_traveler_in_forecast_cannot_be_deleted(client):
    trip, alice, bob = await planned_trip(client)
    await collect(client, trip["id"])
    base = f"/api/trips/{trip['id']}/expense-actuals"
    bob_url = f"/api/trips/{trip['id']}/travelers/{bob['id']}"

    resp = await client.delete(bob_url)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "conflict"

    await client.post(f"{base}/transfer")
    for actual in (await client.get(base)).json():
        await client.put(f"{base}/{actual['actual_id']}", json={"paid_by_traveler_id": alice["id"]})

    assert (await client.delete(bob_url)).status_code == 409
    assert len((await client.get(base)).json()) == 2
    summary = (await client.get(f"{base}/settlement")).json()
    assert [s["from_name"] for s in summary["settlements"]] == ["Bob"]

    await client.post(f"{base}/reset")
    await client.put(bob_url, json={"is_active": False})
    await collect(client, trip["id"])
    assert (await client.delete(bob_url)).status_code == 204


# ─── Failed writes ───

class CommitFailsSession(AsyncSession):
    """Flushes pending writes, then fails as if the connection dropped at commit."""

    async def commit(self):
        await self.flush()
        raise ConnectionError("connection lost during commit")


@pytest.fixture
async def failing_db(engine):
    factory = async_sessionmaker(engine, class_=CommitFailsSession, expire_on_commit=False)
    async with factory() as session:
        yield session


async def test_failed_transfer_leaves_no_actuals(client, failing_db):
    trip, _, _ = await planned_trip(client)
    await collect(client, trip["id"])
    base = f"/api/trips/{trip['id']}/expense-actuals"

    with pytest.raises(ConnectionError):
        await expense_actuals_service.transfer(failing_db, uuid.UUID(trip["id"]))

    assert (await client.get(base)).json() == []
    resp = await client.post(f"{base}/transfer")
    assert resp.json()["transferred_count"] == 2


async def test_failed_reset_keeps_actuals(client, failing_db):
    trip, _, _ = await planned_trip(client)
    await collect(client, trip["id"])
    base = f"/api/trips/{trip['id']}/expense-actuals"
    await client.post(f"{base}/transfer")

    with pytest.raises(ConnectionError):
        await expense_actuals_service.reset(failing_db, uuid.UUID(trip["id"]))

    assert len((await client.get(base)).json()) == 2


async def test_failed_collection_keeps_previous_snapshot(client, failing_db, rates):
    trip, _, _ = await planned_trip(client)
    first = (await collect(client, trip["id"])).json()
    await add_adhoc(client, trip["id"], "Rail pass", 500)

    with pytest.raises(ConnectionError):
        await cost_forecast_service.collect_costs(
            failing_db, uuid.UUID(trip["id"]), ["confirmed", "shortlisted"], rates
        )

    stored = (await client.get(f"/api/trips/{trip['id']}/cost-forecast")).json()
    assert stored == first
    assert stored["total_cost"] == 1000.0
    resp = await client.post(f"/api/trips/{trip['id']}/expense-actuals/transfer")
    assert resp.json()["transferred_count"] == 2


# ─── Reports ───

async def test_reports(client):
    trip, alice, _ = await planned_trip(client)
    await add_adhoc(client, trip["id"], "Museum <late>", 80, currency="EUR")
    await collect(client, trip["id"])
    await client.post(f"/api/trips/{trip['id']}/expense-actuals/transfer")

    pdf = await client.get(f"/api/reports/trips/{trip['id']}/cost-forecast.pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

    csv_resp = await client.get(f"/api/reports/trips/{trip['id']}/cost-forecast.csv")
    assert csv_resp.status_code == 200
    assert csv_resp.headers["content-type"].startswith("text/csv")
    lines = csv_resp.text.strip().splitlines()
    assert lines[0].startswith("module,description,status")
    assert len(lines) == 3

    settlement = await client.get(f"/api/reports/trips/{trip['id']}/settlement.pdf")
    assert settlement.status_code == 200
    assert settlement.content.startswith(b"%PDF")


async def test_report_before_collection(client):
    trip = await create_trip(client)
    resp = await client.get(f"/api/reports/trips/{trip['id']}/cost-forecast.csv")
    assert resp.status_code == 404
