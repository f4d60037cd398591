"""CRUD tests for trips, travelers and the cost-bearing planning modules."""

from conftest import add_adhoc, add_flight, add_traveler, create_trip, leg


# ─── Trips and travelers ───

async def test_trip_lifecycle(client):
    trip = await create_trip(client, currency="eur", start_date="2026-04-01", end_date="2026-04-10")
    assert trip["title"] == "Tokyo spring"

    listed = (await client.get("/api/trips")).json()
    assert [t["id"] for t in listed] == [trip["id"]]

    resp = await client.put(f"/api/trips/{trip['id']}", json={"title": "Tokyo autumn", "currency": "jpy"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Tokyo autumn"
    assert resp.json()["currency"] == "JPY"

    resp = await client.put(f"/api/trips/{trip['id']}", json={"end_date": "2026-03-01"})
    assert resp.status_code == 400

    assert (await client.delete(f"/api/trips/{trip['id']}")).status_code == 204
    assert (await client.get(f"/api/trips/{trip['id']}")).status_code == 404


async def test_only_one_primary_traveler(client):
    trip = await create_trip(client)
    alice = await add_traveler(client, trip["id"], "Alice", is_primary=True, currency="aud")
    bob = await add_traveler(client, trip["id"], "Bob", is_primary=True)
    assert alice["currency"] == "AUD"

    travelers = (await client.get(f"/api/trips/{trip['id']}/travelers")).json()
    assert [(t["name"], t["is_primary"]) for t in travelers] == [("Bob", True), ("Alice", False)]

    resp = await client.put(
        f"/api/trips/{trip['id']}/travelers/{alice['id']}",
        json={"is_primary": True, "is_cost_sharer": False, "relation": "friend"},
    )
    assert resp.status_code == 200
    assert resp.json()["is_cost_sharer"] is False
    assert resp.json()["relation"] == "friend"

    travelers = {t["name"]: t for t in (await client.get(f"/api/trips/{trip['id']}/travelers")).json()}
    assert travelers["Alice"]["is_primary"] is True
    assert travelers["Bob"]["is_primary"] is False

    assert (await client.delete(f"/api/trips/{trip['id']}/travelers/{bob['id']}")).status_code == 204
    assert len((await client.get(f"/api/trips/{trip['id']}/travelers")).json()) == 1


async def test_deleting_a_trip_removes_its_plans(client):
    trip = await create_trip(client)
    alice = await add_traveler(client, trip["id"], "Alice")
    await add_flight(client, trip["id"], traveler_ids=[alice["id"]])
    await add_adhoc(client, trip["id"], "Taxi", 20)

    assert (await client.delete(f"/api/trips/{trip['id']}")).status_code == 204
    assert (await client.get(f"/api/trips/{trip['id']}/flights")).status_code == 404


# ─── Flights ───

async def test_round_trip_flight(client):
    trip = await create_trip(client)
    alice = await add_traveler(client, trip["id"], "Alice")
    flight = await add_flight(
        client, trip["id"],
        flight_type="round_trip",
        unit_fare=420.5,
        return_fare=380,
        currency_code="usd",
        legs=[leg(1, "sfo", "hnd")],
        return_legs=[leg(1, "HND", "SFO", day="2026-04-10")],
        traveler_ids=[alice["id"]],
    )

    assert flight["currency_code"] == "USD"
    assert [l["departure_airport"] for l in flight["outbound_legs"]] == ["SFO"]
    assert [l["direction"] for l in flight["return_legs"]] == ["return"]
    assert [t["name"] for t in flight["travelers"]] == ["Alice"]


async def test_flight_shape_validation(client):
    trip = await create_trip(client)
    url = f"/api/trips/{trip['id']}/flights"
    base = {"unit_fare": 100, "currency_code": "USD", "legs": [leg(1, "SFO", "LAX")]}

    resp = await client.post(url, json={**base, "flight_type": "round_trip"})
    assert resp.status_code == 422
    resp = await client.post(url, json={**base, "return_fare": 50})
    assert resp.status_code == 422
    resp = await client.post(url, json={**base, "legs": []})
    assert resp.status_code == 422

    bad_leg = {**leg(1, "SFO", "LAX", day="2026-04-02"), "arrival_date": "2026-04-01"}
    resp = await client.post(url, json={**base, "legs": [bad_leg]})
    assert resp.status_code == 400


async def test_flight_rejects_foreign_traveler(client):
    trip = await create_trip(client)
    other = await create_trip(client, title="Other")
    stranger = await add_traveler(client, other["id"], "Stranger")

    resp = await client.post(
        f"/api/trips/{trip['id']}/flights",
        json={"unit_fare": 1, "currency_code": "USD", "legs": [leg(1, "SFO", "LAX")], "traveler_ids": [stranger["id"]]},
    )
    assert resp.status_code == 400


async def test_update_duplicate_and_delete_flight(client):
    trip = await create_trip(client)
    alice = await add_traveler(client, trip["id"], "Alice")
    flight = await add_flight(client, trip["id"], traveler_ids=[alice["id"]])
    url = f"/api/trips/{trip['id']}/flights/{flight['id']}"

    resp = await client.put(url, json={
        "unit_fare": 610,
        "status": "shortlisted",
        "legs": [leg(1, "SFO", "ICN"), leg(2, "ICN", "NRT")],
    })
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["unit_fare"] == 610.0
    assert updated["status"] == "shortlisted"
    assert [l["arrival_airport"] for l in updated["outbound_legs"]] == ["ICN", "NRT"]

    resp = await client.put(url, json={"return_fare": 10})
    assert resp.status_code == 400

    resp = await client.post(f"{url}/duplicate")
    assert resp.status_code == 201
    copy = resp.json()
    assert copy["id"] != flight["id"]
    assert copy["status"] == "draft"
    assert copy["unit_fare"] == 610.0
    assert len(copy["outbound_legs"]) == 2
    assert [t["id"] for t in copy["travelers"]] == [alice["id"]]

    drafts = (await client.get(f"/api/trips/{trip['id']}/flights", params={"status": "draft"})).json()
    assert [f["id"] for f in drafts] == [copy["id"]]

    assert (await client.delete(url)).status_code == 204
    assert (await client.get(url)).status_code == 404


# ─── Accommodations ───

async def test_accommodation_total_is_derived(client):
    trip = await create_trip(client)
    url = f"/api/trips/{trip['id']}/accommodations"
    resp = await client.post(url, json={
        "name": "Hotel Gracery",
        "check_in_date": "2026-04-01",
        "check_out_date": "2026-04-04",
        "num_rooms": 2,
        "price_per_night": 100,
        "currency_code": "jpy",
        "status": "confirmed",
    })
    assert resp.status_code == 201, resp.text
    stay = resp.json()
    assert stay["nights"] == 3
    assert stay["total_price"] == 600.0
    assert stay["currency_code"] == "JPY"

    resp = await client.put(f"{url}/{stay['id']}", json={"num_rooms": 1})
    assert resp.json()["total_price"] == 300.0

    resp = await client.put(f"{url}/{stay['id']}", json={"total_price": 250})
    assert resp.json()["total_price"] == 250.0

    resp = await client.put(f"{url}/{stay['id']}", json={"check_out_date": "2026-03-30"})
    assert resp.status_code == 400

    assert (await client.delete(f"{url}/{stay['id']}")).status_code == 204
    assert (await client.get(url)).json() == []


# ─── Itinerary ───

async def test_itinerary_days_categories_and_activities(client):
    trip = await create_trip(client)
    days_url = f"/api/trips/{trip['id']}/itinerary"

    day = (await client.post(days_url, json={"day_number": 1, "day_date": "2026-04-02"})).json()
    assert (await client.post(days_url, json={"day_number": 1, "day_date": "2026-04-02"})).status_code == 409

    cats_url = f"{days_url}/{day['id']}/categories"
    food = (await client.post(cats_url, json={"name": "Food", "cost": 40, "currency_code": "usd"})).json()
    tours = (await client.post(cats_url, json={"name": "Tours"})).json()
    assert (food["display_order"], tours["display_order"]) == (0, 1)
    assert food["currency_code"] == "USD"

    resp = await client.put(f"{cats_url}/reorder", json={"ordered_ids": [tours["id"], food["id"]]})
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()] == ["Tours", "Food"]
    resp = await client.put(f"{cats_url}/reorder", json={"ordered_ids": [tours["id"]]})
    assert resp.status_code == 400

    acts_url = f"{cats_url}/{tours['id']}/activities"
    walk = (await client.post(acts_url, json={
        "name": "Temple walk", "cost": 15, "currency_code": "JPY", "cost_type": "per_head", "headcount": 2,
    })).json()
    assert walk["is_completed"] is False

    toggled = (await client.post(f"{acts_url}/{walk['id']}/toggle")).json()
    assert toggled["is_completed"] is True

    resp = await client.put(f"{acts_url}/{walk['id']}", json={"cost": 18, "notes": "Bring cash"})
    assert resp.json()["cost"] == 18.0
    assert resp.json()["notes"] == "Bring cash"
    resp = await client.put(f"{acts_url}/{walk['id']}", json={"name": None})
    assert resp.status_code == 400

    resp = await client.put(f"{cats_url}/{food['id']}", json={"is_active": False})
    assert resp.json()["is_active"] is False

    days = (await client.get(days_url)).json()
    assert [c["name"] for c in days[0]["categories"]] == ["Tours", "Food"]
    assert [a["name"] for a in days[0]["categories"][0]["activities"]] == ["Temple walk"]

    assert (await client.delete(f"{acts_url}/{walk['id']}")).status_code == 204
    assert (await client.delete(f"{cats_url}/{food['id']}")).status_code == 204
    assert (await client.delete(f"{days_url}/{day['id']}")).status_code == 204
    assert (await client.get(days_url)).json() == []


# ─── Ad-hoc expenses ───

async def test_adhoc_expenses(client):
    trip = await create_trip(client)
    url = f"/api/trips/{trip['id']}/adhoc-expenses"
    taxi = await add_adhoc(client, trip["id"], "Taxi", 32.5, currency="jpy")
    tip = await add_adhoc(client, trip["id"], "Tip", 5)
    assert taxi["currency_code"] == "JPY"

    resp = await client.put(f"{url}/{tip['id']}", json={"is_active": False})
    assert resp.json()["is_active"] is False
    resp = await client.put(f"{url}/{tip['id']}", json={"currency_code": None})
    assert resp.status_code == 400

    assert len((await client.get(url)).json()) == 2
    active = (await client.get(url, params={"include_inactive": False})).json()
    assert [e["name"] for e in active] == ["Taxi"]

    assert (await client.delete(f"{url}/{taxi['id']}")).status_code == 204
    assert (await client.get(f"{url}/{taxi['id']}")).status_code == 404


# ─── Packing lists ───

async def test_packing_categories_and_items(client):
    trip = await create_trip(client)
    url = f"/api/trips/{trip['id']}/packing"

    clothes = (await client.post(url, json={"name": "Clothes"})).json()
    docs = (await client.post(url, json={"name": "Documents"})).json()
    assert (clothes["display_order"], docs["display_order"]) == (0, 1)
    assert clothes["items"] == []

    items_url = f"{url}/categories/{docs['id']}/items"
    passport = (await client.post(items_url, json={"name": "Passport", "priority": "critical"})).json()
    visa = (await client.post(items_url, json={"name": "Visa copy"})).json()
    assert passport["priority"] == "critical"
    assert visa["priority"] == "normal"
    assert (passport["is_packed"], visa["display_order"]) == (False, 1)
    assert (await client.post(items_url, json={"name": "Bad", "priority": "urgent"})).status_code == 422

    toggled = (await client.post(f"{url}/items/{passport['id']}/toggle")).json()
    assert toggled["is_packed"] is True

    resp = await client.put(f"{url}/items/{visa['id']}", json={"name": "Visa printout", "priority": "important"})
    assert resp.json()["name"] == "Visa printout"
    assert resp.json()["priority"] == "important"
    assert (await client.put(f"{url}/items/{visa['id']}", json={"is_packed": None})).status_code == 400

    resp = await client.put(f"{items_url}/reorder", json={"ordered_ids": [visa["id"], passport["id"]]})
    assert [i["name"] for i in resp.json()] == ["Visa printout", "Passport"]
    resp = await client.put(f"{url}/categories/reorder", json={"ordered_ids": [docs["id"], clothes["id"]]})
    assert [c["name"] for c in resp.json()] == ["Documents", "Clothes"]
    resp = await client.put(f"{url}/categories/reorder", json={"ordered_ids": [docs["id"]]})
    assert resp.status_code == 400

    packing = (await client.get(url)).json()
    assert [c["name"] for c in packing["categories"]] == ["Documents", "Clothes"]
    assert [i["name"] for i in packing["categories"][0]["items"]] == ["Visa printout", "Passport"]
    assert packing["stats"] == {"total_items": 2, "packed_items": 1, "percentage": 50}

    resp = await client.put(f"{url}/categories/{clothes['id']}", json={"name": "Clothing"})
    assert resp.json()["name"] == "Clothing"

    other = await create_trip(client, title="Elsewhere")
    assert (await client.get(f"/api/trips/{other['id']}/packing/items/{visa['id']}")).status_code == 404

    assert (await client.delete(f"{url}/items/{visa['id']}")).status_code == 204
    assert (await client.delete(f"{url}/categories/{docs['id']}")).status_code == 204
    assert (await client.get(f"{url}/items/{passport['id']}")).status_code == 404
    packing = (await client.get(url)).json()
    assert [c["name"] for c in packing["categories"]] == ["Clothing"]
    assert packing["stats"]["percentage"] == 0


# ─── Reference data ───

async def test_reference_endpoints(client):
    assert (await client.get("/api/health")).json()["status"] == "ok"

    statuses = (await client.get("/api/statuses")).json()
    assert [s["value"] for s in statuses] == ["draft", "shortlisted", "confirmed", "not_selected"]

    currencies = {c["code"]: c for c in (await client.get("/api/currencies")).json()}
    assert currencies["EUR"]["symbol"] == "€"
    assert currencies["USD"]["name"] == "US Dollar"


async def test_exchange_rates_endpoint(client):
    resp = await client.get("/api/exchange-rates", params={"base": "usd", "symbols": "eur, jpy"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["base"] == "USD"
    assert data["rates"]["EUR"] == 0.8
    assert data["rates"]["JPY"] == 150.0

    assert (await client.get("/api/exchange-rates", params={"base": "USD"})).status_code == 400
