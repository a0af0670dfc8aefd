import pytest


def login(client, kind: str, identifier: str, password: str = "secret123") -> dict:
    r = client.post("/auth/login", json={"kind": kind, "identifier": identifier, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client, directory):
    directory.create_admin("root", "secret123")
    return login(client, "admin", "root")


@pytest.fixture()
def owner_headers(client, owner):
    return login(client, "owner", owner.company_code)


def flight_json(dep_id: int, dst_id: int, **overrides) -> dict:
    data = {
        "flight_code": "6e-301",
        "flight_name": "Evening Shuttle",
        "capacity": 3,
        "departure_airport_id": dep_id,
        "destination_airport_id": dst_id,
        "departure_time": "2099-02-01T18:00:00",
        "arrival_time": "2099-02-01T20:15:00",
        "price": 3500,
    }
    data.update(overrides)
    return data


def test_airport_admin_crud(client, admin_headers):
    r = client.post("/airports/", json={"code": "blr", "name": "Kempegowda", "city": "Bengaluru", "country": "India"}, headers=admin_headers)
    assert r.status_code == 201, r.text
    airport = r.json()
    assert airport["code"] == "BLR"

    r = client.post("/airports/", json={"code": "BLR", "name": "Dup", "city": "X", "country": "Y"}, headers=admin_headers)
    assert r.status_code == 409

    r = client.put(f"/airports/{airport['id']}", json={"name": "Kempegowda International"}, headers=admin_headers)
    assert r.json()["name"] == "Kempegowda International"

    assert [a["code"] for a in client.get("/airports/", params={"q": "benga"}).json()] == ["BLR"]
    assert client.delete(f"/airports/{airport['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/airports/{airport['id']}").status_code == 404


def test_airport_writes_need_admin(client, owner_headers):
    r = client.post("/airports/", json={"code": "BLR", "name": "K", "city": "B", "country": "I"}, headers=owner_headers)
    assert r.status_code == 403


def test_owner_publishes_and_manages_flight(client, airports, owner_headers):
    dep, dst = airports
    r = client.post("/flights/", json=flight_json(dep.id, dst.id), headers=owner_headers)
    assert r.status_code == 201, r.text
    flight = r.json()
    assert flight["flight_code"] == "6E-301"
    assert flight["company_code"] == "6E"
    assert flight["route"] == "DEL → BOM"
    assert flight["available_seats"] == 3

    r = client.post("/flights/", json=flight_json(dep.id, dst.id, flight_code="6E-301"), headers=owner_headers)
    assert r.status_code == 409

    r = client.post("/flights/", json=flight_json(dep.id, dep.id, flight_code="6E-302"), headers=owner_headers)
    assert r.status_code == 422

    r = client.put(f"/flights/{flight['id']}", json={"capacity": 10}, headers=owner_headers)
    assert r.status_code == 200
    assert r.json()["available_seats"] == 10

    mine = client.get("/owner/flights", headers=owner_headers).json()
    assert [f["id"] for f in mine] == [flight["id"]]
    assert client.get("/owner/profile", headers=owner_headers).json()["flight_count"] == 1

    assert client.delete(f"/flights/{flight['id']}", headers=owner_headers).status_code == 200
    assert client.get(f"/flights/{flight['id']}").status_code == 404


def test_flight_search(client, flight, airports):
    dep, dst = airports
    assert len(client.get("/flights/", params={"departure_airport_id": dep.id}).json()) == 1
    assert client.get("/flights/", params={"departure_airport_id": dst.id}).json() == []
    assert len(client.get("/flights/", params={"date": "2099-01-01"}).json()) == 1
    assert client.get("/flights/", params={"date": "2099-01-02"}).json() == []


def test_other_owner_cannot_touch_flight(client, directory, flight):
    directory.register_owner("Vistara", "UK", "secret123")
    rival = login(client, "owner", "UK")
    assert client.put(f"/flights/{flight.id}", json={"capacity": 9}, headers=rival).status_code == 404
    assert client.delete(f"/flights/{flight.id}", headers=rival).status_code == 404


def test_flight_with_active_booking_cannot_be_deleted(client, ledger, user, flight, owner_headers):
    ledger.create_booking(user.id, flight.id)
    r = client.delete(f"/flights/{flight.id}", headers=owner_headers)
    assert r.status_code == 409
    assert r.json()["error"] == "flight_in_use"


def test_owner_stats(client, ledger, user, flight, owner_headers):
    booking = ledger.create_booking(user.id, flight.id, status="Confirmed")
    ledger.update_payment_status(booking.id, "Completed")
    ledger.create_booking(user.id, flight.id)

    stats = client.get("/owner/stats", headers=owner_headers).json()
    assert stats["total_flights"] == 1
    assert stats["total_bookings"] == 2
    assert stats["bookings"] == {"Pending": 1, "Confirmed": 1, "Cancelled": 0}
    assert stats["total_revenue"] == 4999.0
    assert stats["flights"][0]["available_seats"] == 0


def test_admin_accounts_and_report(client, admin_headers, user, owner):
    users = client.get("/admin/users", headers=admin_headers).json()
    assert [u["email"] for u in users] == [user.email]

    r = client.post(
        "/admin/owners",
        json={"company_name": "Air India", "company_code": "ai", "password": ""},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["company_code"] == "AI"
    login(client, "owner", "AI", created["generated_password"])

    owners = client.get("/admin/owners", headers=admin_headers).json()
    assert sorted(o["company_code"] for o in owners) == ["6E", "AI"]

    assert client.delete(f"/admin/owners/{created['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/admin/users/{user.id}", headers=admin_headers).status_code == 200

    report = client.get("/admin/reports", headers=admin_headers).json()
    assert report["users"] == 0
    assert report["flight_owners"] == 1
    assert report["admins"] == 1


def test_admin_routes_need_admin(client, owner_headers):
    assert client.get("/admin/users", headers=owner_headers).status_code == 403
