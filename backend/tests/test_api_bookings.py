from datetime import date, timedelta

import pytest

from flightledger.core.security import create_access_token


def login(client, kind: str, identifier: str, password: str = "secret123") -> dict:
    r = client.post("/auth/login", json={"kind": kind, "identifier": identifier, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def register(client, email: str) -> dict:
    r = client.post(
        "/auth/register",
        json={
            "first_name": "Asha",
            "last_name": "Rao",
            "email": email,
            "password": "secret123",
            "phone": "+91 98765 43210",
            "date_of_birth": "1990-05-17",
        },
    )
    assert r.status_code == 201, r.text
    return login(client, "user", email)


@pytest.fixture()
def admin_headers(client, directory):
    directory.create_admin("root", "secret123")
    return login(client, "admin", "root")


@pytest.fixture()
def owner_headers(client, owner):
    return login(client, "owner", owner.company_code)


def test_health(client):
    r = client.get("/health/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_register_rejects_duplicate_email(client):
    register(client, "asha@example.com")
    r = client.post(
        "/auth/register",
        json={"first_name": "A", "last_name": "R", "email": "ASHA@example.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "duplicate_identifier"


def test_register_rejects_child(client):
    r = client.post(
        "/auth/register",
        json={
            "first_name": "Kid",
            "last_name": "Rao",
            "email": "kid@example.com",
            "password": "secret123",
            "date_of_birth": (date.today() - timedelta(days=5 * 365)).isoformat(),
        },
    )
    assert r.status_code == 422
    assert r.json()["field"] == "date_of_birth"


def test_login_wrong_password(client, user):
    r = client.post("/auth/login", json={"kind": "user", "identifier": user.email, "password": "nope123"})
    assert r.status_code == 401


def test_book_until_full_then_cancel(client, flight):
    alice = register(client, "alice@example.com")
    bob = register(client, "bob@example.com")

    r = client.post("/bookings/", json={"flight_id": flight.id}, headers=alice)
    assert r.status_code == 201, r.text
    first = r.json()
    assert first["booking_status"] == "Pending"
    assert first["pnr"].startswith("6E")

    r = client.post("/bookings/", json={"flight_id": flight.id, "confirm": True}, headers=bob)
    assert r.status_code == 201, r.text
    assert r.json()["booking_status"] == "Confirmed"

    assert client.get(f"/flights/{flight.id}").json()["available_seats"] == 0

    r = client.post("/bookings/", json={"flight_id": flight.id}, headers=alice)
    assert r.status_code == 409
    assert r.json()["error"] == "no_availability"

    # bob cannot see or cancel alice's booking
    assert client.post(f"/bookings/{first['id']}/cancel", headers=bob).status_code == 404
    assert client.get(f"/bookings/pnr/{first['pnr']}", headers=bob).status_code == 404

    r = client.post(f"/bookings/{first['id']}/cancel", headers=alice)
    assert r.status_code == 200
    assert r.json()["booking_status"] == "Cancelled"

    detail = client.get(f"/flights/{flight.id}").json()
    assert detail["available_seats"] == 1
    assert detail["is_available"] is True
    assert detail["occupancy_rate"] == 50.0

    mine = client.get("/bookings/my", headers=alice).json()
    assert [b["pnr"] for b in mine] == [first["pnr"]]
    r = client.get(f"/bookings/pnr/{first['pnr'].lower()}", headers=alice)
    assert r.status_code == 200
    assert r.json()["id"] == first["id"]


def test_booking_unknown_flight(client):
    alice = register(client, "alice@example.com")
    r = client.post("/bookings/", json={"flight_id": 999}, headers=alice)
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_bookings_require_user_token(client, flight, owner_headers):
    assert client.post("/bookings/", json={"flight_id": flight.id}).status_code == 401
    assert client.post("/bookings/", json={"flight_id": flight.id}, headers=owner_headers).status_code == 403
    bogus = {"Authorization": "Bearer not-a-token"}
    assert client.get("/bookings/my", headers=bogus).status_code == 401


def test_token_for_deleted_user_cannot_book(client, flight):
    headers = {"Authorization": f"Bearer {create_access_token(subject=12345, kind='user')}"}
    r = client.post("/bookings/", json={"flight_id": flight.id}, headers=headers)
    assert r.status_code == 404


def test_admin_status_and_payment(client, flight, admin_headers):
    alice = register(client, "alice@example.com")
    booking = client.post("/bookings/", json={"flight_id": flight.id}, headers=alice).json()

    r = client.put(f"/bookings/{booking['id']}/status", json={"status": "Confirmed"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["booking_status"] == "Confirmed"

    r = client.put(f"/bookings/{booking['id']}/payment", json={"status": "Completed"}, headers=admin_headers)
    assert r.json()["payment_status"] == "Completed"

    client.put(f"/bookings/{booking['id']}/status", json={"status": "Cancelled"}, headers=admin_headers)
    r = client.put(f"/bookings/{booking['id']}/status", json={"status": "Pending"}, headers=admin_headers)
    assert r.status_code == 409
    assert r.json()["error"] == "invalid_status_transition"

    assert len(client.get("/bookings/", headers=admin_headers).json()) == 1
    assert client.get("/bookings/", headers=alice).status_code == 403
    assert client.delete(f"/bookings/{booking['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/bookings/{booking['id']}", headers=admin_headers).status_code == 404
