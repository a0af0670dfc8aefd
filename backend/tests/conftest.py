from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flightledger.db.session import build_engine, get_db
from flightledger.main import app
from flightledger.models.base import Base
from flightledger.services.directory import Directory
from flightledger.services.ledger import BookingLedger
from flightledger.services.store import Store


@pytest.fixture()
def engine():
    # One shared in-memory database per test
    eng = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db):
    return Store(db)


@pytest.fixture()
def ledger(store):
    return BookingLedger(store)


@pytest.fixture()
def directory(store):
    return Directory(store)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def airports(directory):
    dep = directory.create_airport("DEL", "Indira Gandhi International", "New Delhi", "India")
    dst = directory.create_airport("BOM", "Chhatrapati Shivaji Maharaj International", "Mumbai", "India")
    return dep, dst


@pytest.fixture()
def owner(directory):
    return directory.register_owner("IndiGo", "6E", "secret123", contact_info="ops@indigo.example")


@pytest.fixture()
def user(directory):
    return directory.register_user("Asha", "Rao", "asha@example.com", "secret123", phone="+91 98765 43210")


def flight_data(dep, dst, **overrides):
    departure = datetime(2099, 1, 1, 10, 0)
    data = {
        "flight_code": "6E-201",
        "flight_name": "Morning Shuttle",
        "capacity": 2,
        "departure_airport_id": dep.id,
        "destination_airport_id": dst.id,
        "departure_time": departure,
        "arrival_time": departure + timedelta(hours=2),
        "price": Decimal("4999.00"),
    }
    data.update(overrides)
    return data


@pytest.fixture()
def flight(ledger, owner, airports):
    dep, dst = airports
    return ledger.create_flight(owner.id, flight_data(dep, dst))


@pytest.fixture()
def flight_payload(airports):
    dep, dst = airports
    return lambda **overrides: flight_data(dep, dst, **overrides)
