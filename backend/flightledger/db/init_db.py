import logging

from flightledger.core.config import settings
from flightledger.db.session import SessionLocal, engine
from flightledger.models import admin, airport, booking, flight, flight_owner, user  # noqa: F401
from flightledger.models.base import Base
from flightledger.services.directory import Directory
from flightledger.services.store import Store

logger = logging.getLogger(__name__)

DEMO_AIRPORTS = [
    ("DEL", "Indira Gandhi International", "New Delhi", "India"),
    ("BOM", "Chhatrapati Shivaji Maharaj International", "Mumbai", "India"),
    ("BLR", "Kempegowda International", "Bengaluru", "India"),
    ("DXB", "Dubai International", "Dubai", "United Arab Emirates"),
]

def create_tables():
    Base.metadata.create_all(bind=engine)

def seed_demo_data():
    """Idempotent: admin account, a few airports and a demo airline."""
    db = SessionLocal()
    try:
        store = Store(db)
        directory = Directory(store)

        username = settings.seed_admin_username or "admin"
        if store.get_admin_by_username(username) is None:
            directory.create_admin(username, settings.seed_admin_password or "Admin1234")
            logger.info("seeded admin %s", username)

        for code, name, city, country in DEMO_AIRPORTS:
            if store.get_airport_by_code(code) is None:
                directory.create_airport(code, name, city, country)

        if store.get_owner_by_code("DA") is None:
            directory.register_owner("DemoAir", "DA", "DemoAir123", contact_info="ops@demoair.example")
            logger.info("seeded demo flight owner DA")
    finally:
        db.close()
