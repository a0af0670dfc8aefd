"""Persistence store: the only place that talks to SQLAlchemy.

Driver and query faults are re-raised as ``StorageError`` after rolling the
session back, so callers never get an ambiguous ``None``/``False`` for a
failed query. ``None`` from a getter always means "no such row".
"""
from contextlib import contextmanager
from datetime import date, datetime, time
import enum
import logging

from sqlalchemy import func, insert, literal, select, update, delete, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from flightledger.models.admin import Admin
from flightledger.models.airport import Airport
from flightledger.models.booking import Booking, BookingStatus, PaymentStatus, ACTIVE_BOOKING_STATUSES
from flightledger.models.flight import Flight
from flightledger.models.flight_owner import FlightOwner
from flightledger.models.user import User
from flightledger.services.errors import DuplicateIdentifierError, StorageError

logger = logging.getLogger(__name__)

_ACTIVE_VALUES = [s.value for s in ACTIVE_BOOKING_STATUSES]


class CodeKind(str, enum.Enum):
    AIRPORT = "airport_code"
    COMPANY = "company_code"
    FLIGHT = "flight_code"
    PNR = "pnr"
    EMAIL = "email"
    USERNAME = "username"


# kind -> (model, code column); flight codes are additionally scoped by company
_CODE_COLUMNS = {
    CodeKind.AIRPORT: (Airport, Airport.code),
    CodeKind.COMPANY: (FlightOwner, FlightOwner.company_code),
    CodeKind.FLIGHT: (Flight, Flight.flight_code),
    CodeKind.PNR: (Booking, Booking.pnr),
    CodeKind.EMAIL: (User, User.email),
    CodeKind.USERNAME: (Admin, Admin.username),
}


class Store:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("storage failure during %s: %s", action, exc)
            raise StorageError(f"Storage failure during {action}") from exc

    # -- transaction control -------------------------------------------------

    def commit(self, conflict: tuple[str, str] | None = None) -> None:
        """Commit; a unique-constraint violation becomes DuplicateIdentifierError when
        ``conflict`` names the (family, value) being written."""
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if conflict is not None:
                raise DuplicateIdentifierError(*conflict) from exc
            raise StorageError("Integrity constraint violated") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Storage failure during commit") from exc

    def rollback(self) -> None:
        self.db.rollback()

    def add(self, obj):
        with self._guard("insert"):
            self.db.add(obj)
            self.db.flush()
        return obj

    def delete(self, obj) -> None:
        with self._guard("delete"):
            self.db.delete(obj)
            self.db.flush()

    def refresh(self, obj):
        with self._guard("refresh"):
            self.db.refresh(obj)
        return obj

    def count(self, model) -> int:
        with self._guard(f"count {model.__tablename__}"):
            return self.db.scalar(select(func.count()).select_from(model)) or 0

    # -- uniqueness ----------------------------------------------------------

    def exists_by_code(self, kind: CodeKind, code: str, exclude_id: int | None = None, owner_id: int | None = None) -> bool:
        model, column = _CODE_COLUMNS[CodeKind(kind)]
        stmt = select(func.count()).select_from(model).where(column == code)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        if kind == CodeKind.FLIGHT and owner_id is not None:
            stmt = stmt.where(Flight.company_id == owner_id)
        with self._guard(f"{CodeKind(kind).value} lookup"):
            return (self.db.scalar(stmt) or 0) > 0

    # -- flights -------------------------------------------------------------

    def get_flight(self, flight_id: int) -> Flight | None:
        with self._guard("flight lookup"):
            return self.db.get(Flight, flight_id)

    def lock_flight(self, flight_id: int) -> Flight | None:
        """Load the flight with a row lock held until commit/rollback (no-op on SQLite)."""
        stmt = select(Flight).where(Flight.id == flight_id).with_for_update()
        with self._guard("flight lock"):
            return self.db.scalars(stmt).first()

    def get_flights_by_owner(self, owner_id: int) -> list[Flight]:
        stmt = select(Flight).where(Flight.company_id == owner_id).order_by(Flight.departure_time)
        with self._guard("owner flights lookup"):
            return list(self.db.scalars(stmt))

    def count_flights_by_owner(self, owner_id: int) -> int:
        stmt = select(func.count(Flight.id)).where(Flight.company_id == owner_id)
        with self._guard("owner flight count"):
            return self.db.scalar(stmt) or 0

    def search_flights(self, departure_airport_id: int | None = None, destination_airport_id: int | None = None, day: date | None = None) -> list[Flight]:
        stmt = select(Flight)
        if departure_airport_id is not None:
            stmt = stmt.where(Flight.departure_airport_id == departure_airport_id)
        if destination_airport_id is not None:
            stmt = stmt.where(Flight.destination_airport_id == destination_airport_id)
        if day is not None:
            start = datetime.combine(day, time.min)
            end = datetime.combine(day, time.max)
            stmt = stmt.where(Flight.departure_time >= start, Flight.departure_time <= end)
        with self._guard("flight search"):
            return list(self.db.scalars(stmt.order_by(Flight.departure_time)))

    def detach_bookings(self, flight_id: int) -> int:
        stmt = update(Booking).where(Booking.flight_id == flight_id).values(flight_id=None)
        with self._guard("booking detach"):
            return self.db.execute(stmt).rowcount

    # -- bookings ------------------------------------------------------------

    def count_active_bookings(self, flight_id: int) -> int:
        stmt = select(func.count(Booking.id)).where(
            Booking.flight_id == flight_id, Booking.booking_status.in_(_ACTIVE_VALUES)
        )
        with self._guard("active booking count"):
            return self.db.scalar(stmt) or 0

    def count_active_bookings_by_flight(self, flight_ids: list[int]) -> dict[int, int]:
        if not flight_ids:
            return {}
        stmt = (
            select(Booking.flight_id, func.count(Booking.id))
            .where(Booking.flight_id.in_(flight_ids), Booking.booking_status.in_(_ACTIVE_VALUES))
            .group_by(Booking.flight_id)
        )
        with self._guard("active booking count"):
            counts = {fid: n for fid, n in self.db.execute(stmt)}
        return {fid: counts.get(fid, 0) for fid in flight_ids}

    def _active_count_subquery(self, flight_id):
        return (
            select(func.count(Booking.id))
            .where(Booking.flight_id == flight_id, Booking.booking_status.in_(_ACTIVE_VALUES))
            .correlate(None)
            .scalar_subquery()
        )

    def _capacity_subquery(self, flight_id):
        return select(Flight.capacity).where(Flight.id == flight_id).correlate(None).scalar_subquery()

    def insert_booking(self, booking: Booking, seat_check: bool = False) -> Booking | None:
        """Insert ``booking``; with ``seat_check``, only while its flight has a free seat.

        The checked form is a single INSERT ... SELECT whose WHERE compares the
        active bookings against the flight's stored capacity, so the count and
        the write cannot interleave with another writer. Returns None, writing
        nothing, when the flight is full.
        """
        if not seat_check:
            return self.add(booking)
        table = Booking.__table__
        values = {c.key: getattr(booking, c.key) for c in table.columns if c.key != "id"}
        columns = list(values)
        row = select(*[literal(values[c], type_=table.c[c].type).label(c) for c in columns]).where(
            self._active_count_subquery(values["flight_id"]) < self._capacity_subquery(values["flight_id"])
        )
        stmt = insert(table).from_select(columns, row, include_defaults=False)
        with self._guard("booking insert"):
            try:
                inserted = self.db.execute(stmt).rowcount
            except IntegrityError as exc:
                self.db.rollback()
                raise DuplicateIdentifierError("PNR", booking.pnr) from exc
        if not inserted:
            return None
        return self.get_booking_by_pnr(booking.pnr)

    def set_capacity_if_fits(self, flight_id: int, capacity: int) -> bool:
        """Change the capacity only while the active bookings still fit in it."""
        stmt = (
            update(Flight.__table__)
            .where(Flight.id == flight_id, self._active_count_subquery(flight_id) <= capacity)
            .values(capacity=capacity)
        )
        with self._guard("flight capacity update"):
            return self.db.execute(stmt).rowcount > 0

    def get_booking(self, booking_id: int) -> Booking | None:
        with self._guard("booking lookup"):
            return self.db.get(Booking, booking_id)

    def get_booking_by_pnr(self, pnr: str) -> Booking | None:
        with self._guard("booking lookup"):
            return self.db.scalars(select(Booking).where(Booking.pnr == pnr)).first()

    def list_bookings(self, user_id: int | None = None, flight_ids: list[int] | None = None) -> list[Booking]:
        stmt = select(Booking)
        if user_id is not None:
            stmt = stmt.where(Booking.user_id == user_id)
        if flight_ids is not None:
            stmt = stmt.where(Booking.flight_id.in_(flight_ids))
        with self._guard("booking listing"):
            return list(self.db.scalars(stmt.order_by(Booking.booked_at.desc(), Booking.id.desc())))

    def update_booking_status(self, booking_id: int, status: BookingStatus) -> bool:
        stmt = update(Booking).where(Booking.id == booking_id).values(booking_status=BookingStatus(status).value)
        with self._guard("booking status update"):
            return self.db.execute(stmt).rowcount > 0

    def update_payment_status(self, booking_id: int, status: PaymentStatus) -> bool:
        stmt = update(Booking).where(Booking.id == booking_id).values(payment_status=PaymentStatus(status).value)
        with self._guard("payment status update"):
            return self.db.execute(stmt).rowcount > 0

    def delete_booking(self, booking_id: int) -> bool:
        with self._guard("booking delete"):
            return self.db.execute(delete(Booking).where(Booking.id == booking_id)).rowcount > 0

    # -- airports ------------------------------------------------------------

    def get_airport(self, airport_id: int) -> Airport | None:
        with self._guard("airport lookup"):
            return self.db.get(Airport, airport_id)

    def get_airport_by_code(self, code: str) -> Airport | None:
        with self._guard("airport lookup"):
            return self.db.scalars(select(Airport).where(Airport.code == code)).first()

    def search_airports(self, term: str | None = None) -> list[Airport]:
        stmt = select(Airport)
        if term and term.strip():
            pattern = f"%{term.strip().lower()}%"
            stmt = stmt.where(or_(
                func.lower(Airport.code).like(pattern),
                func.lower(Airport.name).like(pattern),
                func.lower(Airport.city).like(pattern),
                func.lower(Airport.country).like(pattern),
            ))
        with self._guard("airport search"):
            return list(self.db.scalars(stmt.order_by(Airport.code)))

    def airport_in_use(self, airport_id: int) -> bool:
        stmt = select(func.count(Flight.id)).where(
            or_(Flight.departure_airport_id == airport_id, Flight.destination_airport_id == airport_id)
        )
        with self._guard("airport usage lookup"):
            return (self.db.scalar(stmt) or 0) > 0

    # -- accounts ------------------------------------------------------------

    def get_owner(self, owner_id: int) -> FlightOwner | None:
        with self._guard("owner lookup"):
            return self.db.get(FlightOwner, owner_id)

    def get_owner_by_code(self, code: str) -> FlightOwner | None:
        with self._guard("owner lookup"):
            return self.db.scalars(select(FlightOwner).where(FlightOwner.company_code == code)).first()

    def list_owners(self) -> list[FlightOwner]:
        with self._guard("owner listing"):
            return list(self.db.scalars(select(FlightOwner).order_by(FlightOwner.company_name)))

    def get_user(self, user_id: int) -> User | None:
        with self._guard("user lookup"):
            return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._guard("user lookup"):
            return self.db.scalars(select(User).where(User.email == email)).first()

    def list_users(self) -> list[User]:
        with self._guard("user listing"):
            return list(self.db.scalars(select(User).order_by(User.created_at.desc(), User.id.desc())))

    def get_admin_by_username(self, username: str) -> Admin | None:
        with self._guard("admin lookup"):
            return self.db.scalars(select(Admin).where(Admin.username == username)).first()
