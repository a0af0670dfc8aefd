"""Booking ledger: seat accounting, booking status and flight lifecycle rules.

Available seats are never stored. They are recounted from the active
bookings (Pending or Confirmed) on every read, and a booking is inserted in
the same transaction that counted them while the flight row is locked, so
two concurrent bookings cannot both take the last seat.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable
import logging

from flightledger.core.config import settings
from flightledger.models.booking import Booking, BookingStatus, PaymentStatus
from flightledger.models.flight import Flight
from flightledger.services import validation
from flightledger.services.errors import (
    AvailabilityError,
    DuplicateIdentifierError,
    FlightInUseError,
    InvalidStatusTransitionError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from flightledger.services.identifiers import format_pnr, generate_pnr_with_airline
from flightledger.services.store import CodeKind, Store
from flightledger.services.uniqueness import ensure_unique_flight_code

logger = logging.getLogger(__name__)

FLIGHT_FIELDS = (
    "flight_code",
    "flight_name",
    "capacity",
    "departure_airport_id",
    "destination_airport_id",
    "departure_time",
    "arrival_time",
    "price",
)


def _booking_status(value) -> BookingStatus:
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus.from_string(str(value))
    except ValueError:
        raise ValidationError("booking_status", f"Unknown booking status: {value}")


def _payment_status(value) -> PaymentStatus:
    if isinstance(value, PaymentStatus):
        return value
    try:
        return PaymentStatus.from_string(str(value))
    except ValueError:
        raise ValidationError("payment_status", f"Unknown payment status: {value}")


class BookingLedger:
    def __init__(self, store: Store, pnr_factory: Callable[[str | None], str] | None = None, max_pnr_attempts: int | None = None):
        self.store = store
        # Called with the operating company's code
        self.pnr_factory = pnr_factory or generate_pnr_with_airline
        self.max_pnr_attempts = max_pnr_attempts or settings.pnr_max_attempts

    # -- availability ------------------------------------------------------

    def available_seats(self, flight_id: int) -> int:
        flight = self.store.get_flight(flight_id)
        if flight is None:
            raise NotFoundError("Flight", flight_id)
        return max(0, flight.capacity - self.store.count_active_bookings(flight.id))

    def seat_summary(self, flights: Iterable[Flight]) -> dict[int, dict[str, Any]]:
        """capacity / booked / available / occupancy_rate per flight id, in one query."""
        flights = list(flights)
        booked = self.store.count_active_bookings_by_flight([f.id for f in flights])
        summary = {}
        for f in flights:
            taken = booked.get(f.id, 0)
            available = max(0, f.capacity - taken)
            summary[f.id] = {
                "capacity": f.capacity,
                "booked": taken,
                "available_seats": available,
                "is_available": available > 0,
                "occupancy_rate": round((f.capacity - available) * 100.0 / f.capacity, 2) if f.capacity else 0.0,
            }
        return summary

    # -- bookings ------------------------------------------------------------

    def create_booking(self, user_id: int, flight_id: int, amount=None, status=BookingStatus.PENDING) -> Booking:
        status = _booking_status(status)
        if not status.is_active:
            raise ValidationError("booking_status", "A new booking must be Pending or Confirmed")
        if amount is not None:
            validation.require(validation.is_valid_price(amount), "amount", validation.MESSAGES["price"])
        try:
            if self.store.get_user(user_id) is None:
                raise NotFoundError("User", user_id)
            flight = self.store.lock_flight(flight_id)
            if flight is None:
                raise NotFoundError("Flight", flight_id)
            available = flight.capacity - self.store.count_active_bookings(flight.id)
            if available <= 0:
                self._reject_full(flight)
            owner = self.store.get_owner(flight.company_id)
            pnr = self._draw_pnr(owner.company_code if owner else None)
            draft = Booking(
                pnr=pnr,
                user_id=user_id,
                flight_id=flight.id,
                departure_airport_id=flight.departure_airport_id,
                destination_airport_id=flight.destination_airport_id,
                departure_time=flight.departure_time,
                arrival_time=flight.arrival_time,
                date_of_departure=flight.departure_time.date(),
                date_of_arrival=flight.arrival_time.date(),
                amount=Decimal(str(amount)) if amount is not None else flight.price,
                payment_status=PaymentStatus.PENDING.value,
                booking_status=status.value,
                booked_at=datetime.utcnow(),
            )
            # The count above is advisory; the insert recounts atomically
            booking = self.store.insert_booking(draft, seat_check=True)
            if booking is None:
                self._reject_full(flight)
            self.store.commit(conflict=("PNR", pnr))
        except LedgerError:
            self.store.rollback()
            raise
        self.store.refresh(booking)
        logger.info("booking %s created: pnr=%s flight=%s user=%s",
                    booking.id, booking.pnr, flight_id, user_id)
        return booking

    def _reject_full(self, flight: Flight):
        logger.info("booking rejected: flight %s (%s) is full", flight.id, flight.flight_code)
        raise AvailabilityError(f"Flight {flight.flight_code} is fully booked")

    def _draw_pnr(self, airline_code: str | None) -> str:
        candidate = None
        for _ in range(self.max_pnr_attempts):
            candidate = format_pnr(self.pnr_factory(airline_code))
            if not self.store.exists_by_code(CodeKind.PNR, candidate):
                return candidate
            logger.debug("PNR collision on %s, drawing again", candidate)
        raise DuplicateIdentifierError("PNR", candidate or "")

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    def update_booking_status(self, booking_id: int, new_status) -> Booking:
        """Pending->Confirmed, Pending->Cancelled and Confirmed->Cancelled apply.

        Assigning the current status, or Pending to a Confirmed booking, is a
        no-op. Cancelled is terminal.
        """
        new_status = _booking_status(new_status)
        booking = self.get_booking(booking_id)
        current = booking.status
        if new_status == current or (current == BookingStatus.CONFIRMED and new_status == BookingStatus.PENDING):
            return booking
        if current == BookingStatus.CANCELLED:
            raise InvalidStatusTransitionError(f"Booking {booking.pnr} is cancelled and cannot become {new_status.value}")
        self.store.update_booking_status(booking.id, new_status)
        self.store.commit()
        self.store.refresh(booking)
        logger.info("booking %s status %s -> %s", booking.id, current.value, new_status.value)
        return booking

    def update_payment_status(self, booking_id: int, new_status) -> Booking:
        new_status = _payment_status(new_status)
        booking = self.get_booking(booking_id)
        self.store.update_payment_status(booking.id, new_status)
        self.store.commit()
        self.store.refresh(booking)
        logger.info("booking %s payment -> %s", booking.id, new_status.value)
        return booking

    def cancel_booking(self, booking_id: int, user_id: int | None = None) -> Booking:
        """Cancel on behalf of ``user_id``; other users' bookings look absent."""
        booking = self.store.get_booking(booking_id)
        if booking is None or (user_id is not None and booking.user_id != user_id):
            raise NotFoundError("Booking", booking_id)
        return self.update_booking_status(booking.id, BookingStatus.CANCELLED)

    def delete_booking(self, booking_id: int) -> None:
        if not self.store.delete_booking(booking_id):
            self.store.rollback()
            raise NotFoundError("Booking", booking_id)
        self.store.commit()
        logger.warning("booking %s deleted", booking_id)

    # -- flights -------------------------------------------------------------

    def _owned_flight(self, flight_id: int, owner_id: int | None, lock: bool = False) -> Flight:
        flight = self.store.lock_flight(flight_id) if lock else self.store.get_flight(flight_id)
        if flight is None or (owner_id is not None and flight.company_id != owner_id):
            raise NotFoundError("Flight", flight_id)
        return flight

    def _check_flight(self, data: dict, owner_id: int, exclude_id: int | None = None) -> dict:
        validation.require(validation.is_not_empty(data.get("flight_name")), "flight_name", validation.MESSAGES["not_empty"])
        capacity = data.get("capacity")
        # bool is an int subclass
        validation.require(type(capacity) is int and validation.is_valid_capacity(capacity), "capacity", validation.MESSAGES["capacity"])
        validation.require(validation.is_valid_price(data.get("price")), "price", validation.MESSAGES["price"])
        dep_id, dst_id = data.get("departure_airport_id"), data.get("destination_airport_id")
        if dep_id is None or self.store.get_airport(dep_id) is None:
            raise NotFoundError("Airport", dep_id)
        if dst_id is None or self.store.get_airport(dst_id) is None:
            raise NotFoundError("Airport", dst_id)
        validation.require(dep_id != dst_id, "destination_airport_id", "Departure and destination airports must differ")
        dep_time, arr_time = data.get("departure_time"), data.get("arrival_time")
        validation.require(dep_time is not None and arr_time is not None and dep_time < arr_time,
                           "arrival_time", "Departure must be before arrival")
        clean = {k: data[k] for k in FLIGHT_FIELDS}
        clean["flight_name"] = clean["flight_name"].strip()
        clean["price"] = Decimal(str(clean["price"]))
        clean["flight_code"] = ensure_unique_flight_code(self.store, data.get("flight_code"), owner_id, exclude_id=exclude_id)
        return clean

    def create_flight(self, owner_id: int, data: dict) -> Flight:
        if self.store.get_owner(owner_id) is None:
            raise NotFoundError("Flight owner", owner_id)
        clean = self._check_flight(data, owner_id)
        flight = Flight(company_id=owner_id, **clean)
        try:
            self.store.add(flight)
            self.store.commit(conflict=("Flight code", clean["flight_code"]))
        except LedgerError:
            self.store.rollback()
            raise
        self.store.refresh(flight)
        logger.info("flight %s (%s) created by owner %s", flight.id, flight.flight_code, owner_id)
        return flight

    def update_flight(self, flight_id: int, changes: dict, owner_id: int | None = None) -> Flight:
        """Apply ``changes``; the capacity may not drop below the seats already taken."""
        try:
            flight = self._owned_flight(flight_id, owner_id, lock=True)
            merged = {k: getattr(flight, k) for k in FLIGHT_FIELDS}
            merged.update({k: v for k, v in changes.items() if k in FLIGHT_FIELDS and v is not None})
            clean = self._check_flight(merged, flight.company_id, exclude_id=flight.id)
            # Guarded write: a booking landing meanwhile cannot be squeezed out
            if not self.store.set_capacity_if_fits(flight.id, clean["capacity"]):
                taken = self.store.count_active_bookings(flight.id)
                raise ValidationError("capacity", f"Capacity cannot be less than the {taken} seats already booked")
            for key, value in clean.items():
                setattr(flight, key, value)
            self.store.commit(conflict=("Flight code", clean["flight_code"]))
        except LedgerError:
            self.store.rollback()
            raise
        self.store.refresh(flight)
        logger.info("flight %s updated", flight.id)
        return flight

    def delete_flight(self, flight_id: int, owner_id: int | None = None) -> None:
        """Refused while active bookings exist; cancelled bookings keep their snapshot."""
        flight = self._owned_flight(flight_id, owner_id, lock=True)
        active = self.store.count_active_bookings(flight.id)
        if active:
            raise FlightInUseError(f"Flight {flight.flight_code} still has {active} active booking(s)")
        detached = self.store.detach_bookings(flight.id)
        self.store.delete(flight)
        self.store.commit()
        logger.info("flight %s deleted (%s cancelled booking(s) detached)", flight_id, detached)
