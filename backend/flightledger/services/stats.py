"""Owner booking statistics and system-wide reports.

Revenue only counts bookings that are Confirmed and whose payment
Completed. Seat figures come from the ledger, so they agree with what a
booking attempt would see.
"""
from collections import defaultdict
from decimal import Decimal

from flightledger.models.admin import Admin
from flightledger.models.booking import Booking, BookingStatus, PaymentStatus
from flightledger.models.flight import Flight
from flightledger.models.flight_owner import FlightOwner
from flightledger.models.user import User
from flightledger.services.errors import NotFoundError
from flightledger.services.ledger import BookingLedger
from flightledger.services.store import Store


def _is_revenue(b: Booking) -> bool:
    return b.booking_status == BookingStatus.CONFIRMED.value and b.payment_status == PaymentStatus.COMPLETED.value


def status_breakdown(bookings: list[Booking]) -> dict[str, int]:
    counts = {s.value: 0 for s in BookingStatus}
    for b in bookings:
        counts[b.booking_status] = counts.get(b.booking_status, 0) + 1
    return counts


def owner_statistics(store: Store, owner_id: int) -> dict:
    if store.get_owner(owner_id) is None:
        raise NotFoundError("Flight owner", owner_id)
    flights = store.get_flights_by_owner(owner_id)
    bookings = store.list_bookings(flight_ids=[f.id for f in flights]) if flights else []
    seats = BookingLedger(store).seat_summary(flights)

    by_flight: dict[int, list[Booking]] = defaultdict(list)
    for b in bookings:
        by_flight[b.flight_id].append(b)

    rows = []
    for f in flights:
        flight_bookings = by_flight.get(f.id, [])
        rows.append({
            "flight_id": f.id,
            "flight_code": f.flight_code,
            "route": f.route,
            "departure_time": f.departure_time.isoformat(),
            **seats[f.id],
            "bookings": status_breakdown(flight_bookings),
            "revenue": float(sum((b.amount for b in flight_bookings if _is_revenue(b)), Decimal("0"))),
        })

    return {
        "total_flights": len(flights),
        "total_bookings": len(bookings),
        "bookings": status_breakdown(bookings),
        "total_revenue": float(sum((b.amount for b in bookings if _is_revenue(b)), Decimal("0"))),
        "flights": rows,
    }


def system_report(store: Store) -> dict:
    bookings = store.list_bookings()
    return {
        "users": store.count(User),
        "flight_owners": store.count(FlightOwner),
        "admins": store.count(Admin),
        "flights": store.count(Flight),
        "bookings": len(bookings),
        "booking_status": status_breakdown(bookings),
        "payments_completed": sum(1 for b in bookings if b.payment_status == PaymentStatus.COMPLETED.value),
        "total_revenue": float(sum((b.amount for b in bookings if _is_revenue(b)), Decimal("0"))),
    }
