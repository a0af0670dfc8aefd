from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status

from flightledger.api.deps import SessionContext, get_ledger, get_store, require_permission
from flightledger.models.flight import Flight
from flightledger.schemas.flight import FlightCreate, FlightRead, FlightUpdate
from flightledger.services.ledger import BookingLedger
from flightledger.services.store import Store

router = APIRouter()


def serialize_flight(f: Flight, seats: dict) -> dict:
    return {
        "id": f.id,
        "company_id": f.company_id,
        "company_name": f.owner.company_name if f.owner else None,
        "company_code": f.owner.company_code if f.owner else None,
        "flight_code": f.flight_code,
        "flight_name": f.flight_name,
        "route": f.route,
        "departure_airport_id": f.departure_airport_id,
        "destination_airport_id": f.destination_airport_id,
        "departure_time": f.departure_time,
        "arrival_time": f.arrival_time,
        "price": float(f.price),
        "capacity": f.capacity,
        "available_seats": seats["available_seats"],
        "is_available": seats["is_available"],
        "occupancy_rate": seats["occupancy_rate"],
    }


def serialize_flights(ledger: BookingLedger, flights: list[Flight]) -> list[dict]:
    seats = ledger.seat_summary(flights)
    return [serialize_flight(f, seats[f.id]) for f in flights]


def _owner_scope(ctx: SessionContext) -> int | None:
    """Owners may only touch their own flights; admins any."""
    return ctx.subject_id if ctx.kind == "owner" else None


@router.get("/", response_model=list[FlightRead])
def search_flights(
    departure_airport_id: int | None = None,
    destination_airport_id: int | None = None,
    day: date | None = Query(None, alias="date", description="Departure date YYYY-MM-DD"),
    only_available: bool = Query(False, description="Hide fully booked flights"),
    store: Store = Depends(get_store),
    ledger: BookingLedger = Depends(get_ledger),
):
    flights = store.search_flights(departure_airport_id, destination_airport_id, day)
    items = serialize_flights(ledger, flights)
    if only_available:
        items = [f for f in items if f["is_available"]]
    return items

@router.get("/{flight_id}", response_model=FlightRead)
def flight_detail(flight_id: int, store: Store = Depends(get_store), ledger: BookingLedger = Depends(get_ledger)):
    f = store.get_flight(flight_id)
    if not f:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Flight not found")
    return serialize_flights(ledger, [f])[0]

@router.post("/", response_model=FlightRead, status_code=status.HTTP_201_CREATED)
def create_flight(
    payload: FlightCreate,
    ctx: SessionContext = Depends(require_permission("view_own_flights")),
    ledger: BookingLedger = Depends(get_ledger),
):
    f = ledger.create_flight(ctx.subject_id, payload.model_dump())
    return serialize_flights(ledger, [f])[0]

@router.put("/{flight_id}", response_model=FlightRead)
def update_flight(
    flight_id: int,
    payload: FlightUpdate,
    ctx: SessionContext = Depends(require_permission("flight_management")),
    ledger: BookingLedger = Depends(get_ledger),
):
    f = ledger.update_flight(flight_id, payload.model_dump(exclude_unset=True), owner_id=_owner_scope(ctx))
    return serialize_flights(ledger, [f])[0]

@router.delete("/{flight_id}")
def delete_flight(
    flight_id: int,
    ctx: SessionContext = Depends(require_permission("flight_management")),
    ledger: BookingLedger = Depends(get_ledger),
):
    ledger.delete_flight(flight_id, owner_id=_owner_scope(ctx))
    return {"status": "deleted"}
