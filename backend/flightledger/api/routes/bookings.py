from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from flightledger.api.deps import SessionContext, get_ledger, get_store, require_permission
from flightledger.models.booking import BookingStatus
from flightledger.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate, PaymentStatusUpdate
from flightledger.services.identifiers import format_pnr, is_valid_pnr
from flightledger.services.ledger import BookingLedger
from flightledger.services.store import Store

router = APIRouter()
admin_only = [Depends(require_permission("view_all_bookings"))]

@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    ctx: SessionContext = Depends(require_permission("user_booking")),
    ledger: BookingLedger = Depends(get_ledger),
):
    initial = BookingStatus.CONFIRMED if payload.confirm else BookingStatus.PENDING
    return ledger.create_booking(ctx.subject_id, payload.flight_id, amount=payload.amount, status=initial)

@router.get("/my", response_model=List[BookingRead])
def my_bookings(ctx: SessionContext = Depends(require_permission("user_booking")), store: Store = Depends(get_store)):
    return store.list_bookings(user_id=ctx.subject_id)

@router.get("/pnr/{pnr}", response_model=BookingRead)
def booking_by_pnr(
    pnr: str,
    ctx: SessionContext = Depends(require_permission("user_booking")),
    store: Store = Depends(get_store),
):
    if not is_valid_pnr(pnr):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="PNR must be 6-12 letters or digits")
    booking = store.get_booking_by_pnr(format_pnr(pnr))
    if booking is None or booking.user_id != ctx.subject_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Booking with PNR {pnr} not found")
    return booking

@router.post("/{booking_id}/cancel", response_model=BookingRead)
def cancel_booking(
    booking_id: int,
    ctx: SessionContext = Depends(require_permission("user_booking")),
    ledger: BookingLedger = Depends(get_ledger),
):
    return ledger.cancel_booking(booking_id, user_id=ctx.subject_id)

@router.get("/", response_model=List[BookingRead], dependencies=admin_only)
def all_bookings(store: Store = Depends(get_store)):
    return store.list_bookings()

@router.put("/{booking_id}/status", response_model=BookingRead, dependencies=admin_only)
def set_booking_status(booking_id: int, payload: BookingStatusUpdate, ledger: BookingLedger = Depends(get_ledger)):
    return ledger.update_booking_status(booking_id, payload.status)

@router.put("/{booking_id}/payment", response_model=BookingRead, dependencies=admin_only)
def set_payment_status(booking_id: int, payload: PaymentStatusUpdate, ledger: BookingLedger = Depends(get_ledger)):
    return ledger.update_payment_status(booking_id, payload.status)

@router.delete("/{booking_id}", dependencies=admin_only)
def delete_booking(booking_id: int, ledger: BookingLedger = Depends(get_ledger)):
    ledger.delete_booking(booking_id)
    return {"status": "deleted"}
