from typing import List
from fastapi import APIRouter, Depends

from flightledger.api.deps import SessionContext, get_directory, get_ledger, get_store, require_permission
from flightledger.api.routes.flights import serialize_flights
from flightledger.schemas.auth import OwnerOut, OwnerUpdate
from flightledger.schemas.flight import FlightRead
from flightledger.services.directory import Directory
from flightledger.services.errors import NotFoundError
from flightledger.services.ledger import BookingLedger
from flightledger.services.stats import owner_statistics
from flightledger.services.store import Store

router = APIRouter()


def _profile(store: Store, owner) -> dict:
    return {
        "id": owner.id,
        "company_name": owner.company_name,
        "company_code": owner.company_code,
        "contact_info": owner.contact_info,
        "flight_count": store.count_flights_by_owner(owner.id),
    }

@router.get("/profile", response_model=OwnerOut)
def profile(ctx: SessionContext = Depends(require_permission("view_own_flights")), store: Store = Depends(get_store)):
    owner = store.get_owner(ctx.subject_id)
    if owner is None:
        raise NotFoundError("Flight owner", ctx.subject_id)
    return _profile(store, owner)

@router.put("/profile", response_model=OwnerOut)
def update_profile(
    payload: OwnerUpdate,
    ctx: SessionContext = Depends(require_permission("view_own_flights")),
    store: Store = Depends(get_store),
    directory: Directory = Depends(get_directory),
):
    owner = directory.update_owner(ctx.subject_id, **payload.model_dump(exclude_unset=True))
    return _profile(store, owner)

@router.get("/flights", response_model=List[FlightRead])
def my_flights(
    ctx: SessionContext = Depends(require_permission("view_own_flights")),
    store: Store = Depends(get_store),
    ledger: BookingLedger = Depends(get_ledger),
):
    return serialize_flights(ledger, store.get_flights_by_owner(ctx.subject_id))

@router.get("/stats")
def stats(ctx: SessionContext = Depends(require_permission("view_own_flights")), store: Store = Depends(get_store)):
    return owner_statistics(store, ctx.subject_id)
