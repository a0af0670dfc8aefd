from typing import List
from fastapi import APIRouter, Depends, Query, status

from flightledger.api.deps import get_directory, get_store, require_permission
from flightledger.schemas.airport import AirportBase, AirportRead, AirportUpdate
from flightledger.services.directory import Directory
from flightledger.services.store import Store

router = APIRouter()
admin_only = [Depends(require_permission("admin_management"))]

@router.get("/", response_model=List[AirportRead])
def list_airports(q: str | None = Query(None, description="Matches code, name, city or country"), store: Store = Depends(get_store)):
    return store.search_airports(q)

@router.get("/{airport_id}", response_model=AirportRead)
def airport_detail(airport_id: int, directory: Directory = Depends(get_directory)):
    return directory.get_airport(airport_id)

@router.post("/", response_model=AirportRead, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_airport(payload: AirportBase, directory: Directory = Depends(get_directory)):
    return directory.create_airport(payload.code, payload.name, payload.city, payload.country)

@router.put("/{airport_id}", response_model=AirportRead, dependencies=admin_only)
def update_airport(airport_id: int, payload: AirportUpdate, directory: Directory = Depends(get_directory)):
    return directory.update_airport(airport_id, **payload.model_dump(exclude_unset=True))

@router.delete("/{airport_id}", dependencies=admin_only)
def delete_airport(airport_id: int, directory: Directory = Depends(get_directory)):
    directory.delete_airport(airport_id)
    return {"status": "deleted"}
