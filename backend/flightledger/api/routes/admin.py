from typing import List
from fastapi import APIRouter, Depends, status

from flightledger.api.deps import get_directory, get_store, require_permission
from flightledger.core.security import generate_random_password
from flightledger.schemas.auth import OwnerOut, OwnerRegister, UserOut
from flightledger.services.directory import Directory
from flightledger.services.stats import system_report
from flightledger.services.store import Store

router = APIRouter(dependencies=[Depends(require_permission("admin_management"))])

@router.get("/users", response_model=List[UserOut])
def list_users(store: Store = Depends(get_store)):
    return store.list_users()

@router.delete("/users/{user_id}")
def delete_user(user_id: int, directory: Directory = Depends(get_directory)):
    directory.delete_user(user_id)
    return {"status": "deleted"}

@router.get("/owners", response_model=List[OwnerOut])
def list_owners(store: Store = Depends(get_store)):
    return [
        {
            "id": o.id,
            "company_name": o.company_name,
            "company_code": o.company_code,
            "contact_info": o.contact_info,
            "flight_count": store.count_flights_by_owner(o.id),
        }
        for o in store.list_owners()
    ]

@router.post("/owners", status_code=status.HTTP_201_CREATED)
def create_owner(payload: OwnerRegister, directory: Directory = Depends(get_directory)):
    """Register a flight owner on their behalf. An empty password gets a generated one, returned once."""
    password = payload.password or generate_random_password()
    owner = directory.register_owner(
        company_name=payload.company_name,
        company_code=payload.company_code,
        password=password,
        contact_info=payload.contact_info,
    )
    result = {
        "id": owner.id,
        "company_name": owner.company_name,
        "company_code": owner.company_code,
        "contact_info": owner.contact_info,
        "flight_count": 0,
    }
    if not payload.password:
        result["generated_password"] = password
    return result

@router.delete("/owners/{owner_id}")
def delete_owner(owner_id: int, directory: Directory = Depends(get_directory)):
    directory.delete_owner(owner_id)
    return {"status": "deleted"}

@router.get("/reports")
def reports(store: Store = Depends(get_store)):
    return system_report(store)
