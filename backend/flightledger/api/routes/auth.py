from fastapi import APIRouter, Depends, HTTPException, status

from flightledger.api.deps import get_directory
from flightledger.core.security import create_access_token
from flightledger.schemas.auth import LoginRequest, OwnerOut, OwnerRegister, Token, UserOut, UserRegister
from flightledger.services.directory import Directory

router = APIRouter()

@router.post("/login", response_model=Token)
def login(payload: LoginRequest, directory: Directory = Depends(get_directory)):
    """One login for all account kinds: users by email, owners by company code, admins by username."""
    account = directory.authenticate(payload.kind, payload.identifier, payload.password)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect credentials")
    access_token = create_access_token(subject=account.id, kind=payload.kind)
    return {"access_token": access_token, "token_type": "bearer", "kind": payload.kind}

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, directory: Directory = Depends(get_directory)):
    return directory.register_user(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
        date_of_birth=payload.date_of_birth,
    )

@router.post("/register-owner", response_model=OwnerOut, status_code=status.HTTP_201_CREATED)
def register_owner(payload: OwnerRegister, directory: Directory = Depends(get_directory)):
    owner = directory.register_owner(
        company_name=payload.company_name,
        company_code=payload.company_code,
        password=payload.password,
        contact_info=payload.contact_info,
    )
    return {
        "id": owner.id,
        "company_name": owner.company_name,
        "company_code": owner.company_code,
        "contact_info": owner.contact_info,
        "flight_count": 0,
    }
