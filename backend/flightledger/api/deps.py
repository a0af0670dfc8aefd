from dataclasses import dataclass
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import jwt

from flightledger.core.security import ACCOUNT_KINDS, decode_access_token
from flightledger.db.session import get_db
from flightledger.services.directory import Directory
from flightledger.services.ledger import BookingLedger
from flightledger.services.store import Store

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

# permission -> account kinds holding it
PERMISSIONS = {
    "user_booking": {"user"},
    "admin_management": {"admin"},
    "flight_management": {"admin", "owner"},
    "view_all_bookings": {"admin"},
    "view_own_flights": {"owner"},
}


@dataclass(frozen=True)
class SessionContext:
    """Who is calling. Built per request from the bearer token."""
    kind: str
    subject_id: int

    def has_permission(self, permission: str) -> bool:
        return self.kind in PERMISSIONS.get(permission.lower(), set())


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)

def get_ledger(store: Store = Depends(get_store)) -> BookingLedger:
    return BookingLedger(store)

def get_directory(store: Store = Depends(get_store)) -> Directory:
    return Directory(store)

def get_session_context(token: str = Depends(oauth2_scheme)) -> SessionContext:
    try:
        payload = decode_access_token(token)
        kind = payload.get("kind")
        if kind not in ACCOUNT_KINDS:
            raise ValueError("Missing account kind")
        return SessionContext(kind=kind, subject_id=int(payload["sub"]))
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

def require_permission(permission: str):
    def checker(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
        if not ctx.has_permission(permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return ctx
    return checker
