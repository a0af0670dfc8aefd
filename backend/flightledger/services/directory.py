"""Airports and accounts (users, flight owners, admins)."""
from datetime import date
import logging

from flightledger.core.security import get_password_hash, verify_password
from flightledger.models.admin import Admin
from flightledger.models.airport import Airport
from flightledger.models.flight_owner import FlightOwner
from flightledger.models.user import User
from flightledger.services import validation
from flightledger.services.errors import FlightInUseError, LedgerError, NotFoundError
from flightledger.services.store import Store
from flightledger.services.uniqueness import (
    ensure_unique_airport_code,
    ensure_unique_company_code,
    ensure_unique_email,
    ensure_unique_username,
)

logger = logging.getLogger(__name__)


def _require_text(value: str | None, field: str, max_length: int = 255) -> str:
    validation.require(validation.is_not_empty(value), field, validation.MESSAGES["not_empty"])
    validation.require(validation.has_max_length(value, max_length), field, validation.MESSAGES["max_length"])
    return value.strip()


def _require_password(password: str | None) -> str:
    validation.require(validation.is_valid_password(password), "password", validation.MESSAGES["password"])
    return get_password_hash(password)


class Directory:
    def __init__(self, store: Store):
        self.store = store

    def _save(self, obj, conflict: tuple[str, str] | None = None):
        try:
            self.store.add(obj)
            self.store.commit(conflict=conflict)
        except LedgerError:
            self.store.rollback()
            raise
        return self.store.refresh(obj)

    # -- airports ------------------------------------------------------------

    def get_airport(self, airport_id: int) -> Airport:
        airport = self.store.get_airport(airport_id)
        if airport is None:
            raise NotFoundError("Airport", airport_id)
        return airport

    def create_airport(self, code: str, name: str, city: str, country: str) -> Airport:
        code = ensure_unique_airport_code(self.store, code)
        airport = Airport(
            code=code,
            name=_require_text(name, "name"),
            city=_require_text(city, "city", 120),
            country=_require_text(country, "country", 120),
        )
        airport = self._save(airport, conflict=("Airport code", code))
        logger.info("airport %s created", airport.code)
        return airport

    def update_airport(self, airport_id: int, code: str | None = None, name: str | None = None,
                       city: str | None = None, country: str | None = None) -> Airport:
        airport = self.get_airport(airport_id)
        if code is not None:
            airport.code = ensure_unique_airport_code(self.store, code, exclude_id=airport.id)
        if name is not None:
            airport.name = _require_text(name, "name")
        if city is not None:
            airport.city = _require_text(city, "city", 120)
        if country is not None:
            airport.country = _require_text(country, "country", 120)
        self.store.commit(conflict=("Airport code", airport.code))
        return self.store.refresh(airport)

    def delete_airport(self, airport_id: int) -> None:
        airport = self.get_airport(airport_id)
        if self.store.airport_in_use(airport.id):
            raise FlightInUseError(f"Airport {airport.code} is used by existing flights")
        self.store.delete(airport)
        self.store.commit()

    # -- users ---------------------------------------------------------------

    def register_user(self, first_name: str, last_name: str, email: str, password: str,
                      phone: str | None = None, date_of_birth: date | None = None) -> User:
        email = ensure_unique_email(self.store, email)
        if phone:
            validation.require(validation.is_valid_phone(phone), "phone", validation.MESSAGES["phone"])
            phone = validation.clean_phone(phone)
        if date_of_birth is not None:
            validation.require(validation.is_valid_date_of_birth(date_of_birth), "date_of_birth", validation.MESSAGES["date_of_birth"])
        user = User(
            first_name=_require_text(first_name, "first_name", 100),
            last_name=_require_text(last_name, "last_name", 100),
            email=email,
            phone=phone or None,
            date_of_birth=date_of_birth,
            hashed_password=_require_password(password),
        )
        user = self._save(user, conflict=("Email", email))
        logger.info("user %s registered", user.id)
        return user

    def delete_user(self, user_id: int) -> None:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        self.store.delete(user)
        self.store.commit()

    # -- owners --------------------------------------------------------------

    def register_owner(self, company_name: str, company_code: str, password: str, contact_info: str | None = None) -> FlightOwner:
        code = ensure_unique_company_code(self.store, company_code)
        owner = FlightOwner(
            company_name=_require_text(company_name, "company_name"),
            company_code=code,
            contact_info=contact_info.strip() if contact_info else None,
            hashed_password=_require_password(password),
        )
        owner = self._save(owner, conflict=("Company code", code))
        logger.info("flight owner %s (%s) registered", owner.id, owner.company_code)
        return owner

    def update_owner(self, owner_id: int, company_name: str | None = None, company_code: str | None = None,
                     contact_info: str | None = None) -> FlightOwner:
        owner = self.store.get_owner(owner_id)
        if owner is None:
            raise NotFoundError("Flight owner", owner_id)
        if company_code is not None:
            owner.company_code = ensure_unique_company_code(self.store, company_code, exclude_id=owner.id)
        if company_name is not None:
            owner.company_name = _require_text(company_name, "company_name")
        if contact_info is not None:
            owner.contact_info = contact_info.strip() or None
        self.store.commit(conflict=("Company code", owner.company_code))
        return self.store.refresh(owner)

    def delete_owner(self, owner_id: int) -> None:
        owner = self.store.get_owner(owner_id)
        if owner is None:
            raise NotFoundError("Flight owner", owner_id)
        if self.store.count_flights_by_owner(owner.id):
            raise FlightInUseError(f"{owner.company_name} still operates flights")
        self.store.delete(owner)
        self.store.commit()

    # -- admins --------------------------------------------------------------

    def create_admin(self, username: str, password: str) -> Admin:
        username = ensure_unique_username(self.store, username)
        return self._save(Admin(username=username, hashed_password=_require_password(password)), conflict=("Username", username))

    # -- authentication ------------------------------------------------------

    def authenticate(self, kind: str, identifier: str, password: str):
        """Return the account matching the credentials, or None."""
        identifier = (identifier or "").strip()
        if kind == "user":
            account = self.store.get_user_by_email(identifier.lower())
        elif kind == "owner":
            account = self.store.get_owner_by_code(identifier.upper())
        elif kind == "admin":
            account = self.store.get_admin_by_username(identifier)
        else:
            raise ValueError(f"Unknown account kind: {kind}")
        if account is None or not verify_password(password, account.hashed_password):
            logger.info("failed %s login for %r", kind, identifier)
            return None
        return account
