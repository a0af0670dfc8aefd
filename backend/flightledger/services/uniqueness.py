"""Normalise-validate-lookup for every identifier family.

Each ``ensure_unique_*`` returns the normalised value or raises. Pass
``exclude_id`` on update flows so an entity never collides with itself.
The unique constraints in the schema remain the final guard against two
writers passing the lookup at the same time.
"""
from flightledger.services import validation
from flightledger.services.errors import DuplicateIdentifierError
from flightledger.services.identifiers import format_pnr, is_valid_pnr
from flightledger.services.store import CodeKind, Store


def ensure_unique_airport_code(store: Store, code: str | None, exclude_id: int | None = None) -> str:
    validation.require(validation.is_valid_airport_code(code), "code", validation.MESSAGES["airport_code"])
    code = validation.format_airport_code(code)
    if store.exists_by_code(CodeKind.AIRPORT, code, exclude_id=exclude_id):
        raise DuplicateIdentifierError("Airport code", code)
    return code


def ensure_unique_company_code(store: Store, code: str | None, exclude_id: int | None = None) -> str:
    validation.require(validation.is_valid_company_code(code), "company_code", validation.MESSAGES["company_code"])
    code = validation.format_company_code(code)
    if store.exists_by_code(CodeKind.COMPANY, code, exclude_id=exclude_id):
        raise DuplicateIdentifierError("Company code", code)
    return code


def ensure_unique_flight_code(store: Store, code: str | None, owner_id: int, exclude_id: int | None = None) -> str:
    """Flight codes are free-form and only need to be unique within one company."""
    validation.require(validation.is_not_empty(code), "flight_code", validation.MESSAGES["not_empty"])
    code = validation.format_flight_code(code)
    if store.exists_by_code(CodeKind.FLIGHT, code, exclude_id=exclude_id, owner_id=owner_id):
        raise DuplicateIdentifierError("Flight code", code)
    return code


def ensure_unique_pnr(store: Store, pnr: str | None, exclude_id: int | None = None) -> str:
    validation.require(is_valid_pnr(pnr), "pnr", "PNR must be 6-12 letters or digits")
    pnr = format_pnr(pnr)
    if store.exists_by_code(CodeKind.PNR, pnr, exclude_id=exclude_id):
        raise DuplicateIdentifierError("PNR", pnr)
    return pnr


def ensure_unique_email(store: Store, email: str | None, exclude_id: int | None = None) -> str:
    validation.require(validation.is_valid_email(email), "email", validation.MESSAGES["email"])
    email = email.strip().lower()
    if store.exists_by_code(CodeKind.EMAIL, email, exclude_id=exclude_id):
        raise DuplicateIdentifierError("Email", email)
    return email


def ensure_unique_username(store: Store, username: str | None, exclude_id: int | None = None) -> str:
    validation.require(validation.has_min_length(username, 3), "username", validation.MESSAGES["min_length"])
    username = username.strip()
    if store.exists_by_code(CodeKind.USERNAME, username, exclude_id=exclude_id):
        raise DuplicateIdentifierError("Username", username)
    return username
