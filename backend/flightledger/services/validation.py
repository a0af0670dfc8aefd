"""Field-level input rules.

Each ``is_*``/``has_*`` predicate takes a primitive and returns a bool; the
matching human-readable message lives in ``MESSAGES``. Callers (API schemas
and the ledger) use ``require`` to turn a failed rule into a field-scoped
``ValidationError``.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import re

from flightledger.services.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,7}$")
PHONE_PATTERN = re.compile(r"^\+?\d{10,15}$")
AIRPORT_CODE_PATTERN = re.compile(r"^[A-Z]{3,4}$")
COMPANY_CODE_PATTERN = re.compile(r"^[A-Z0-9]{2,5}$")
_PHONE_SEPARATORS = re.compile(r"[\s()\-]")

MIN_AGE_YEARS = 12
MAX_AGE_YEARS = 120
MAX_PRICE = Decimal("100000")
MAX_CAPACITY = 1000
MIN_PASSWORD_LENGTH = 6

MESSAGES = {
    "email": "Please enter a valid email address (e.g., user@example.com)",
    "phone": "Please enter a valid phone number (10-15 digits)",
    "airport_code": "Airport code must be 3-4 uppercase letters (e.g., JFK, LAX)",
    "flight_code": "Flight code accepts any format and will be auto-uppercased.",
    "company_code": "Company code must be 2-5 uppercase letters/numbers (e.g., AA, BA, DL123)",
    "not_empty": "This field is required",
    "min_length": "Value is too short",
    "max_length": "Value is too long",
    "positive": "Value must be greater than zero",
    "non_negative": "Value cannot be negative",
    "date_of_birth": "Passengers must be between 12 and 120 years old",
    "future_date": "Date must be in the future",
    "price": "Price must be greater than 0 and at most 100000",
    "capacity": "Capacity must be between 1 and 1000 seats",
    "password": "Password must be at least 6 characters and contain a letter and a digit",
}


def require(ok: bool, field: str, message: str) -> None:
    if not ok:
        raise ValidationError(field, message)


def is_valid_email(email: str | None) -> bool:
    return email is not None and EMAIL_PATTERN.match(email.strip()) is not None


def clean_phone(phone: str | None) -> str | None:
    if phone is None:
        return None
    return _PHONE_SEPARATORS.sub("", phone)


def is_valid_phone(phone: str | None) -> bool:
    if phone is None:
        return False
    return PHONE_PATTERN.match(clean_phone(phone)) is not None


def is_valid_airport_code(code: str | None) -> bool:
    return code is not None and AIRPORT_CODE_PATTERN.match(code.strip().upper()) is not None


def is_valid_flight_code(code: str | None) -> bool:
    # Any text; format_flight_code only uppercases
    return True


def is_valid_company_code(code: str | None) -> bool:
    return code is not None and COMPANY_CODE_PATTERN.match(code.strip().upper()) is not None


def is_not_empty(value: str | None) -> bool:
    return value is not None and bool(value.strip())


def has_min_length(value: str | None, min_length: int) -> bool:
    return value is not None and len(value.strip()) >= min_length


def has_max_length(value: str | None, max_length: int) -> bool:
    return value is None or len(value.strip()) <= max_length


def is_positive(value: int) -> bool:
    return value > 0


def is_non_negative(value: int) -> bool:
    return value >= 0


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def is_valid_date_of_birth(date_of_birth: date | None, today: date | None = None) -> bool:
    """At least 12 and younger than 120 years old on ``today``."""
    if date_of_birth is None:
        return False
    today = today or date.today()
    youngest = _years_before(today, MIN_AGE_YEARS)
    oldest = _years_before(today, MAX_AGE_YEARS)
    return oldest < date_of_birth <= youngest


def is_future_date(value: date | datetime | None, today: date | None = None) -> bool:
    if value is None:
        return False
    if isinstance(value, datetime):
        return value > datetime.now() if today is None else value.date() > today
    return value > (today or date.today())


def is_valid_price(price) -> bool:
    try:
        amount = Decimal(str(price))
    except (InvalidOperation, ValueError):
        return False
    if not amount.is_finite():
        return False
    return Decimal("0") < amount <= MAX_PRICE


def is_valid_capacity(capacity: int) -> bool:
    return 0 < capacity <= MAX_CAPACITY


def is_valid_password(password: str | None) -> bool:
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return any(c.isalpha() for c in password) and any(c.isdigit() for c in password)


def format_airport_code(code: str | None) -> str | None:
    return code.strip().upper() if code is not None else None


def format_flight_code(code: str | None) -> str | None:
    return code.strip().upper() if code is not None else None


def format_company_code(code: str | None) -> str | None:
    return code.strip().upper() if code is not None else None


def parse_date(value: str | None) -> date | None:
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None
