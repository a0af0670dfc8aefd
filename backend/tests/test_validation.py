from datetime import date, datetime
from decimal import Decimal

import pytest

from flightledger.services import validation
from flightledger.services.errors import ValidationError


def test_email():
    assert validation.is_valid_email("asha.rao@example.co.in")
    assert not validation.is_valid_email("asha@")
    assert not validation.is_valid_email(None)


def test_phone_accepts_separators():
    assert validation.is_valid_phone("+91 (987) 654-3210")
    assert validation.clean_phone("+91 (987) 654-3210") == "+919876543210"
    assert not validation.is_valid_phone("12345")
    assert not validation.is_valid_phone("98765abc10")


def test_codes():
    assert validation.is_valid_airport_code("del")
    assert validation.is_valid_airport_code("EGLL")
    assert not validation.is_valid_airport_code("DE")
    assert not validation.is_valid_airport_code("D3L")
    assert validation.is_valid_company_code("6E")
    assert not validation.is_valid_company_code("A")
    assert not validation.is_valid_company_code("TOOLONG")
    assert validation.format_flight_code("  6e-201 ") == "6E-201"


def test_text_lengths():
    assert validation.is_not_empty(" x ")
    assert not validation.is_not_empty("   ")
    assert validation.has_min_length("abc", 3)
    assert not validation.has_min_length(" ab ", 3)
    assert validation.has_max_length(None, 3)
    assert not validation.has_max_length("abcd", 3)


@pytest.mark.parametrize("dob,ok", [
    (date(2012, 6, 1), True),    # exactly 12
    (date(2012, 6, 2), False),   # one day short
    (date(1904, 6, 2), True),
    (date(1904, 6, 1), False),   # 120 years
])
def test_date_of_birth(dob, ok):
    assert validation.is_valid_date_of_birth(dob, today=date(2024, 6, 1)) is ok


def test_date_of_birth_on_leap_day():
    assert validation.is_valid_date_of_birth(date(2012, 2, 28), today=date(2025, 2, 28))
    assert validation.is_valid_date_of_birth(date(2000, 1, 1), today=date(2024, 2, 29))


def test_future_date():
    assert validation.is_future_date(date(2024, 6, 2), today=date(2024, 6, 1))
    assert not validation.is_future_date(date(2024, 6, 1), today=date(2024, 6, 1))
    assert validation.is_future_date(datetime(2099, 1, 1))


def test_price_and_capacity():
    assert validation.is_valid_price(Decimal("0.01"))
    assert validation.is_valid_price("100000")
    assert not validation.is_valid_price(0)
    assert not validation.is_valid_price(100000.01)
    assert not validation.is_valid_price("abc")
    assert not validation.is_valid_price("NaN")
    assert not validation.is_valid_price(float("nan"))
    assert not validation.is_valid_price("Infinity")
    assert validation.is_valid_capacity(1000)
    assert not validation.is_valid_capacity(0)
    assert not validation.is_valid_capacity(1001)


def test_password():
    assert validation.is_valid_password("secret1")
    assert not validation.is_valid_password("secret")
    assert not validation.is_valid_password("123456")


def test_parse_date():
    assert validation.parse_date("2024-06-01") == date(2024, 6, 1)
    assert validation.parse_date("  ") is None


def test_require_raises_with_field():
    with pytest.raises(ValidationError) as exc:
        validation.require(False, "price", validation.MESSAGES["price"])
    assert exc.value.field == "price"
    assert exc.value.to_dict()["field"] == "price"


def test_numeric_and_flight_code_predicates():
    assert validation.is_positive(1)
    assert not validation.is_positive(0)
    assert validation.is_non_negative(0)
    assert not validation.is_non_negative(-1)
    assert validation.is_valid_flight_code("anything goes 123")
