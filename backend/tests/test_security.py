from datetime import timedelta
import random

import jwt
import pytest

from flightledger.core.security import (
    create_access_token,
    decode_access_token,
    generate_random_password,
    get_password_hash,
    verify_password,
)
from flightledger.services.validation import is_valid_password


def test_password_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("", hashed)


def test_empty_password_cannot_be_hashed():
    with pytest.raises(ValueError):
        get_password_hash("  ")


def test_generated_password_is_acceptable():
    rng = random.Random(5)
    for _ in range(50):
        password = generate_random_password(rng=rng)
        assert len(password) == 10
        assert is_valid_password(password)


def test_token_carries_kind():
    payload = decode_access_token(create_access_token(subject=7, kind="owner"))
    assert payload["sub"] == "7"
    assert payload["kind"] == "owner"
    with pytest.raises(ValueError):
        create_access_token(subject=7, kind="pilot")


def test_expired_token_rejected():
    token = create_access_token(subject=1, kind="user", expires_delta=timedelta(seconds=-5))
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)
