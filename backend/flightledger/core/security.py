from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import random
import string
import jwt
from passlib.context import CryptContext

from flightledger.core.config import settings

# Prefer argon2, keep bcrypt as fallback for compatibility
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

ACCOUNT_KINDS = ("user", "owner", "admin")

def verify_password(plain_password: str | None, hashed_password: str | None) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    if password is None or not password.strip():
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(password)

def generate_random_password(length: int = 10, rng: random.Random | None = None) -> str:
    """Random password with at least one upper, one lower letter and one digit."""
    rng = rng or random.SystemRandom()
    length = max(length, 6)
    chars = string.ascii_letters + string.digits
    picked = [
        rng.choice(string.ascii_uppercase),
        rng.choice(string.ascii_lowercase),
        rng.choice(string.digits),
    ]
    picked += [rng.choice(chars) for _ in range(length - 3)]
    rng.shuffle(picked)
    return "".join(picked)

def create_access_token(subject: str | Any, kind: str, expires_delta: Optional[timedelta] = None) -> str:
    if kind not in ACCOUNT_KINDS:
        raise ValueError(f"Unknown account kind: {kind}")
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode: dict[str, Any] = {"sub": str(subject), "exp": expire, "kind": kind}
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode an access token.
    Raises jwt.PyJWTError if invalid and returns the payload as a dict.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    return payload
