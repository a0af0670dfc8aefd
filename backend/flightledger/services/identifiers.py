"""PNR and booking reference codes.

All generators are pure functions of a random source. Pass a seeded
``random.Random`` for reproducible output; the default draws from the OS
entropy pool.
"""
from datetime import datetime
import random
import string

ALPHABET = string.ascii_uppercase + string.digits
# No 0/O and 1/I, which read alike on boarding passes
CLEAR_ALPHABET = "".join(c for c in ALPHABET if c not in "0O1I")
PNR_LENGTH = 6
PNR_MIN_LENGTH = 6
PNR_MAX_LENGTH = 12
AIRLINE_PREFIX_MAX = 3

_system_random = random.SystemRandom()


def _draw(length: int, alphabet: str = ALPHABET, rng: random.Random | None = None) -> str:
    rng = rng or _system_random
    return "".join(rng.choice(alphabet) for _ in range(length))


def generate_pnr(length: int = PNR_LENGTH, rng: random.Random | None = None) -> str:
    return _draw(length, rng=rng)


def generate_timestamped_pnr(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """YYMMDD date prefix followed by six random characters."""
    now = now or datetime.now()
    return now.strftime("%y%m%d") + _draw(PNR_LENGTH, rng=rng)


def generate_pnr_with_airline(airline_code: str | None, rng: random.Random | None = None) -> str:
    """Airline code (at most three characters) followed by six random characters.

    Falls back to a plain PNR when no usable code is given.
    """
    prefix = format_pnr(airline_code) or ""
    if not prefix or not prefix.isalnum():
        return generate_pnr(rng=rng)
    return prefix[:AIRLINE_PREFIX_MAX] + _draw(PNR_LENGTH, rng=rng)


def generate_clear_pnr(rng: random.Random | None = None) -> str:
    return _draw(PNR_LENGTH, CLEAR_ALPHABET, rng=rng)


def generate_booking_reference(rng: random.Random | None = None) -> str:
    return _draw(10, rng=rng)


def generate_confirmation_code(rng: random.Random | None = None) -> str:
    return _draw(8, rng=rng)


def format_pnr(value: str | None) -> str | None:
    if value is None:
        return None
    return "".join(value.split()).upper()


def is_valid_pnr(value: str | None) -> bool:
    """Syntactic check that also applies to PNRs typed in by hand."""
    if value is None:
        return False
    clean = value.strip().upper()
    if not PNR_MIN_LENGTH <= len(clean) <= PNR_MAX_LENGTH:
        return False
    return all(c in ALPHABET for c in clean)
