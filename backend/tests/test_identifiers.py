from datetime import datetime
import random

from flightledger.services.identifiers import (
    ALPHABET,
    CLEAR_ALPHABET,
    format_pnr,
    generate_booking_reference,
    generate_clear_pnr,
    generate_confirmation_code,
    generate_pnr,
    generate_pnr_with_airline,
    generate_timestamped_pnr,
    is_valid_pnr,
)


def test_generate_pnr_shape():
    pnr = generate_pnr()
    assert len(pnr) == 6
    assert all(c in ALPHABET for c in pnr)
    assert is_valid_pnr(pnr)


def test_seeded_generation_is_reproducible():
    assert generate_pnr(rng=random.Random(42)) == generate_pnr(rng=random.Random(42))


def test_pnr_collisions_are_rare():
    # 36**6 possible codes; 10k draws should collide only a handful of times
    rng = random.Random(7)
    pnrs = [generate_pnr(rng=rng) for _ in range(10_000)]
    assert len(pnrs) - len(set(pnrs)) < 10


def test_timestamped_pnr_has_date_prefix():
    pnr = generate_timestamped_pnr(now=datetime(2024, 3, 9, 12, 0), rng=random.Random(1))
    assert pnr.startswith("240309")
    assert len(pnr) == 12
    assert is_valid_pnr(pnr)


def test_airline_pnr_prefix_is_capped_at_three():
    assert generate_pnr_with_airline("6e", rng=random.Random(1)).startswith("6E")
    pnr = generate_pnr_with_airline("ABCDE", rng=random.Random(1))
    assert pnr.startswith("ABC") and len(pnr) == 9


def test_airline_pnr_falls_back_without_code():
    assert len(generate_pnr_with_airline(None)) == 6
    assert len(generate_pnr_with_airline("  ")) == 6
    assert len(generate_pnr_with_airline("A-1")) == 6


def test_clear_pnr_avoids_lookalikes():
    rng = random.Random(3)
    for _ in range(200):
        assert all(c in CLEAR_ALPHABET for c in generate_clear_pnr(rng=rng))
    assert not set("0O1I") & set(CLEAR_ALPHABET)


def test_reference_lengths():
    assert len(generate_booking_reference()) == 10
    assert len(generate_confirmation_code()) == 8


def test_format_pnr():
    assert format_pnr(" ab c12 3 ") == "ABC123"
    assert format_pnr(None) is None


def test_is_valid_pnr():
    assert is_valid_pnr("abc123")
    assert is_valid_pnr(" ABCDEF123456 ")
    assert not is_valid_pnr("ABC12")
    assert not is_valid_pnr("ABCDEF1234567")
    assert not is_valid_pnr("ABC-123")
    assert not is_valid_pnr("ÄBC123")
    assert not is_valid_pnr(None)
