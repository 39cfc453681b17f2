"""Tests for the seeded hash, generator and shuffle."""

import pytest

from quizbank.engine.rng import ensure_seed, hash_seed, mulberry32, shuffle_with_rng


def test_hash_seed_matches_fnv1a_reference():
    assert hash_seed("") == 2166136261
    assert hash_seed("a") == 0xE40C292C
    assert hash_seed("seed") == 1346747564
    assert hash_seed("solana") == 576988753


def test_hash_seed_uses_utf16_code_units():
    # The emoji is a surrogate pair and hashes as two units.
    assert hash_seed("é🙂") == 46917051


def test_mulberry32_reference_sequence():
    rng = mulberry32(hash_seed("seed"))
    expected = [0.9498909888789058, 0.07608804851770401, 0.026259300531819463]
    assert [rng() for _ in range(3)] == pytest.approx(expected, abs=1e-15)

    zero = mulberry32(0)
    assert zero() == pytest.approx(0.26642920868471265, abs=1e-15)
    assert zero() == pytest.approx(0.0003297457005828619, abs=1e-15)


def test_mulberry32_state_wraps_at_32_bits():
    rng = mulberry32(hash_seed("x"))
    value = None
    for _ in range(100000):
        value = rng()
    assert value == pytest.approx(0.9610386302229017, abs=1e-15)


def test_mulberry32_range():
    rng = mulberry32(12345)
    values = [rng() for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)


def test_shuffle_reference_order():
    items = list("abcdefghij")
    out = shuffle_with_rng(items, mulberry32(hash_seed("solana")))
    assert out == ["a", "d", "j", "i", "g", "e", "f", "c", "h", "b"]
    # Input is left untouched
    assert items == list("abcdefghij")


def test_shuffle_small_inputs():
    rng = mulberry32(1)
    assert shuffle_with_rng([], rng) == []
    assert shuffle_with_rng(["only"], rng) == ["only"]


def test_ensure_seed():
    assert ensure_seed("  week-1 ") == "week-1"
    generated = ensure_seed("   ")
    assert len(generated) == 8
    assert ensure_seed(None) != ensure_seed(None)
