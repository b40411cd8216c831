"""
Tests for code generation and comparison.
"""

from collections import Counter

import pytest

from otp_auth.domain.codes import generate_code, codes_match


def test_generated_codes_are_six_digits():
    for _ in range(1000):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()


def test_leading_zeros_are_kept(monkeypatch):
    monkeypatch.setattr("otp_auth.domain.codes.secrets.randbelow", lambda n: 42)
    assert generate_code() == "000042"


def test_custom_length():
    assert len(generate_code(8)) == 8


def test_invalid_length():
    with pytest.raises(ValueError):
        generate_code(0)


def test_first_digit_distribution_is_roughly_uniform():
    counts = Counter(generate_code()[0] for _ in range(10000))
    assert set(counts) == set("0123456789")
    # Expected 1000 per digit; bounds are far outside normal variation
    assert all(700 < n < 1300 for n in counts.values())


def test_codes_match():
    assert codes_match("012345", "012345")
    assert not codes_match("012345", "012346")


def test_codes_of_different_length_do_not_match():
    assert not codes_match("012345", "01234")
    assert not codes_match("012345", "0123456")


def test_none_never_matches():
    assert not codes_match("012345", None)
    assert not codes_match(None, "012345")
