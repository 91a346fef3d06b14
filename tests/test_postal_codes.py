import pytest

from src.fitbox.errors import InvalidPostalCodeError
from src.fitbox.models.domain import PostalCode
from src.fitbox.services.delivery.postal_codes import (
    is_valid_postal_code,
    normalize_postal_code,
    normalize_prefix,
    postal_code_prefix,
)


@pytest.mark.parametrize("raw", ["v6b1a1", "V6B 1A1", "V6B  1A1", " V6B 1A1 ", "v6B\t1a1"])
def test_normalize_accepts_spacing_and_case_variants(raw):
    assert normalize_postal_code(raw) == PostalCode("V6B 1A1")


@pytest.mark.parametrize("raw", ["v6b1a1", "K1A 0A1", "m5v3l9", "H2X 1Y4"])
def test_normalize_is_idempotent(raw):
    once = normalize_postal_code(raw)
    assert normalize_postal_code(once.value) == once
    assert normalize_postal_code(once) is once


@pytest.mark.parametrize(
    "raw",
    [
        "12345",  # US zip
        "",
        "V6B",
        "V6B 1A1 X",
        "D6B 1A1",  # D never issued
        "W6B 1A1",  # W not a province letter
        "Z6B 1A1",
        "V6O 1A1",  # O not allowed in the third position
        "V6B 1Q1",  # Q not allowed in the fifth position
        "VVB 1A1",
        "V\u0666B 1A1",  # Arabic-Indic digit
        "V6B 1A\uff11",  # fullwidth digit
    ],
)
def test_normalize_rejects_malformed_codes(raw):
    with pytest.raises(InvalidPostalCodeError):
        normalize_postal_code(raw)


def test_invalid_postal_code_error_is_a_value_error():
    with pytest.raises(ValueError) as excinfo:
        normalize_postal_code("12345")
    assert "A1A 1A1" in str(excinfo.value)
    assert excinfo.value.raw == "12345"


def test_third_and_fifth_letters_allow_w_and_z():
    assert normalize_postal_code("t2w 1z1").value == "T2W 1Z1"


def test_prefix_returns_fsa():
    code = normalize_postal_code("k1a0a1")
    assert postal_code_prefix(code) == "K1A"
    assert code.compact == "K1A0A1"
    assert str(code) == "K1A 0A1"


def test_normalize_prefix():
    assert normalize_prefix(" v6b ") == "V6B"
    with pytest.raises(InvalidPostalCodeError):
        normalize_prefix("V6B1")
    with pytest.raises(InvalidPostalCodeError):
        normalize_prefix("V\u0666B")


def test_is_valid_postal_code():
    assert is_valid_postal_code("V6B 1A1")
    assert not is_valid_postal_code("12345")
