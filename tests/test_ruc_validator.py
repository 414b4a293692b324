import pytest

from app.domain.services.ruc_validator import is_valid_ruc


def test_known_company_ruc_is_valid():
    assert is_valid_ruc("20100055237") is True
    assert is_valid_ruc("20131312955") is True


def test_wrong_check_digit_is_rejected():
    assert is_valid_ruc("12345678901") is False
    assert is_valid_ruc("20100055236") is False


def test_remainder_below_two_uses_zero_as_check_digit():
    # Suma ponderada 11 (resto 0) y 12 (resto 1)
    assert is_valid_ruc("10000100000") is True
    assert is_valid_ruc("10001000000") is True
    assert is_valid_ruc("10001000001") is False


@pytest.mark.parametrize(
    "value",
    ["", "2010005523", "201000552377", "2010005523A", " 20100055237", "20100-55237", "２０１００055237", None, 20100055237],
)
def test_malformed_input_returns_false(value):
    assert is_valid_ruc(value) is False
