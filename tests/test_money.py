from decimal import Decimal

import pytest

from atlas_finance.money import (
    format_cents,
    natural_amount,
    parse_amount_cents,
    round_tenths,
    signed_cents,
    to_units,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1500.00", 150000),
        ("-99.00", -9900),
        ("$1,234.56", 123456),
        ("  42 ", 4200),
        ("12.345", 1235),  # half-up
        ("0.005", 1),
        (".5", 50),
        ("10abc", 1000),
        ("1e3", 1300),  # letters are stripped before parsing
        ("abc", None),
        ("", None),
        ("-", None),
        (None, None),
    ],
)
def test_parse_amount_cents(raw, expected):
    assert parse_amount_cents(raw) == expected


def test_format_and_units():
    assert format_cents(150000) == "1500.00"
    assert format_cents(-9900) == "-99.00"
    assert format_cents(5) == "0.05"
    assert to_units(140100) == Decimal("1401.00")


def test_natural_amount_drops_trailing_zeros_and_sign():
    assert natural_amount(150000) == "1500"
    assert natural_amount(-9900) == "99"
    assert natural_amount(9950) == "99.5"
    assert natural_amount(1234) == "12.34"
    assert natural_amount(5) == "0.05"
    assert natural_amount(0) == "0"


def test_signed_cents_follows_type():
    assert signed_cents(-500, income=True) == 500
    assert signed_cents(500, income=False) == -500
    assert signed_cents(0, income=False) == 0


def test_round_tenths_half_up():
    assert round_tenths(140100 / 9900) == 14.2
    assert round_tenths(0.04) == 0.0
    assert round_tenths(2.25) == 2.3
