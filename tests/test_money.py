"""Tests for money helpers"""
from decimal import Decimal

import pytest

from rocketcart.services.money import format_money, multiply, parse_decimal, round_money, to_decimal


def test_to_decimal_from_float_keeps_precision():
    assert to_decimal(0.1) == Decimal("0.1")


def test_to_decimal_invalid_values():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("abc") == Decimal("0")


def test_round_money_half_up():
    assert round_money("2.345") == Decimal("2.35")


def test_multiply():
    assert multiply("139.90", 3) == Decimal("419.70")


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money("10", currency_symbol="R$ ") == "R$ 10.00"


def test_parse_decimal():
    assert parse_decimal(179.9) == Decimal("179.9")
    assert parse_decimal("139.90") == Decimal("139.90")
    assert parse_decimal(5) == Decimal("5")


@pytest.mark.parametrize("value", [None, True, "abc", "", "NaN", "sNaN", "Infinity", float("inf"), Decimal("NaN")])
def test_parse_decimal_rejects_unusable_values(value):
    """Unlike to_decimal, bad input is an error rather than zero"""
    with pytest.raises(ValueError):
        parse_decimal(value)
