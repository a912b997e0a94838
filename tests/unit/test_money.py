"""Unit tests for monetary parsing"""

import pytest
from decimal import Decimal
from casino_ledger.utils.money import MAX_AMOUNT, parse_money, positive_money, to_money, within_range
from casino_ledger.domain.exceptions import InvalidArgumentError


def test_float_converts_through_str():
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(19.999) == Decimal("20.00")


def test_rounds_half_up():
    assert to_money("2.005") == Decimal("2.01")


def test_garbage_rejected():
    with pytest.raises(InvalidArgumentError):
        to_money("ten")


@pytest.mark.parametrize("value", [0, "-5", "0.004"])
def test_positive_money_rejects_non_positive(value):
    with pytest.raises(InvalidArgumentError):
        positive_money(value)


def test_parse_money_keeps_exact_cents():
    assert parse_money("10.50") == Decimal("10.50")
    assert parse_money("10.000") == Decimal("10.00")
    assert parse_money(7) == Decimal("7.00")


@pytest.mark.parametrize("value", ["10.005", "0.001", 10.005])
def test_parse_money_rejects_sub_cent_precision(value):
    with pytest.raises(InvalidArgumentError):
        parse_money(value)


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
def test_parse_money_rejects_non_finite(value):
    with pytest.raises(InvalidArgumentError):
        parse_money(value)


@pytest.mark.parametrize("value", ["1000000000000.00", "-1000000000000", "1e30"])
def test_parse_money_rejects_amounts_beyond_column_range(value):
    with pytest.raises(InvalidArgumentError):
        parse_money(value)


def test_parse_money_accepts_largest_storable_amount():
    assert parse_money(str(MAX_AMOUNT)) == MAX_AMOUNT


def test_within_range_checks_magnitude():
    assert within_range(Decimal("-999999999999.99")) == Decimal("-999999999999.99")
    with pytest.raises(InvalidArgumentError):
        within_range(Decimal("1000000000000.00"), "total_cost")
