"""Fixed-point helpers for monetary values"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from casino_ledger.domain.exceptions import InvalidArgumentError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest magnitude a Numeric(14, 2) money column can hold
MAX_AMOUNT = Decimal("999999999999.99")

Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidArgumentError(f"Not a monetary amount: {value!r}") from e


def to_money(value: Number) -> Decimal:
    """Convert to a Decimal rounded half-up to cents.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. Use this for computed figures; caller-supplied amounts
    go through parse_money.
    """
    try:
        return _to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidArgumentError(f"Not a monetary amount: {value!r}") from e


def within_range(amount: Decimal, field: str = "amount") -> Decimal:
    """Reject amounts the ledger store cannot hold"""
    if abs(amount) > MAX_AMOUNT:
        raise InvalidArgumentError(f"{field} exceeds the maximum of {MAX_AMOUNT}")
    return amount


def parse_money(value: Number, field: str = "amount") -> Decimal:
    """
    Parse a caller-supplied amount exactly.

    Raises:
        InvalidArgumentError: If the value is not a finite number, has more
            than two decimal places, or is out of storable range
    """
    amount = _to_decimal(value)
    if not amount.is_finite():
        raise InvalidArgumentError(f"{field} must be a finite number")
    within_range(amount, field)
    if amount != amount.quantize(CENT):
        raise InvalidArgumentError(f"{field} cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def positive_money(value: Number, field: str = "amount") -> Decimal:
    """Parse an amount that must be strictly positive"""
    amount = parse_money(value, field)
    if amount <= ZERO:
        raise InvalidArgumentError(f"{field} must be positive")
    return amount
