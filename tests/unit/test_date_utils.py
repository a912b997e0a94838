"""Unit tests for calendar month arithmetic"""

from datetime import datetime
from casino_ledger.utils.date_utils import add_days, add_months


def test_add_months_simple():
    assert add_months(datetime(2024, 5, 20), 1) == datetime(2024, 6, 20)


def test_add_months_crosses_year():
    assert add_months(datetime(2024, 11, 3), 6) == datetime(2025, 5, 3)


def test_add_months_clamps_to_month_end():
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert add_months(datetime(2023, 1, 31), 1) == datetime(2023, 2, 28)
    assert add_months(datetime(2024, 8, 31), 1) == datetime(2024, 9, 30)


def test_add_days():
    assert add_days(datetime(2024, 12, 28), 7) == datetime(2025, 1, 4)
