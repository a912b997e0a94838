"""Date manipulation utilities"""

import calendar
from datetime import datetime, timedelta


def add_days(from_dt: datetime, days: int) -> datetime:
    return from_dt + timedelta(days=days)


def add_months(from_dt: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month"""
    month_index = from_dt.month - 1 + months
    year = from_dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_dt.day, calendar.monthrange(year, month)[1])
    return from_dt.replace(year=year, month=month, day=day)
