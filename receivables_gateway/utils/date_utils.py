"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def add_one_month(from_date: date) -> date:
    """Same day next month, clamped to the last day when it does not exist (Jan 31 -> Feb 28/29)"""
    year = from_date.year + from_date.month // 12
    month = from_date.month % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(from_date.day, last_day))
