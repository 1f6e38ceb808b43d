# -*- coding: utf-8 -*-
"""
Billing periods are (year, month) pairs.
"""

import calendar
from datetime import date

from langschool.errors import InvalidPeriod


def validate_period(year, month):
    if not isinstance(year, int) or not isinstance(month, int):
        raise InvalidPeriod(f"invalid period {year!r}-{month!r}")
    if not 1 <= month <= 12:
        raise InvalidPeriod(f"month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidPeriod(f"year out of range: {year}")


def period_bounds(year, month):
    """First and last day of the month."""
    validate_period(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def period_label(year, month):
    return f"{month:02d}.{year}"
