# -*- coding: utf-8 -*-
"""
Expected lesson count from a course's weekly schedule.

The estimate is only a hint: callers apply it to attendance records whose
count is still exactly 0, never over a deliberate entry.
"""

import calendar

from langschool.billing.constants import BillingMode, CourseType
from langschool.billing.period import validate_period
from langschool.errors import ValidationError

# Sunday=0 .. Saturday=6
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def parse_schedule_days(raw):
    """'1, 3' -> {1, 3}. Empty/None -> empty set."""
    if not raw:
        return set()
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(",") if p.strip()]
    else:
        parts = list(raw)
    days = set()
    for part in parts:
        try:
            day = int(part)
        except (TypeError, ValueError):
            raise ValidationError(f"invalid weekday index: {part!r}")
        if not 0 <= day <= 6:
            raise ValidationError(f"weekday index must be 0 (Sun) .. 6 (Sat), got {day}")
        days.add(day)
    return days


def format_schedule_days(days):
    return ",".join(str(d) for d in sorted(parse_schedule_days(days)))


def count_weekdays(year, month, days):
    """Days in the month whose weekday (Sunday=0) is in ``days``."""
    validate_period(year, month)
    if not days:
        return 0
    last_day = calendar.monthrange(year, month)[1]
    total = 0
    for day in range(1, last_day + 1):
        # date.weekday() is Monday=0; shift to Sunday=0
        if (calendar.weekday(year, month, day) + 1) % 7 in days:
            total += 1
    return total


def estimate(enrollment, course, year, month):
    validate_period(year, month)
    if enrollment.billing_mode != BillingMode.PER_LESSON.value:
        return 0
    if course.type != CourseType.GROUP.value:
        return 0
    return count_weekdays(year, month, parse_schedule_days(course.schedule_days))
