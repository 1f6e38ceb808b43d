from types import SimpleNamespace

import pytest

from langschool.errors import InvalidPeriod, ValidationError
from langschool.services.schedule import count_weekdays, estimate, format_schedule_days, parse_schedule_days


def _pair(billing_mode="per_lesson", type="group", schedule_days="1,3"):
    enrollment = SimpleNamespace(billing_mode=billing_mode)
    course = SimpleNamespace(type=type, schedule_days=schedule_days)
    return enrollment, course


def test_parse_and_format():
    assert parse_schedule_days(" 3, 1,,1 ") == {1, 3}
    assert parse_schedule_days("") == set()
    assert parse_schedule_days(None) == set()
    assert format_schedule_days([3, 1]) == "1,3"


@pytest.mark.parametrize("raw", ["7", "-1", "mon"])
def test_parse_rejects_bad_days(raw):
    with pytest.raises(ValidationError):
        parse_schedule_days(raw)


def test_count_weekdays_march_2024():
    # 1 March 2024 is a Friday
    assert count_weekdays(2024, 3, {1}) == 4      # Mondays
    assert count_weekdays(2024, 3, {1, 3}) == 8   # Mon + Wed
    assert count_weekdays(2024, 3, {0}) == 5      # Sundays: 3, 10, 17, 24, 31
    assert count_weekdays(2024, 3, {5, 6}) == 10  # Fri + Sat
    assert count_weekdays(2024, 3, set()) == 0


def test_count_weekdays_leap_february():
    assert count_weekdays(2024, 2, {4}) == 5  # Thursdays, 29 Feb included


def test_estimate_only_for_per_lesson_group():
    assert estimate(*_pair(), 2024, 3) == 8
    assert estimate(*_pair(billing_mode="subscription"), 2024, 3) == 0
    assert estimate(*_pair(type="individual"), 2024, 3) == 0
    assert estimate(*_pair(schedule_days=""), 2024, 3) == 0


def test_estimate_rejects_bad_period():
    with pytest.raises(InvalidPeriod):
        estimate(*_pair(), 2024, 13)
