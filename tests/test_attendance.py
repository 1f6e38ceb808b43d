from datetime import date

import pytest

from langschool.errors import InvalidPeriod, LockedPeriod, NotFound
from langschool.models.attendance import AttendanceRecord
from langschool.services import attendance, registry


@pytest.fixture
def group(make_student, make_course, make_enrollment):
    course = make_course(schedule_days="1,3")
    anna = make_enrollment(make_student("Anna"), course)
    boris = make_enrollment(make_student("Boris"), course)
    return course, anna, boris


def _count(db, enrollment_id, year=2024, month=3):
    record = db.query(AttendanceRecord).filter_by(enrollment_id=enrollment_id, year=year, month=month).first()
    return record.count if record else None


def test_get_or_init_does_not_persist(db, group, make_student):
    course, anna, _ = group
    record = attendance.get_or_init(db, anna.student_id, course.id, 2024, 3)
    assert (record.id, record.count, record.locked) == (None, 0, False)
    assert db.query(AttendanceRecord).count() == 0

    with pytest.raises(NotFound):
        attendance.get_or_init(db, make_student("Nobody").id, course.id, 2024, 3)


def test_set_count_clamps_and_validates(db, group):
    _, anna, _ = group
    attendance.set_count(db, anna.id, 2024, 3, 4)
    assert _count(db, anna.id) == 4
    attendance.set_count(db, anna.id, 2024, 3, -2)
    assert _count(db, anna.id) == 0

    with pytest.raises(InvalidPeriod):
        attendance.set_count(db, anna.id, 2024, 13, 1)
    with pytest.raises(NotFound):
        attendance.set_count(db, 9999, 2024, 3, 1)


def test_lock_enforcement(db, group):
    course, anna, boris = group
    attendance.set_count(db, anna.id, 2024, 3, 2)

    locked = attendance.set_locked(db, 2024, 3, course_id=course.id, lock=True)
    # Boris had no record yet; locking creates it
    assert locked == 2
    with pytest.raises(LockedPeriod):
        attendance.set_count(db, anna.id, 2024, 3, 5)
    with pytest.raises(LockedPeriod):
        attendance.set_count(db, boris.id, 2024, 3, 5)
    assert _count(db, anna.id) == 2

    attendance.set_locked(db, 2024, 3, course_id=course.id, lock=False)
    attendance.set_count(db, anna.id, 2024, 3, 5)
    assert _count(db, anna.id) == 5


def test_lock_is_per_period(db, group):
    course, anna, _ = group
    attendance.set_locked(db, 2024, 3, course_id=course.id)
    attendance.set_count(db, anna.id, 2024, 4, 3)
    assert _count(db, anna.id, month=4) == 3


def test_bulk_increment_skips_locked(db, group):
    _, anna, boris = group
    attendance.set_count(db, anna.id, 2024, 3, 1)
    record = db.query(AttendanceRecord).filter_by(enrollment_id=anna.id).one()
    record.locked = True
    db.commit()

    result = attendance.bulk_increment(db, 2024, 3)
    assert result.changed == 1
    assert result.skipped_locked == [anna.id]
    assert _count(db, anna.id) == 1
    assert _count(db, boris.id) == 1


def test_bulk_increment_ignores_subscriptions_and_inactive(db, make_student, make_course, make_enrollment):
    course = make_course()
    sub = make_enrollment(make_student("Sub"), course, billing_mode="subscription")
    ended = make_enrollment(make_student("Ended"), course, end_date=date(2024, 2, 29))
    gone = make_enrollment(make_student("Gone"), course)
    registry.set_student_active(db, gone.student_id, False)

    result = attendance.bulk_increment(db, 2024, 3)
    assert result.changed == 0
    for enrollment in (sub, ended, gone):
        assert _count(db, enrollment.id) is None


def test_apply_counts_only_if_zero(db, group):
    _, anna, boris = group
    attendance.set_count(db, anna.id, 2024, 3, 2)

    result = attendance.apply_counts(db, 2024, 3, [(anna.id, 8), (boris.id, 8)], only_if_zero=True)
    assert result.changed == 1
    assert result.unchanged == 1
    assert _count(db, anna.id) == 2
    assert _count(db, boris.id) == 8


def test_schedule_hint_fills_zero_counts_only(db, group):
    course, anna, boris = group
    attendance.set_count(db, anna.id, 2024, 3, 3)

    result = attendance.apply_schedule_hint(db, 2024, 3, course_id=course.id)
    assert result.changed == 1
    assert _count(db, anna.id) == 3
    assert _count(db, boris.id) == 8  # Mondays + Wednesdays in March 2024


def test_list_rows(db, group, make_course, make_student, make_enrollment):
    course, anna, boris = group
    other = make_course(name="Algebra", schedule_days="")
    make_enrollment(make_student("Zoe"), other)
    attendance.set_count(db, boris.id, 2024, 3, 6)

    rows = attendance.list_rows(db, 2024, 3)
    assert [(r.course_name, r.student_name) for r in rows] == [
        ("Algebra", "Zoe"),
        ("English B1", "Anna"),
        ("English B1", "Boris"),
    ]
    boris_row = rows[2]
    assert (boris_row.count, boris_row.locked, boris_row.hint) == (6, False, 8)
    assert len(attendance.list_rows(db, 2024, 3, course_id=other.id)) == 1


def test_apply_counts_rejects_unknown_enrollment(db, group):
    _, anna, _ = group
    with pytest.raises(NotFound):
        attendance.apply_counts(db, 2024, 3, [(anna.id, 4), (9999, 4)])
    assert _count(db, anna.id) is None
    assert db.query(AttendanceRecord).count() == 0
