# -*- coding: utf-8 -*-
"""
Attendance ledger: lesson counts per (enrollment, year, month).

Every write path ends in ``apply_counts`` or ``set_count``, which are the only
places that check the lock flag. The ledger never touches invoices.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from langschool.billing.constants import BillingMode
from langschool.billing.period import validate_period
from langschool.errors import LockedPeriod, NotFound
from langschool.locks import serialized
from langschool.models.attendance import AttendanceRecord
from langschool.models.enrollment import Enrollment
from langschool.services import schedule
from langschool.services.registry import active_enrollments, get_or_raise, is_active_in_period


@dataclass
class BatchResult:
    changed: int = 0
    skipped_locked: List[int] = field(default_factory=list)  # enrollment ids
    unchanged: int = 0


def _find(db, enrollment_id, year, month):
    return db.query(AttendanceRecord).filter(
        AttendanceRecord.enrollment_id == enrollment_id,
        AttendanceRecord.year == year,
        AttendanceRecord.month == month,
    ).first()


def _find_many(db, enrollment_ids, year, month):
    if not enrollment_ids:
        return {}
    records = db.query(AttendanceRecord).filter(
        AttendanceRecord.enrollment_id.in_(enrollment_ids),
        AttendanceRecord.year == year,
        AttendanceRecord.month == month,
    ).all()
    return {r.enrollment_id: r for r in records}


def _get_or_create(db, existing, enrollment_id, year, month):
    record = existing.get(enrollment_id)
    if record is None:
        record = AttendanceRecord(enrollment_id=enrollment_id, year=year, month=month, count=0, locked=False)
        db.add(record)
        existing[enrollment_id] = record
    return record


def clamp_count(n):
    return max(0, int(n or 0))


def get_or_init(db, student_id, course_id, year, month):
    """Stored record for the student's enrollment in the course, or an unsaved zero one."""
    validate_period(year, month)
    enrollments = db.query(Enrollment).filter(
        Enrollment.student_id == student_id,
        Enrollment.course_id == course_id,
    ).order_by(Enrollment.id.desc()).all()
    enrollment = next((e for e in enrollments if is_active_in_period(e, year, month)), None)
    if enrollment is None:
        raise NotFound("Enrollment", f"student={student_id} course={course_id} {month:02d}.{year}")

    record = _find(db, enrollment.id, year, month)
    if record is None:
        # Not added to the session: nothing is persisted until the first write
        record = AttendanceRecord(enrollment_id=enrollment.id, year=year, month=month, count=0, locked=False)
    return record


@serialized
def set_count(db, enrollment_id, year, month, n):
    validate_period(year, month)
    get_or_raise(db, Enrollment, enrollment_id)

    record = _find(db, enrollment_id, year, month)
    if record is not None and record.locked:
        raise LockedPeriod(enrollment_id, year, month)
    if record is None:
        record = AttendanceRecord(enrollment_id=enrollment_id, year=year, month=month, locked=False)
        db.add(record)
    record.count = clamp_count(n)
    db.commit()
    db.refresh(record)
    return record


@serialized
def apply_counts(db, year, month, updates, only_if_zero=False):
    """
    Writes a batch of (enrollment_id, new_count) pairs in one transaction.

    Locked records are skipped and reported; with ``only_if_zero`` records that
    already hold a non-zero count are left as they are.
    """
    validate_period(year, month)
    updates = [(int(eid), clamp_count(n)) for eid, n in updates]
    ids = {eid for eid, _ in updates}
    if ids:
        known = {row.id for row in db.query(Enrollment.id).filter(Enrollment.id.in_(ids)).all()}
        missing = sorted(ids - known)
        if missing:
            raise NotFound("Enrollment", missing[0])
    existing = _find_many(db, [eid for eid, _ in updates], year, month)

    result = BatchResult()
    for enrollment_id, new_count in updates:
        record = existing.get(enrollment_id)
        if record is not None and record.locked:
            result.skipped_locked.append(enrollment_id)
            continue
        if only_if_zero and record is not None and record.count != 0:
            result.unchanged += 1
            continue
        record = _get_or_create(db, existing, enrollment_id, year, month)
        if record.count == new_count and record.id is not None:
            result.unchanged += 1
            continue
        record.count = new_count
        result.changed += 1
    db.commit()
    return result


@serialized
def bulk_increment(db, year, month, course_id=None):
    """+1 lesson for every active per-lesson enrollment matching the filter."""
    enrollments = active_enrollments(db, year, month, BillingMode.PER_LESSON, course_id=course_id)
    existing = _find_many(db, [e.id for e in enrollments], year, month)
    updates = []
    for enrollment in enrollments:
        record = existing.get(enrollment.id)
        current = record.count if record is not None else 0
        updates.append((enrollment.id, current + 1))
    result = apply_counts(db, year, month, updates)
    logging.info(f"Attendance +1 for {month:02d}.{year} course={course_id}: "
                 f"{result.changed} changed, {len(result.skipped_locked)} locked")
    return result


@serialized
def apply_schedule_hint(db, year, month, course_id=None):
    """Fills zero counts with the schedule estimate."""
    enrollments = active_enrollments(db, year, month, BillingMode.PER_LESSON, course_id=course_id)
    updates = []
    for enrollment in enrollments:
        hint = schedule.estimate(enrollment, enrollment.course, year, month)
        if hint > 0:
            updates.append((enrollment.id, hint))
    return apply_counts(db, year, month, updates, only_if_zero=True)


@serialized
def set_locked(db, year, month, course_id=None, lock=True):
    """
    Locks or unlocks every matching record. Missing records of active
    per-lesson enrollments are created first so a locked period has no
    editable gaps. Counts are never touched. Returns the number of records.
    """
    validate_period(year, month)
    enrollments = active_enrollments(db, year, month, BillingMode.PER_LESSON, course_id=course_id)
    existing = _find_many(db, [e.id for e in enrollments], year, month)
    for enrollment in enrollments:
        _get_or_create(db, existing, enrollment.id, year, month)
    db.flush()

    # Records of enrollments that are no longer active still belong to the period
    query = db.query(AttendanceRecord).filter(
        AttendanceRecord.year == year,
        AttendanceRecord.month == month,
    )
    if course_id:
        query = query.join(Enrollment).filter(Enrollment.course_id == course_id)
    records = query.all()
    for record in records:
        record.locked = bool(lock)
    db.commit()
    logging.info(f"Attendance {'locked' if lock else 'unlocked'} for {month:02d}.{year} "
                 f"course={course_id}: {len(records)} record(s)")
    return len(records)


@dataclass
class AttendanceRowData:
    enrollment_id: int
    student_id: int
    student_name: str
    course_id: int
    course_name: str
    course_type: str
    lesson_price: object
    discount_pct: object
    count: int
    locked: bool
    hint: int
    record_id: Optional[int] = None


def list_rows(db, year, month, course_id=None):
    """Display rows for the attendance sheet, one per active per-lesson enrollment."""
    enrollments = active_enrollments(db, year, month, BillingMode.PER_LESSON, course_id=course_id)
    existing = _find_many(db, [e.id for e in enrollments], year, month)
    rows = []
    for enrollment in enrollments:
        record = existing.get(enrollment.id)
        course = enrollment.course
        rows.append(AttendanceRowData(
            enrollment_id=enrollment.id,
            student_id=enrollment.student_id,
            student_name=enrollment.student.full_name,
            course_id=course.id,
            course_name=course.name,
            course_type=course.type,
            lesson_price=course.lesson_price,
            discount_pct=enrollment.discount_pct,
            count=record.count if record else 0,
            locked=record.locked if record else False,
            hint=schedule.estimate(enrollment, course, year, month),
            record_id=record.id if record else None,
        ))
    rows.sort(key=lambda r: (r.course_name.lower(), r.student_name.lower()))
    return rows
