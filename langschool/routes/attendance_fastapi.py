# -*- coding: utf-8 -*-
"""
FastAPI routes for the monthly attendance sheet.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from langschool.billing.period import period_label
from langschool.database import get_db
from langschool.schemas.attendance import (AttendanceRecordRead, AttendanceRow, BatchResultRead,
                                           CountBatch, CountUpdate, LockResult, PeriodAction)
from langschool.schemas.common import envelope
from langschool.services import attendance

router = APIRouter(
    tags=["Attendance"],
    responses={404: {"description": "Enrollment not found"}},
)


def _batch_notice(result, action):
    message = f"{action}: {result.changed} changed"
    if result.skipped_locked:
        message += f", {len(result.skipped_locked)} locked row(s) skipped"
        return message, "warning"
    return message, "info"


@router.get("", response_model=List[AttendanceRow])
def read_attendance(year: int, month: int, course_id: Optional[int] = None, db: Session = Depends(get_db)):
    return attendance.list_rows(db, year, month, course_id=course_id)


@router.get("/record", response_model=AttendanceRecordRead)
def read_record(student_id: int, course_id: int, year: int, month: int, db: Session = Depends(get_db)):
    return attendance.get_or_init(db, student_id, course_id, year, month)


@router.put("/count")
def set_count(body: CountUpdate, db: Session = Depends(get_db)):
    record = attendance.set_count(db, body.enrollment_id, body.year, body.month, body.count)
    return envelope(AttendanceRecordRead.from_orm(record),
                    f"{record.count} lesson(s) recorded for {period_label(body.year, body.month)}")


@router.put("/counts")
def apply_counts(body: CountBatch, db: Session = Depends(get_db)):
    result = attendance.apply_counts(db, body.year, body.month,
                                     [(item.enrollment_id, item.count) for item in body.items])
    message, level = _batch_notice(result, "Attendance saved")
    return envelope(BatchResultRead.from_orm(result), message, level)


@router.post("/increment")
def bulk_increment(body: PeriodAction, db: Session = Depends(get_db)):
    result = attendance.bulk_increment(db, body.year, body.month, course_id=body.course_id)
    message, level = _batch_notice(result, "+1 lesson")
    return envelope(BatchResultRead.from_orm(result), message, level)


@router.post("/schedule-hint")
def apply_schedule_hint(body: PeriodAction, db: Session = Depends(get_db)):
    result = attendance.apply_schedule_hint(db, body.year, body.month, course_id=body.course_id)
    message, level = _batch_notice(result, "Schedule estimate applied")
    return envelope(BatchResultRead.from_orm(result), message, level)


@router.post("/lock")
def lock_period(body: PeriodAction, db: Session = Depends(get_db)):
    records = attendance.set_locked(db, body.year, body.month, course_id=body.course_id, lock=True)
    return envelope(LockResult(records=records, locked=True),
                    f"{period_label(body.year, body.month)} locked ({records} record(s))")


@router.post("/unlock")
def unlock_period(body: PeriodAction, db: Session = Depends(get_db)):
    records = attendance.set_locked(db, body.year, body.month, course_id=body.course_id, lock=False)
    return envelope(LockResult(records=records, locked=False),
                    f"{period_label(body.year, body.month)} unlocked ({records} record(s))")
