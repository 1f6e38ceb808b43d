# -*- coding: utf-8 -*-
"""
Pydantic schemas for the attendance sheet.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class AttendanceRow(BaseModel):
    enrollment_id: int
    student_id: int
    student_name: str
    course_id: int
    course_name: str
    course_type: str
    lesson_price: Decimal
    discount_pct: Decimal
    count: int
    locked: bool
    hint: int
    record_id: Optional[int] = None

    class Config:
        from_attributes = True


class AttendanceRecordRead(BaseModel):
    id: Optional[int] = None
    enrollment_id: int
    year: int
    month: int
    count: int
    locked: bool

    class Config:
        from_attributes = True


class CountUpdate(BaseModel):
    enrollment_id: int
    year: int
    month: int = Field(..., ge=1, le=12)
    count: int = Field(..., ge=0)


class CountItem(BaseModel):
    enrollment_id: int
    count: int = Field(..., ge=0)


class CountBatch(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    items: List[CountItem]


class PeriodAction(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    course_id: Optional[int] = None


class BatchResultRead(BaseModel):
    changed: int
    skipped_locked: List[int]
    unchanged: int

    class Config:
        from_attributes = True


class LockResult(BaseModel):
    records: int
    locked: bool
