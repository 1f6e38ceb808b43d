# -*- coding: utf-8 -*-
"""
Pydantic schemas for Enrollment and PriceOverride.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from langschool.billing.constants import BillingMode


class EnrollmentCreate(BaseModel):
    student_id: int
    course_id: int
    billing_mode: BillingMode
    # Out-of-range values are clamped to 0..100, not rejected
    discount_pct: Decimal = Decimal("0")
    note: Optional[str] = Field("", max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class EnrollmentUpdate(BaseModel):
    billing_mode: Optional[BillingMode] = None
    discount_pct: Optional[Decimal] = None
    note: Optional[str] = Field(None, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class EnrollmentRead(BaseModel):
    id: int
    student_id: int
    course_id: int
    billing_mode: str
    discount_pct: Decimal
    note: Optional[str] = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    student_name: Optional[str] = None
    course_name: Optional[str] = None

    class Config:
        from_attributes = True


class PriceOverrideCreate(BaseModel):
    valid_from: date
    valid_to: Optional[date] = None
    lesson_price: Optional[Decimal] = Field(None, ge=0)
    subscription_price: Optional[Decimal] = Field(None, ge=0)


class PriceOverrideRead(PriceOverrideCreate):
    id: int
    enrollment_id: int

    class Config:
        from_attributes = True
