# -*- coding: utf-8 -*-
"""
Pydantic schemas for the Course entity.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from langschool.billing.constants import CourseType
from langschool.errors import ValidationError
from langschool.services.schedule import parse_schedule_days


def _days(v):
    # stored as "1,3"; sent by clients as [1, 3]
    try:
        return sorted(parse_schedule_days(v))
    except ValidationError as e:
        raise ValueError(e.message)


class CourseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: CourseType = CourseType.GROUP
    lesson_price: Decimal = Field(Decimal("0"), ge=0)
    subscription_price: Decimal = Field(Decimal("0"), ge=0)
    schedule_days: List[int] = []

    @validator("schedule_days", pre=True)
    def parse_days(cls, v):
        return _days(v)


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[CourseType] = None
    lesson_price: Optional[Decimal] = Field(None, ge=0)
    subscription_price: Optional[Decimal] = Field(None, ge=0)
    schedule_days: Optional[List[int]] = None
    is_active: Optional[bool] = None

    @validator("schedule_days", pre=True)
    def parse_days_update(cls, v):
        if v is None:
            return None
        return _days(v)


class CourseRead(CourseBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True
