# -*- coding: utf-8 -*-
"""
Pydantic schemas for the Student entity.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, validator


class StudentBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field("", max_length=30)
    email: Optional[EmailStr] = None
    note: Optional[str] = Field("", max_length=255)

    @validator("full_name")
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("full_name must not be blank")
        return v

    @validator("email", pre=True)
    def empty_str_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    note: Optional[str] = Field(None, max_length=255)

    @validator("email", pre=True)
    def empty_str_to_none_update(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


class StudentRead(BaseModel):
    id: int
    full_name: str
    phone: Optional[str] = ""
    email: Optional[str] = ""
    note: Optional[str] = ""
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
