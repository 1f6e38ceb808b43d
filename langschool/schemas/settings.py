# -*- coding: utf-8 -*-
"""
Pydantic schemas for the organization settings.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SettingsRead(BaseModel):
    org_name: str
    address: str
    invoice_prefix: str
    currency: str
    locale: str

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    org_name: Optional[str] = Field(None, max_length=150)
    address: Optional[str] = Field(None, max_length=255)
    invoice_prefix: Optional[str] = Field(None, min_length=1, max_length=10, pattern=r"^[A-Za-z0-9]+$")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    locale: Optional[str] = Field(None, max_length=10)


class BackupRead(BaseModel):
    path: str
