# -*- coding: utf-8 -*-
"""
Pydantic schemas for invoices, issuance and draft generation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class PeriodRequest(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)


class InvoiceLineRead(BaseModel):
    id: int
    enrollment_id: int
    description: str
    qty: int
    unit_price: Decimal
    discount_pct: Decimal
    amount: Decimal

    class Config:
        from_attributes = True


class InvoiceListItem(BaseModel):
    id: int
    student_id: int
    student_name: str
    year: int
    month: int
    status: str
    number: Optional[str] = None
    total: Decimal
    issued_at: Optional[date] = None
    lines_count: int


class InvoiceRead(BaseModel):
    id: int
    student_id: int
    year: int
    month: int
    status: str
    number: Optional[str] = None
    total: Decimal
    issued_at: Optional[date] = None
    canceled_from: Optional[str] = None
    reopened: bool = False
    created_at: Optional[datetime] = None
    lines: List[InvoiceLineRead] = []

    class Config:
        from_attributes = True


class GenerateResultRead(BaseModel):
    created: int
    updated: int
    skipped_has_invoice: int
    skipped_no_lines: int

    class Config:
        from_attributes = True


class IssueResultRead(BaseModel):
    invoice_id: int
    number: str
    pdf_path: str

    class Config:
        from_attributes = True


class IssueErrorRead(BaseModel):
    invoice_id: int
    kind: str
    message: str
    number: Optional[str] = None

    class Config:
        from_attributes = True


class IssueAllResultRead(BaseModel):
    count: int
    pdf_paths: List[str]
    numbers: List[str]
    errors: List[IssueErrorRead]

    class Config:
        from_attributes = True


class PdfPathRead(BaseModel):
    invoice_id: int
    pdf_path: str
