# -*- coding: utf-8 -*-
"""
Pydantic schemas for payments and debt views.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from langschool.billing.constants import PaymentMethod


class PaymentCreate(BaseModel):
    student_id: int
    invoice_id: Optional[int] = None
    # Checked by the service so a non-positive amount is reported as InvalidAmount
    amount: Decimal
    method: PaymentMethod = PaymentMethod.CASH
    paid_at: Optional[date] = None
    note: Optional[str] = Field("", max_length=255)


class QuickCash(BaseModel):
    student_id: int
    amount: Decimal
    note: Optional[str] = Field("", max_length=255)


class PaymentRead(BaseModel):
    id: int
    student_id: int
    invoice_id: Optional[int] = None
    amount: Decimal
    method: str
    paid_at: date
    note: Optional[str] = ""
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvoiceSummaryRead(BaseModel):
    invoice_id: int
    number: Optional[str] = None
    status: str
    total: Decimal
    paid: Decimal
    remaining: Decimal

    class Config:
        from_attributes = True


class BalanceRead(BaseModel):
    student_id: int
    student_name: str
    total_invoiced: Decimal
    total_paid: Decimal
    balance: Decimal
    debt: Decimal

    class Config:
        from_attributes = True


class DebtorRead(BalanceRead):
    pass
