# -*- coding: utf-8 -*-
"""
FastAPI routes for payments and the debtors list.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from langschool.database import get_db
from langschool.schemas.common import envelope
from langschool.schemas.payment import DebtorRead, PaymentCreate, PaymentRead, QuickCash
from langschool.services import payments

router = APIRouter(
    tags=["Payments"],
    responses={404: {"description": "Payment not found"}},
)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_payment(payment: PaymentCreate, db: Session = Depends(get_db)):
    db_payment = payments.create_payment(
        db,
        student_id=payment.student_id,
        invoice_id=payment.invoice_id,
        amount=payment.amount,
        method=payment.method.value,
        paid_at=payment.paid_at,
        note=payment.note,
    )
    return envelope(PaymentRead.from_orm(db_payment), f"Payment of {db_payment.amount} recorded")


@router.post("/quick-cash", status_code=status.HTTP_201_CREATED)
def quick_cash(body: QuickCash, db: Session = Depends(get_db)):
    db_payment = payments.quick_cash(db, body.student_id, body.amount, body.note)
    return envelope(PaymentRead.from_orm(db_payment), f"Cash payment of {db_payment.amount} recorded")


@router.get("/debtors", response_model=List[DebtorRead])
def read_debtors(db: Session = Depends(get_db)):
    return payments.list_debtors(db)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    payments.delete_payment(db, payment_id)
    return None
