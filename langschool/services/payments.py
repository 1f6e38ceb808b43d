# -*- coding: utf-8 -*-
"""
Payment ledger and debt figures.

Payments are immutable; a reversal is a delete. Every payment write
recomputes the status of the invoice it is linked to, so ``paid`` always
means "payments cover the total" and never lags behind the ledger.

    balance = total_paid - total_invoiced      (issued + paid invoices)
    debt    = max(0, -balance)
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func

from langschool.billing.constants import PaymentMethod
from langschool.billing.money import ZERO, round2, to_decimal
from langschool.billing.status import InvoiceStatus
from langschool.errors import InvalidAmount, ValidationError
from langschool.locks import serialized
from langschool.models.invoice import Invoice
from langschool.models.payment import Payment
from langschool.models.student import Student
from langschool.services.registry import get_or_raise

DEBT_STATUSES = tuple(s.value for s in InvoiceStatus if s.counts_as_debt)


@dataclass
class InvoiceSummary:
    invoice_id: int
    number: str
    status: str
    total: Decimal
    paid: Decimal
    remaining: Decimal


@dataclass
class StudentBalance:
    student_id: int
    student_name: str
    total_invoiced: Decimal
    total_paid: Decimal
    balance: Decimal
    debt: Decimal


# --- Sums ---

def _paid_for_invoice(db, invoice_id):
    paid = db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
        Payment.invoice_id == invoice_id
    ).scalar()
    return round2(paid)


def _invoiced_by_student(db):
    rows = db.query(Invoice.student_id, func.sum(Invoice.total)).filter(
        Invoice.status.in_(DEBT_STATUSES)
    ).group_by(Invoice.student_id).all()
    return {student_id: round2(total) for student_id, total in rows}


def _paid_by_student(db):
    rows = db.query(Payment.student_id, func.sum(Payment.amount)).group_by(Payment.student_id).all()
    return {student_id: round2(total) for student_id, total in rows}


def _balance(student, invoiced, paid):
    balance = round2(paid - invoiced)
    return StudentBalance(
        student_id=student.id,
        student_name=student.full_name,
        total_invoiced=invoiced,
        total_paid=paid,
        balance=balance,
        debt=max(ZERO, -balance),
    )


# --- Status ---

def recompute_invoice_status(db, invoice_id):
    """issued <-> paid from the payments on file; drafts and canceled invoices stay as they are."""
    invoice = get_or_raise(db, Invoice, invoice_id)
    state = invoice.state
    if not state.counts_as_debt:
        return invoice

    covered = _paid_for_invoice(db, invoice_id) >= to_decimal(invoice.total)
    target = InvoiceStatus.PAID if covered else InvoiceStatus.ISSUED
    if target is not state:
        invoice.status = state.transition(target).value
        logging.info(f"Invoice {invoice.number} is now {target.value}")
    return invoice


# --- Payments ---

@serialized
def create_payment(db, student_id, invoice_id, amount, method, paid_at=None, note=""):
    try:
        amount = round2(amount)
    except ArithmeticError:
        raise InvalidAmount(f"invalid amount: {amount!r}")
    if not amount.is_finite():
        raise InvalidAmount(f"invalid amount: {amount}")
    if amount <= 0:
        raise InvalidAmount("amount must be greater than 0")
    try:
        method = PaymentMethod(method).value
    except ValueError:
        raise ValidationError("method must be 'cash' or 'bank'")

    get_or_raise(db, Student, student_id)
    if invoice_id is not None:
        invoice = get_or_raise(db, Invoice, invoice_id)
        if invoice.student_id != student_id:
            raise ValidationError(f"invoice {invoice_id} belongs to another student")
        if not invoice.state.counts_as_debt:
            raise ValidationError(f"cannot pay a {invoice.status} invoice")

    payment = Payment(
        student_id=student_id,
        invoice_id=invoice_id,
        amount=amount,
        method=method,
        paid_at=paid_at or date.today(),
        note=(note or "").strip(),
    )
    try:
        db.add(payment)
        db.flush()
        if invoice_id is not None:
            recompute_invoice_status(db, invoice_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(payment)
    logging.info(f"Payment {payment.id}: {amount} {method} from student {student_id}"
                 f"{f' for invoice {invoice_id}' if invoice_id else ''}")
    return payment


@serialized
def delete_payment(db, payment_id):
    payment = get_or_raise(db, Payment, payment_id)
    invoice_id = payment.invoice_id
    try:
        db.delete(payment)
        db.flush()
        if invoice_id is not None:
            recompute_invoice_status(db, invoice_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logging.info(f"Payment {payment_id} reversed")


def quick_cash(db, student_id, amount, note=""):
    """Unlinked cash payment dated today."""
    return create_payment(db, student_id, None, amount, PaymentMethod.CASH.value,
                          paid_at=date.today(), note=note)


def list_payments(db, student_id):
    get_or_raise(db, Student, student_id)
    return db.query(Payment).filter(Payment.student_id == student_id).order_by(
        Payment.paid_at.desc(), Payment.id.desc()
    ).all()


# --- Views ---

def invoice_summary(db, invoice_id):
    invoice = get_or_raise(db, Invoice, invoice_id)
    total = round2(invoice.total)
    paid = _paid_for_invoice(db, invoice_id)
    return InvoiceSummary(
        invoice_id=invoice.id,
        number=invoice.number,
        status=invoice.status,
        total=total,
        paid=paid,
        remaining=total - paid,
    )


def student_balance(db, student_id):
    student = get_or_raise(db, Student, student_id)
    invoiced = db.query(func.coalesce(func.sum(Invoice.total), 0)).filter(
        Invoice.student_id == student_id,
        Invoice.status.in_(DEBT_STATUSES),
    ).scalar()
    paid = db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
        Payment.student_id == student_id
    ).scalar()
    return _balance(student, round2(invoiced), round2(paid))


def list_debtors(db):
    """Students owing money, largest debt first, then by name."""
    invoiced = _invoiced_by_student(db)
    paid = _paid_by_student(db)
    debtors = []
    for student in db.query(Student).all():
        row = _balance(student, invoiced.get(student.id, ZERO), paid.get(student.id, ZERO))
        if row.debt > 0:
            debtors.append(row)
    debtors.sort(key=lambda r: (-r.debt, r.student_name.lower()))
    return debtors
