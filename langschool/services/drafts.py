# -*- coding: utf-8 -*-
"""
Invoice draft generation and the draft-side invoice operations.

``generate_drafts`` turns attendance and subscription enrollments into one
draft per student and period. Re-running it is safe: drafts are always fully
rebuilt, issued/paid invoices are never touched.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import joinedload, selectinload

from langschool.billing.constants import BillingMode
from langschool.billing.money import line_amount, sum_amounts, to_decimal
from langschool.billing.period import period_bounds, period_label, validate_period
from langschool.billing.status import InvoiceStatus
from langschool.errors import InvalidTransition, NotDraft, NotFound, ValidationError
from langschool.locks import serialized
from langschool.models.attendance import AttendanceRecord
from langschool.models.enrollment import PriceOverride
from langschool.models.invoice import Invoice, InvoiceLine
from langschool.services.registry import active_enrollments


@dataclass
class GenerateResult:
    created: int = 0
    updated: int = 0
    skipped_has_invoice: int = 0
    skipped_no_lines: int = 0


@dataclass
class CandidateLine:
    enrollment_id: int
    description: str
    qty: int
    unit_price: object
    discount_pct: object
    amount: object


# --- Prices ---

def resolve_prices(db, enrollment, year, month):
    """
    Effective (lesson_price, subscription_price) for the period, before discount.

    The override with the latest valid_from that overlaps the month wins; a
    field left empty on the override falls back to the course price.
    """
    course = enrollment.course
    lesson_price = to_decimal(course.lesson_price)
    subscription_price = to_decimal(course.subscription_price)

    first, last = period_bounds(year, month)
    override = db.query(PriceOverride).filter(
        PriceOverride.enrollment_id == enrollment.id,
        PriceOverride.valid_from <= last,
        or_(PriceOverride.valid_to.is_(None), PriceOverride.valid_to >= first),
    ).order_by(PriceOverride.valid_from.desc(), PriceOverride.id.desc()).first()
    if override is not None:
        if override.lesson_price is not None:
            lesson_price = to_decimal(override.lesson_price)
        if override.subscription_price is not None:
            subscription_price = to_decimal(override.subscription_price)
    return lesson_price, subscription_price


# --- Candidate lines ---

def build_lines(db, enrollments, year, month):
    label = period_label(year, month)
    per_lesson_ids = [e.id for e in enrollments if e.billing_mode == BillingMode.PER_LESSON.value]
    counts = {}
    if per_lesson_ids:
        records = db.query(AttendanceRecord).filter(
            AttendanceRecord.enrollment_id.in_(per_lesson_ids),
            AttendanceRecord.year == year,
            AttendanceRecord.month == month,
        ).all()
        counts = {r.enrollment_id: r.count for r in records}

    lines = []
    for enrollment in enrollments:
        lesson_price, subscription_price = resolve_prices(db, enrollment, year, month)
        discount = to_decimal(enrollment.discount_pct)
        course_name = enrollment.course.name

        if enrollment.billing_mode == BillingMode.SUBSCRIPTION.value:
            if subscription_price <= 0:
                continue
            lines.append(CandidateLine(
                enrollment_id=enrollment.id,
                description=f"Subscription {label}, {course_name}",
                qty=1,
                unit_price=subscription_price,
                discount_pct=discount,
                amount=line_amount(1, subscription_price, discount),
            ))
        elif enrollment.billing_mode == BillingMode.PER_LESSON.value:
            qty = counts.get(enrollment.id, 0)
            if qty <= 0:
                continue
            lines.append(CandidateLine(
                enrollment_id=enrollment.id,
                description=f"Lessons {label}, {course_name}",
                qty=qty,
                unit_price=lesson_price,
                discount_pct=discount,
                amount=line_amount(qty, lesson_price, discount),
            ))
        else:
            logging.warning(f"Enrollment {enrollment.id} has unknown billing mode {enrollment.billing_mode!r}")
    return lines


def _replace_lines(invoice, lines):
    # delete-orphan cascade removes the old rows
    invoice.lines = [
        InvoiceLine(
            enrollment_id=line.enrollment_id,
            description=line.description,
            qty=line.qty,
            unit_price=line.unit_price,
            discount_pct=line.discount_pct,
            amount=line.amount,
        )
        for line in lines
    ]
    invoice.total = sum_amounts(line.amount for line in lines)


def period_invoice(db, student_id, year, month):
    """The invoice that owns the student's period, if any (see Invoice.blocks_period)."""
    invoices = db.query(Invoice).filter(
        Invoice.student_id == student_id,
        Invoice.year == year,
        Invoice.month == month,
    ).order_by(Invoice.id.desc()).all()
    live = [inv for inv in invoices if inv.state is not InvoiceStatus.CANCELED]
    if live:
        return live[0]
    return next((inv for inv in invoices if inv.blocks_period), None)


# --- Generation ---

@serialized
def generate_drafts(db, year, month):
    validate_period(year, month)
    result = GenerateResult()

    by_student = {}
    for enrollment in active_enrollments(db, year, month):
        by_student.setdefault(enrollment.student_id, []).append(enrollment)

    try:
        for student_id in sorted(by_student):
            lines = build_lines(db, by_student[student_id], year, month)
            existing = period_invoice(db, student_id, year, month)

            if existing is not None and existing.state is not InvoiceStatus.DRAFT:
                result.skipped_has_invoice += 1
                continue

            if not lines:
                if existing is not None:
                    # a stale draft from an earlier run would otherwise linger
                    db.delete(existing)
                result.skipped_no_lines += 1
                continue

            if existing is None:
                invoice = Invoice(student_id=student_id, year=year, month=month,
                                  status=InvoiceStatus.DRAFT.value)
                _replace_lines(invoice, lines)
                db.add(invoice)
                result.created += 1
            else:
                _replace_lines(existing, lines)
                result.updated += 1

        # drafts of students no longer enrolled in the period
        orphans = db.query(Invoice).filter(
            Invoice.year == year,
            Invoice.month == month,
            Invoice.status == InvoiceStatus.DRAFT.value,
        ).all()
        for invoice in orphans:
            if invoice.student_id not in by_student:
                db.delete(invoice)
                result.skipped_no_lines += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    logging.info(f"Drafts {period_label(year, month)}: created={result.created} updated={result.updated} "
                 f"skipped_has_invoice={result.skipped_has_invoice} skipped_no_lines={result.skipped_no_lines}")
    return result


# --- Queries ---

def list_invoices(db, year, month, status="draft"):
    validate_period(year, month)
    query = db.query(Invoice).options(
        joinedload(Invoice.student),
        selectinload(Invoice.lines),
    ).filter(Invoice.year == year, Invoice.month == month)
    if status != "all":
        try:
            query = query.filter(Invoice.status == InvoiceStatus(status or "draft").value)
        except ValueError:
            raise ValidationError(f"unknown invoice status {status!r}")
    return query.order_by(Invoice.id).all()


def get_invoice(db, invoice_id):
    invoice = db.query(Invoice).options(
        joinedload(Invoice.student),
        selectinload(Invoice.lines),
    ).filter(Invoice.id == invoice_id).first()
    if invoice is None:
        raise NotFound("Invoice", invoice_id)
    return invoice


# --- Draft-side transitions ---

@serialized
def delete_draft(db, invoice_id):
    invoice = get_invoice(db, invoice_id)
    if invoice.state is not InvoiceStatus.DRAFT:
        raise NotDraft(invoice_id, invoice.status)
    db.delete(invoice)
    db.commit()
    logging.info(f"Draft invoice {invoice_id} deleted")


@serialized
def cancel_invoice(db, invoice_id):
    invoice = get_invoice(db, invoice_id)
    previous = invoice.state
    invoice.status = previous.transition(InvoiceStatus.CANCELED).value
    invoice.canceled_from = previous.value
    db.commit()
    db.refresh(invoice)
    logging.info(f"Invoice {invoice_id} ({invoice.number or 'draft'}) canceled from {previous.value}")
    return invoice


@serialized
def reopen_invoice(db, invoice_id):
    """Releases a canceled invoice's period so a fresh draft can be generated."""
    invoice = get_invoice(db, invoice_id)
    if invoice.state is not InvoiceStatus.CANCELED:
        raise InvalidTransition(f"only canceled invoices can be re-opened (status: {invoice.status})")
    invoice.reopened = True
    db.commit()
    db.refresh(invoice)
    return invoice
