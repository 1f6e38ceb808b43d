# -*- coding: utf-8 -*-
"""
Lifecycle rules for students, courses and enrollments.

The CRUD routes stay thin; the rules that protect billing history live here:
discounts are clamped, financial records block deletes, enrollment deletes
cascade their attendance.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from langschool.billing.constants import BillingMode
from langschool.billing.money import clamp_discount
from langschool.billing.period import period_bounds
from langschool.errors import NotFound, ReferentialConflict, ValidationError
from langschool.locks import serialized
from langschool.models.course import Course
from langschool.models.enrollment import Enrollment, PriceOverride
from langschool.models.invoice import Invoice, InvoiceLine
from langschool.models.payment import Payment
from langschool.models.student import Student


def get_or_raise(db, model, entity_id):
    obj = db.get(model, entity_id)
    if obj is None:
        raise NotFound(model.__name__, entity_id)
    return obj


# --- Active enrollments ---

def is_active_in_period(enrollment, year, month):
    first, last = period_bounds(year, month)
    if enrollment.start_date is not None and enrollment.start_date > last:
        return False
    if enrollment.end_date is not None and enrollment.end_date < first:
        return False
    return True


def active_enrollments(db, year, month, billing_mode=None, course_id=None, student_id=None):
    """Enrollments of active students that overlap the month, ordered by id."""
    first, last = period_bounds(year, month)
    query = (
        db.query(Enrollment)
        .options(joinedload(Enrollment.student), joinedload(Enrollment.course))
        .join(Student, Enrollment.student_id == Student.id)
        .filter(Student.is_active.is_(True))
        .filter(or_(Enrollment.start_date.is_(None), Enrollment.start_date <= last))
        .filter(or_(Enrollment.end_date.is_(None), Enrollment.end_date >= first))
    )
    if billing_mode:
        query = query.filter(Enrollment.billing_mode == BillingMode(billing_mode).value)
    if course_id:
        query = query.filter(Enrollment.course_id == course_id)
    if student_id:
        query = query.filter(Enrollment.student_id == student_id)
    return query.order_by(Enrollment.id).all()


# --- Enrollments ---

def _check_dates(start_date, end_date):
    if start_date and end_date and end_date < start_date:
        raise ValidationError("end date must not be before start date")


def _check_open_pair(db, student_id, course_id, exclude_id=None):
    query = db.query(Enrollment).filter(
        Enrollment.student_id == student_id,
        Enrollment.course_id == course_id,
        Enrollment.end_date.is_(None),
    )
    if exclude_id is not None:
        query = query.filter(Enrollment.id != exclude_id)
    if query.first() is not None:
        raise ValidationError("an open enrollment for this student and course already exists")


@serialized
def create_enrollment(db, student_id, course_id, billing_mode, discount_pct=0, note="",
                      start_date=None, end_date=None):
    try:
        mode = BillingMode(billing_mode)
    except ValueError:
        raise ValidationError("billing_mode must be 'subscription' or 'per_lesson'")
    _check_dates(start_date, end_date)

    student = get_or_raise(db, Student, student_id)
    if not student.is_active:
        raise ValidationError("cannot enroll a deactivated student")
    get_or_raise(db, Course, course_id)

    if end_date is None:
        _check_open_pair(db, student_id, course_id)

    enrollment = Enrollment(
        student_id=student_id,
        course_id=course_id,
        billing_mode=mode.value,
        discount_pct=clamp_discount(discount_pct),
        note=(note or "").strip(),
        start_date=start_date,
        end_date=end_date,
    )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    logging.info(f"Enrollment {enrollment.id} created: student={student_id} course={course_id} mode={mode.value}")
    return enrollment


@serialized
def update_enrollment(db, enrollment_id, **changes):
    enrollment = get_or_raise(db, Enrollment, enrollment_id)
    if "billing_mode" in changes and changes["billing_mode"] is not None:
        try:
            changes["billing_mode"] = BillingMode(changes["billing_mode"]).value
        except ValueError:
            raise ValidationError("billing_mode must be 'subscription' or 'per_lesson'")
    if "discount_pct" in changes and changes["discount_pct"] is not None:
        changes["discount_pct"] = clamp_discount(changes["discount_pct"])
    if "note" in changes and changes["note"] is not None:
        changes["note"] = changes["note"].strip()
    _check_dates(changes.get("start_date", enrollment.start_date),
                 changes.get("end_date", enrollment.end_date))
    if "end_date" in changes and changes["end_date"] is None:
        _check_open_pair(db, enrollment.student_id, enrollment.course_id, exclude_id=enrollment.id)

    for key, value in changes.items():
        if value is not None or key in ("start_date", "end_date"):
            setattr(enrollment, key, value)
    db.commit()
    db.refresh(enrollment)
    return enrollment


@serialized
def delete_enrollment(db, enrollment_id):
    enrollment = get_or_raise(db, Enrollment, enrollment_id)
    lines = db.query(InvoiceLine).filter(InvoiceLine.enrollment_id == enrollment_id).count()
    if lines:
        raise ReferentialConflict("enrollment", enrollment_id, [f"{lines} invoice line(s)"])
    # attendance_records and price_overrides cascade
    db.delete(enrollment)
    db.commit()
    logging.info(f"Enrollment {enrollment_id} deleted with its attendance")


# --- Price overrides ---

@serialized
def add_price_override(db, enrollment_id, valid_from, valid_to=None, lesson_price=None,
                       subscription_price=None):
    get_or_raise(db, Enrollment, enrollment_id)
    _check_dates(valid_from, valid_to)
    if lesson_price is None and subscription_price is None:
        raise ValidationError("set lesson_price, subscription_price or both")
    for price in (lesson_price, subscription_price):
        if price is not None and price < 0:
            raise ValidationError("prices must not be negative")

    override = PriceOverride(
        enrollment_id=enrollment_id,
        valid_from=valid_from,
        valid_to=valid_to,
        lesson_price=lesson_price,
        subscription_price=subscription_price,
    )
    db.add(override)
    db.commit()
    db.refresh(override)
    logging.info(f"Price override {override.id} for enrollment {enrollment_id} from {valid_from}")
    return override


@serialized
def delete_price_override(db, enrollment_id, override_id):
    override = get_or_raise(db, PriceOverride, override_id)
    if override.enrollment_id != enrollment_id:
        raise NotFound("PriceOverride", override_id)
    db.delete(override)
    db.commit()


# --- Students ---

@serialized
def set_student_active(db, student_id, active):
    student = get_or_raise(db, Student, student_id)
    student.is_active = bool(active)
    db.commit()
    db.refresh(student)
    return student


@serialized
def delete_student(db, student_id):
    student = get_or_raise(db, Student, student_id)
    if student.is_active:
        raise ValidationError("cannot delete an active student; deactivate first")

    blockers = []
    invoices = db.query(Invoice).filter(Invoice.student_id == student_id).count()
    if invoices:
        blockers.append(f"{invoices} invoice(s)")
    payments = db.query(Payment).filter(Payment.student_id == student_id).count()
    if payments:
        blockers.append(f"{payments} payment(s)")
    if blockers:
        raise ReferentialConflict("student", student_id, blockers)

    db.delete(student)
    db.commit()
    logging.info(f"Student {student_id} deleted")


# --- Courses ---

@serialized
def delete_course(db, course_id):
    course = get_or_raise(db, Course, course_id)
    enrollments = db.query(Enrollment).filter(Enrollment.course_id == course_id).count()
    if enrollments:
        raise ReferentialConflict("course", course_id, [f"{enrollments} enrollment(s)"])
    db.delete(course)
    db.commit()
    logging.info(f"Course {course_id} deleted")
