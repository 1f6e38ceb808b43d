# -*- coding: utf-8 -*-
"""
FastAPI routes for enrollments and their price overrides.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from langschool.database import get_db
from langschool.models.enrollment import Enrollment, PriceOverride
from langschool.schemas.enrollment import (EnrollmentCreate, EnrollmentRead, EnrollmentUpdate,
                                           PriceOverrideCreate, PriceOverrideRead)
from langschool.services import registry

router = APIRouter(
    tags=["Enrollments"],
    responses={404: {"description": "Enrollment not found"}},
)


def _to_read(enrollment):
    read = EnrollmentRead.from_orm(enrollment)
    read.student_name = enrollment.student.full_name if enrollment.student else None
    read.course_name = enrollment.course.name if enrollment.course else None
    return read


@router.post("", response_model=EnrollmentRead, status_code=status.HTTP_201_CREATED)
def create_enrollment(enrollment: EnrollmentCreate, db: Session = Depends(get_db)):
    db_enrollment = registry.create_enrollment(
        db,
        student_id=enrollment.student_id,
        course_id=enrollment.course_id,
        billing_mode=enrollment.billing_mode.value,
        discount_pct=enrollment.discount_pct,
        note=enrollment.note,
        start_date=enrollment.start_date,
        end_date=enrollment.end_date,
    )
    return _to_read(db_enrollment)


@router.get("", response_model=List[EnrollmentRead])
def read_enrollments(
    student_id: Optional[int] = None,
    course_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Enrollment).options(joinedload(Enrollment.student), joinedload(Enrollment.course))
    if student_id:
        query = query.filter(Enrollment.student_id == student_id)
    if course_id:
        query = query.filter(Enrollment.course_id == course_id)
    return [_to_read(e) for e in query.order_by(Enrollment.id).all()]


@router.get("/{enrollment_id}", response_model=EnrollmentRead)
def read_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    return _to_read(registry.get_or_raise(db, Enrollment, enrollment_id))


@router.put("/{enrollment_id}", response_model=EnrollmentRead)
def update_enrollment(enrollment_id: int, enrollment_update: EnrollmentUpdate, db: Session = Depends(get_db)):
    changes = enrollment_update.dict(exclude_unset=True)
    if changes.get("billing_mode") is not None:
        changes["billing_mode"] = enrollment_update.billing_mode.value
    return _to_read(registry.update_enrollment(db, enrollment_id, **changes))


@router.delete("/{enrollment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    """Deletes the enrollment and its attendance; blocked once invoiced."""
    registry.delete_enrollment(db, enrollment_id)
    return None


# --- Price overrides ---

@router.get("/{enrollment_id}/price-overrides", response_model=List[PriceOverrideRead])
def read_price_overrides(enrollment_id: int, db: Session = Depends(get_db)):
    registry.get_or_raise(db, Enrollment, enrollment_id)
    return db.query(PriceOverride).filter(PriceOverride.enrollment_id == enrollment_id).order_by(
        PriceOverride.valid_from
    ).all()


@router.post("/{enrollment_id}/price-overrides", response_model=PriceOverrideRead,
             status_code=status.HTTP_201_CREATED)
def create_price_override(enrollment_id: int, override: PriceOverrideCreate, db: Session = Depends(get_db)):
    return registry.add_price_override(db, enrollment_id, **override.dict())


@router.delete("/{enrollment_id}/price-overrides/{override_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_price_override(enrollment_id: int, override_id: int, db: Session = Depends(get_db)):
    registry.delete_price_override(db, enrollment_id, override_id)
    return None
