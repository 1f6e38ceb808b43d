# -*- coding: utf-8 -*-
"""
FastAPI routes for students: CRUD, activation and money views.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from langschool.database import get_db
from langschool.models.student import Student
from langschool.schemas.common import envelope
from langschool.schemas.payment import BalanceRead, PaymentRead
from langschool.schemas.student import StudentCreate, StudentRead, StudentUpdate
from langschool.services import payments, registry

router = APIRouter(
    tags=["Students"],
    responses={404: {"description": "Student not found"}},
)


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    data = student.dict()
    data["email"] = data.get("email") or ""
    data["phone"] = (data.get("phone") or "").strip()
    data["note"] = (data.get("note") or "").strip()
    db_student = Student(**data)
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    logging.info(f"Student {db_student.id} created: {db_student.full_name}")
    return db_student


@router.get("", response_model=List[StudentRead])
def read_students(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    active: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Student)
    if search:
        query = query.filter(Student.full_name.ilike(f"%{search}%"))
    if active is not None:
        query = query.filter(Student.is_active.is_(active))
    return query.order_by(Student.full_name).offset(skip).limit(limit).all()


@router.get("/{student_id}", response_model=StudentRead)
def read_student(student_id: int, db: Session = Depends(get_db)):
    db_student = db.query(Student).filter(Student.id == student_id).first()
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return db_student


@router.put("/{student_id}", response_model=StudentRead)
def update_student(student_id: int, student_update: StudentUpdate, db: Session = Depends(get_db)):
    db_student = db.query(Student).filter(Student.id == student_id).first()
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    update_data = student_update.dict(exclude_unset=True)
    if "full_name" in update_data:
        if not (update_data["full_name"] or "").strip():
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail="full_name must not be blank")
        update_data["full_name"] = update_data["full_name"].strip()
    for key, value in update_data.items():
        setattr(db_student, key, value if value is not None else "")
    db.commit()
    db.refresh(db_student)
    return db_student


@router.post("/{student_id}/deactivate")
def deactivate_student(student_id: int, db: Session = Depends(get_db)):
    student = registry.set_student_active(db, student_id, False)
    return envelope(StudentRead.from_orm(student), f"{student.full_name} deactivated")


@router.post("/{student_id}/activate")
def activate_student(student_id: int, db: Session = Depends(get_db)):
    student = registry.set_student_active(db, student_id, True)
    return envelope(StudentRead.from_orm(student), f"{student.full_name} activated")


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: int, db: Session = Depends(get_db)):
    """Only inactive students without invoices or payments can be deleted."""
    registry.delete_student(db, student_id)
    return None


# --- Money views ---

@router.get("/{student_id}/balance", response_model=BalanceRead)
def read_balance(student_id: int, db: Session = Depends(get_db)):
    return payments.student_balance(db, student_id)


@router.get("/{student_id}/payments", response_model=List[PaymentRead])
def read_student_payments(student_id: int, db: Session = Depends(get_db)):
    return payments.list_payments(db, student_id)
