# -*- coding: utf-8 -*-
"""
FastAPI routes for the course CRUD.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from langschool.database import get_db
from langschool.models.course import Course
from langschool.schemas.course import CourseCreate, CourseRead, CourseUpdate
from langschool.services import registry
from langschool.services.schedule import format_schedule_days

router = APIRouter(
    tags=["Courses"],
    responses={404: {"description": "Course not found"}},
)


@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
def create_course(course: CourseCreate, db: Session = Depends(get_db)):
    data = course.dict()
    data["name"] = data["name"].strip()
    data["type"] = course.type.value
    data["schedule_days"] = format_schedule_days(course.schedule_days)
    db_course = Course(**data)
    db.add(db_course)
    db.commit()
    db.refresh(db_course)
    return db_course


@router.get("", response_model=List[CourseRead])
def read_courses(
    skip: int = 0,
    limit: int = 100,
    name: Optional[str] = None,
    active: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Course)
    if name:
        query = query.filter(Course.name.ilike(f"%{name}%"))
    if active is not None:
        query = query.filter(Course.is_active.is_(active))
    return query.order_by(Course.name).offset(skip).limit(limit).all()


@router.get("/{course_id}", response_model=CourseRead)
def read_course(course_id: int, db: Session = Depends(get_db)):
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if db_course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return db_course


@router.put("/{course_id}", response_model=CourseRead)
def update_course(course_id: int, course_update: CourseUpdate, db: Session = Depends(get_db)):
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if db_course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")

    update_data = course_update.dict(exclude_unset=True)
    if update_data.get("type") is not None:
        update_data["type"] = course_update.type.value
    if "schedule_days" in update_data:
        update_data["schedule_days"] = format_schedule_days(update_data["schedule_days"])
    for key, value in update_data.items():
        if value is not None:
            setattr(db_course, key, value)
    db.commit()
    db.refresh(db_course)
    return db_course


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: int, db: Session = Depends(get_db)):
    """Blocked while any enrollment references the course."""
    registry.delete_course(db, course_id)
    return None
