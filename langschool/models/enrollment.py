# -*- coding: utf-8 -*-
"""
SQLAlchemy models for Enrollment and its price overrides.
"""
from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from langschool.database import Base


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    billing_mode = Column(String(20), nullable=False)  # subscription | per_lesson
    discount_pct = Column(Numeric(5, 2), nullable=False, default=0)
    note = Column(String(255), nullable=False, default="")
    # Both optional: None means the enrollment is open on that side
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")

    attendance_records = relationship(
        "AttendanceRecord", back_populates="enrollment", cascade="all, delete-orphan"
    )
    price_overrides = relationship(
        "PriceOverride", back_populates="enrollment", cascade="all, delete-orphan"
    )


class PriceOverride(Base):
    __tablename__ = "price_overrides"

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=False, index=True)
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=True)
    lesson_price = Column(Numeric(12, 2), nullable=True)
    subscription_price = Column(Numeric(12, 2), nullable=True)

    enrollment = relationship("Enrollment", back_populates="price_overrides")
