# -*- coding: utf-8 -*-
"""
SQLAlchemy model for Course.
"""
from sqlalchemy import Boolean, Column, Integer, Numeric, String
from sqlalchemy.orm import relationship

from langschool.billing.constants import CourseType
from langschool.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    type = Column(String(20), nullable=False, default=CourseType.GROUP.value)  # group | individual
    lesson_price = Column(Numeric(12, 2), nullable=False, default=0)
    subscription_price = Column(Numeric(12, 2), nullable=False, default=0)
    # Weekday indices, Sunday=0 .. Saturday=6, e.g. "1,3"
    schedule_days = Column(String(20), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    enrollments = relationship("Enrollment", back_populates="course")
