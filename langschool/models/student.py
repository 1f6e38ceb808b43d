# -*- coding: utf-8 -*-
"""
SQLAlchemy model for Student.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from langschool.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False, index=True)
    phone = Column(String(30), nullable=False, default="")
    email = Column(String(100), nullable=False, default="")
    note = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Enrollments (and through them attendance) go away with the student;
    # invoices and payments block the delete instead (see services/registry.py)
    enrollments = relationship("Enrollment", back_populates="student", cascade="all, delete-orphan")
    invoices = relationship("Invoice", back_populates="student")
    payments = relationship("Payment", back_populates="student")
