# -*- coding: utf-8 -*-
"""
SQLAlchemy model for Payment.
"""
from datetime import date, datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from langschool.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    method = Column(String(10), nullable=False)  # cash | bank
    paid_at = Column(Date, nullable=False, default=date.today)
    note = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    student = relationship("Student", back_populates="payments")
    invoice = relationship("Invoice", back_populates="payments")
