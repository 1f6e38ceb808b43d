# -*- coding: utf-8 -*-
"""
SQLAlchemy models for Invoice, InvoiceLine and the yearly numbering counter.
"""
from datetime import datetime

from sqlalchemy import (Boolean, Column, Date, DateTime, ForeignKey, Index, Integer,
                        Numeric, String, text)
from sqlalchemy.orm import relationship

from langschool.billing.status import InvoiceStatus
from langschool.database import Base


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        # One live invoice per student and period; canceled ones stay as history
        Index(
            "uix_invoice_student_period_live",
            "student_id", "year", "month",
            unique=True,
            sqlite_where=text("status != 'canceled'"),
            postgresql_where=text("status != 'canceled'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value)
    number = Column(String(40), nullable=True, unique=True)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    issued_at = Column(Date, nullable=True)
    canceled_from = Column(String(20), nullable=True)
    reopened = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    student = relationship("Student", back_populates="invoices")
    lines = relationship(
        "InvoiceLine",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLine.id",
    )
    payments = relationship("Payment", back_populates="invoice")

    @property
    def state(self):
        return InvoiceStatus(self.status)

    @property
    def blocks_period(self):
        """Whether this invoice keeps the generator from drafting the period again."""
        if self.state is not InvoiceStatus.CANCELED:
            return True
        return self.canceled_from == InvoiceStatus.ISSUED.value and not self.reopened


class InvoiceLine(Base):
    __tablename__ = "invoice_lines"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    discount_pct = Column(Numeric(5, 2), nullable=False, default=0)
    amount = Column(Numeric(12, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="lines")
    enrollment = relationship("Enrollment")


class InvoiceCounter(Base):
    __tablename__ = "invoice_counters"

    year = Column(Integer, primary_key=True)
    next_seq = Column(Integer, nullable=False, default=1)
