# -*- coding: utf-8 -*-
"""
SQLAlchemy model for monthly attendance counts.
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from langschool.database import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("enrollment_id", "year", "month", name="uix_attendance_enrollment_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    count = Column(Integer, nullable=False, default=0)
    locked = Column(Boolean, nullable=False, default=False)

    enrollment = relationship("Enrollment", back_populates="attendance_records")

    def __repr__(self):
        return (f"<AttendanceRecord enrollment={self.enrollment_id} "
                f"{self.month:02d}.{self.year} count={self.count} locked={self.locked}>")
