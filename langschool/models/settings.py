# -*- coding: utf-8 -*-
"""
Singleton row with organization details printed on invoices.
"""
from sqlalchemy import Column, Integer, String

from langschool import config
from langschool.database import Base

SETTINGS_ID = 1


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    org_name = Column(String(150), nullable=False, default="")
    address = Column(String(255), nullable=False, default="")
    invoice_prefix = Column(String(10), nullable=False, default="LS")
    currency = Column(String(3), nullable=False, default="EUR")
    locale = Column(String(10), nullable=False, default="en-US")


def get_settings(db):
    """Returns the settings row, creating it from configuration on first use."""
    row = db.get(Settings, SETTINGS_ID)
    if row is None:
        row = Settings(id=SETTINGS_ID, invoice_prefix=config.INVOICE_PREFIX, currency=config.CURRENCY)
        db.add(row)
        db.flush()
    return row
