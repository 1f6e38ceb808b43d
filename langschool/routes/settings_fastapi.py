# -*- coding: utf-8 -*-
"""
FastAPI routes for the organization details printed on invoices.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from langschool.database import get_db
from langschool.locks import write_lock
from langschool.models.settings import get_settings
from langschool.schemas.settings import SettingsRead, SettingsUpdate

router = APIRouter(tags=["Settings"])


@router.get("", response_model=SettingsRead)
def read_settings(db: Session = Depends(get_db)):
    settings = get_settings(db)
    db.commit()
    return settings


@router.put("", response_model=SettingsRead)
def update_settings(settings_update: SettingsUpdate, db: Session = Depends(get_db)):
    with write_lock:
        settings = get_settings(db)
        for key, value in settings_update.dict(exclude_unset=True).items():
            if value is not None:
                setattr(settings, key, value.strip())
        db.commit()
        db.refresh(settings)
    return settings
