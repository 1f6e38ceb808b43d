# -*- coding: utf-8 -*-
"""
FastAPI route for on-demand database backups.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from langschool.backup import backup_now
from langschool.database import get_db
from langschool.schemas.common import envelope
from langschool.schemas.settings import BackupRead

router = APIRouter(tags=["Backup"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_backup(db: Session = Depends(get_db)):
    path = backup_now(db.get_bind())
    return envelope(BackupRead(path=str(path)), f"Backup written to {path.name}")
