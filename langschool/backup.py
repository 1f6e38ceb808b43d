# -*- coding: utf-8 -*-
"""
Timestamped copies of the SQLite database under ``<base>/backups``.

SQLite's online backup API is used instead of a plain file copy, so the copy
is consistent even while the application holds the database open.
"""

import logging
from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine

from langschool import config
from langschool.errors import ValidationError
from langschool.locks import serialized


def backup_path_for(base_dir, moment):
    return Path(base_dir) / f"app-{moment:%Y%m%d-%H%M%S}.sqlite"


@serialized
def backup_now(bind, target_dir=None, now=None):
    """Copies the database behind ``bind`` and returns the new file's path."""
    if bind.dialect.name != "sqlite":
        raise ValidationError(f"backups are only supported for SQLite, not {bind.dialect.name}")

    target_dir = Path(target_dir or config.BACKUPS_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = backup_path_for(target_dir, now or datetime.now())

    target = create_engine(f"sqlite:///{path}")
    source_conn = bind.raw_connection()
    target_conn = target.raw_connection()
    try:
        source_conn.driver_connection.backup(target_conn.driver_connection)
    finally:
        target_conn.close()
        source_conn.close()
        target.dispose()

    logging.info(f"Database backed up to {path}")
    return path
