# -*- coding: utf-8 -*-
"""
Configuration read from the environment (and a local .env file, if any).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Base directory for everything the application writes to disk
BASE_DIR = Path(os.getenv("LANGSCHOOL_HOME", str(Path.home() / "LangSchool"))).expanduser()
DATA_DIR = BASE_DIR / "data"
INVOICES_DIR = Path(os.getenv("INVOICES_DIR", str(BASE_DIR / "invoices"))).expanduser()
BACKUPS_DIR = BASE_DIR / "backups"
EXPORTS_DIR = BASE_DIR / "exports"

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'langschool.db'}")

# Older Heroku/Render URLs use the postgres:// scheme, SQLAlchemy wants postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

INVOICE_PREFIX = os.getenv("INVOICE_PREFIX", "LS")
CURRENCY = os.getenv("CURRENCY", "EUR")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE")  # None -> stderr

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5700")


def ensure_dirs():
    """Creates the data/backups/invoices/exports folders under the base directory."""
    for path in (DATA_DIR, BACKUPS_DIR, INVOICES_DIR, EXPORTS_DIR):
        path.mkdir(parents=True, exist_ok=True)
