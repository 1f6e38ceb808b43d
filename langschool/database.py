# -*- coding: utf-8 -*-
"""
SQLAlchemy database setup for the FastAPI application.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from langschool import config

DATABASE_URL = config.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints in a thread pool
    connect_args = {"check_same_thread": False}
    if DATABASE_URL.startswith("sqlite:///") and ":memory:" not in DATABASE_URL:
        config.DATA_DIR.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    # pool_pre_ping: check the connection is alive before handing it out
    pool_pre_ping=True,
    pool_recycle=3600,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Dependency used by the routers (Depends(get_db))
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Imports every model so they register on Base, then creates the tables."""
    from langschool.models import (  # noqa: F401
        attendance,
        course,
        enrollment,
        invoice,
        payment,
        settings,
        student,
    )

    Base.metadata.create_all(bind=bind or engine)
