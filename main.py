# -*- coding: utf-8 -*-
"""
Main FastAPI application for the LangSchool billing backend.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from langschool import config
from langschool.database import init_db
from langschool.errors import (BillingError, InvalidTransition, LockedPeriod, NotFound,
                               ReferentialConflict, RenderFailure, ValidationError)
from langschool.routes import (attendance_fastapi, backup_fastapi, courses_fastapi,
                               enrollments_fastapi, invoices_fastapi, payments_fastapi,
                               settings_fastapi, students_fastapi)
from langschool.schemas.common import ErrorResponse, Notice

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=config.LOG_FILE,
)

config.ensure_dirs()
init_db()

env = config.ENVIRONMENT

app = FastAPI(
    title="LangSchool API",
    description="Attendance, invoicing and payments for a small language school",
    version="1.0.0",
    docs_url="/docs" if env != "production" else None,
    redoc_url="/redoc" if env != "production" else None,
    openapi_url="/openapi.json" if env != "production" else None,
)

origins = [
    config.FRONTEND_URL,
    "http://localhost:5700",
    "http://localhost",
    "http://127.0.0.1",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Domain errors ---

STATUS_BY_ERROR = (
    (NotFound, 404),
    (ValidationError, 422),
    (LockedPeriod, 409),
    (InvalidTransition, 409),
    (ReferentialConflict, 409),
    (RenderFailure, 502),
)


def status_for(exc):
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


@app.exception_handler(BillingError)
async def billing_error_handler(request: Request, exc: BillingError):
    status_code = status_for(exc)
    level = "error" if status_code >= 500 else "warning"
    logging.log(logging.ERROR if status_code >= 500 else logging.INFO,
                f"{request.method} {request.url.path} -> {status_code} {exc.kind}: {exc.message}")
    body = ErrorResponse(error=exc.kind, detail=exc.message, notice=Notice(level=level, message=exc.message))
    if isinstance(exc, ReferentialConflict):
        body.blockers = exc.blockers
    if isinstance(exc, RenderFailure):
        body.invoice_id = exc.invoice_id
        body.number = exc.number
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


# --- Routers ---

app.include_router(students_fastapi.router, prefix="/api/v1/students")
app.include_router(courses_fastapi.router, prefix="/api/v1/courses")
app.include_router(enrollments_fastapi.router, prefix="/api/v1/enrollments")
app.include_router(attendance_fastapi.router, prefix="/api/v1/attendance")
app.include_router(invoices_fastapi.router, prefix="/api/v1/invoices")
app.include_router(payments_fastapi.router, prefix="/api/v1/payments")
app.include_router(settings_fastapi.router, prefix="/api/v1/settings")
app.include_router(backup_fastapi.router, prefix="/api/v1/backup")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "LangSchool API",
        "docs": "/docs",
        "endpoints": [
            {"students": "/api/v1/students"},
            {"courses": "/api/v1/courses"},
            {"enrollments": "/api/v1/enrollments"},
            {"attendance": "/api/v1/attendance"},
            {"invoices": "/api/v1/invoices"},
            {"payments": "/api/v1/payments"},
            {"settings": "/api/v1/settings"},
            {"backup": "/api/v1/backup"},
        ],
    }


@app.get("/health", tags=["Root"])
async def health():
    return {"status": "ok", "environment": env}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=env != "production")
