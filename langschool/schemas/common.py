# -*- coding: utf-8 -*-
"""
Envelope shared by the billing routes: every answer carries a short notice
the client can show as-is.
"""

from typing import Any, List, Optional

from pydantic import BaseModel


class Notice(BaseModel):
    level: str = "info"  # info | warning | error
    message: str


class ErrorResponse(BaseModel):
    error: str
    detail: Any = None
    notice: Notice
    blockers: Optional[List[str]] = None
    invoice_id: Optional[int] = None
    number: Optional[str] = None


def envelope(result, message, level="info"):
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    return {"result": result, "notice": {"level": level, "message": message}}
