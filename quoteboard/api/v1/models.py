"""Pydantic response envelopes shared by every route."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class SuccessEnvelope(BaseModel):
    success: bool = True
    data: Any = None
    cached: bool = False
    stale: bool = False
    fallback: bool | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
    code: str


class ClearResponse(BaseModel):
    success: bool = True
    message: str
    removed: int = 0
