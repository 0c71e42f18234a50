"""
Common schemas shared across different API endpoints
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ErrorResponseSchema(BaseModel):
    success: bool = False
    error: str
    errorKind: str
    stage: Optional[str] = None


class HealthSchema(BaseModel):
    status: str
    timestamp: int
