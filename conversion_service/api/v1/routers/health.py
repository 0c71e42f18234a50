"""Liveness endpoint."""
from __future__ import annotations

import time

from fastapi import APIRouter

from conversion_service.api.schemas import HealthSchema

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthSchema)
def health() -> HealthSchema:
    return HealthSchema(status="ok", timestamp=int(time.time() * 1000))
