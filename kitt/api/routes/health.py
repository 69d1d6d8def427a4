"""Liveness endpoint."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {
        "status": "ok",
        "service": "kitt-line",
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }
