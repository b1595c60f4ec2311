"""
Health check endpoint for container orchestration and uptime monitors.

Always answers 200 so a database outage shows up as "degraded" instead of
the process being restarted.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.db import get_db

router = APIRouter(tags=["health"])

# Set by the app lifespan
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Returns {"status": "ok"|"down", "response_time_ms": N, "error": name (if down)}."""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return {
            "status": "down",
            "response_time_ms": int((time.perf_counter() - start) * 1000),
            "error": type(exc).__name__,
        }
    return {
        "status": "ok",
        "response_time_ms": int((time.perf_counter() - start) * 1000),
    }


@router.get("/health", status_code=status.HTTP_200_OK, summary="Service health")
async def health_check(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    db_check = await check_database(db)
    return {
        "status": "ok" if db_check["status"] == "ok" else "degraded",
        "uptime_seconds": get_uptime_seconds(),
        "checks": {"database": db_check},
    }
