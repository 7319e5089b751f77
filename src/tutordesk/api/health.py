"""
Health check for container probes and load balancers.

Reports uptime plus the two things a submission needs: a reachable database
and a writable proof-image directory.
"""

import os
import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.core.db import get_db
from tutordesk.core.uploads import get_upload_dir

router = APIRouter(tags=["health"])

_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Run SELECT 1 and time it. Failures report the exception class, not its message."""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as exc:
        return {
            "status": "down",
            "response_time_ms": int((time.perf_counter() - start) * 1000),
            "error": type(exc).__name__,
        }
    return {"status": "ok", "response_time_ms": int((time.perf_counter() - start) * 1000)}


def check_upload_dir() -> dict[str, Any]:
    upload_dir = get_upload_dir()
    if upload_dir.is_dir() and os.access(upload_dir, os.W_OK):
        return {"status": "ok"}
    return {"status": "down", "error": "Upload directory missing or not writable"}


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Uptime and dependency checks. Always 200; degraded checks are reported in the body.",
)
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    checks = {
        "database": await check_database(db),
        "uploads": check_upload_dir(),
    }
    overall_status = "ok" if all(c["status"] == "ok" for c in checks.values()) else "degraded"

    return JSONResponse(
        content={
            "status": overall_status,
            "uptime_seconds": get_uptime_seconds(),
            "checks": checks,
        },
        status_code=status.HTTP_200_OK,
    )
