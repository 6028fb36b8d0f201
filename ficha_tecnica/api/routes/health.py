"""Health check endpoint."""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Liveness probe: process status and current UTC time."""
    now = datetime.now(timezone.utc)
    return {
        "status": "ok",
        "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
