"""
Health API

FastAPI router for liveness checks:
- GET/HEAD /health: Returns a static message, the configured port and the current UTC time
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ..models.api_models import HealthResponse

router = APIRouter()


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.head("/health", include_in_schema=False)
@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    return HealthResponse(message="Server is running", port=settings.PORT, timestamp=utc_timestamp())
