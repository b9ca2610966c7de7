"""
Health Check Routes
===================

GET /health - liveness probe. The process has no external dependencies, so
being able to answer is the whole check; the payload adds the number of
session records currently held for quick inspection.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from protocol_server.application.api.dependencies import SessionStoreDep, SettingsDep

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    active_sessions: int


@router.get("", response_model=HealthResponse)
async def health_check(settings: SettingsDep, store: SessionStoreDep) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app.APP_VERSION,
        active_sessions=store.active_count(),
    )
