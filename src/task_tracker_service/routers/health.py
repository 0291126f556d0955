"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from task_tracker_service.core.state import get_app_state
from task_tracker_service.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Check service health.

    Public, so it reports liveness only. Counts span every owner and
    stay out of unauthenticated responses.
    """
    state = get_app_state()
    return HealthResponse(
        status="ok",
        uptime_seconds=state.uptime_seconds,
        started_at=state.started_at,
    )
