"""Health check endpoint."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from precip_api.dependencies import get_monitor, get_scheduler
from precip_monitor.monitor import PrecipitationMonitor

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    airport_code: str
    record_count: int
    scheduler: Optional[Dict[str, Any]] = None
    message: str


@router.get("/health", response_model=HealthResponse)
def health_check(monitor: PrecipitationMonitor = Depends(get_monitor)) -> HealthResponse:
    """
    Health check endpoint.

    Reports the monitored location, how many records are stored and
    whether the polling scheduler is running.
    """
    scheduler = get_scheduler()
    state = monitor.state()

    return HealthResponse(
        status="healthy",
        airport_code=monitor.config.airport_code,
        record_count=state.record_count,
        scheduler=scheduler.health() if scheduler is not None else None,
        message="PrecipMonitor API is running"
    )


@router.get("/")
async def root() -> dict:
    """
    Root endpoint with API information.

    Returns:
        Basic API information
    """
    return {
        "service": "PrecipMonitor API",
        "version": "1.1.0",
        "documentation": "/docs",
        "health_check": "/health"
    }
