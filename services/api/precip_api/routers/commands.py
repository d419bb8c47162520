"""Command endpoints mirroring the monitor operations."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from precip_api.dependencies import get_monitor
from precip_api.models import AttributesResponse, PurgeResponse, ResetResponse, ThresholdResponse
from precip_api.routers.attributes import attributes_response
from precip_monitor.addressing import record_key
from precip_monitor.aggregator import PRECIP_24HR
from precip_monitor.monitor import PrecipitationMonitor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/commands", tags=["commands"])


@router.post("/refresh", response_model=AttributesResponse)
def refresh(monitor: PrecipitationMonitor = Depends(get_monitor)) -> AttributesResponse:
    """
    Fetch the latest observations and recompute every total.

    An unreachable NWS page does not fail the request; totals are then
    computed from the records already stored.
    """
    try:
        monitor.refresh()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return attributes_response(monitor)


@router.post("/remove-expired", response_model=PurgeResponse)
def remove_expired(monitor: PrecipitationMonitor = Depends(get_monitor)) -> PurgeResponse:
    """Delete records that fall outside the retention period."""
    purged = monitor.remove_expired()
    return PurgeResponse(
        purged=[record_key(address) for address in purged],
        remaining=monitor.state().record_count,
    )


@router.post("/check-threshold", response_model=ThresholdResponse)
def check_threshold(
    threshold: Optional[float] = Query(
        default=None,
        ge=0,
        description="Threshold in inches (defaults to the configured watering threshold)"
    ),
    monitor: PrecipitationMonitor = Depends(get_monitor)
) -> ThresholdResponse:
    """Set the water sensor to wet if Precip24Hr exceeds the threshold."""
    if threshold is None:
        threshold = monitor.config.watering_threshold

    result = monitor.check_threshold(threshold)
    return ThresholdResponse(
        threshold=threshold,
        precip_24hr=monitor.attributes.get(PRECIP_24HR, 0.0),
        water=result,
    )


@router.post("/reset", response_model=ResetResponse)
def reset(monitor: PrecipitationMonitor = Depends(get_monitor)) -> ResetResponse:
    """Clear every stored record and published attribute."""
    monitor.reset()
    logger.info("Monitor reset via API")
    return ResetResponse(
        status="cleared",
        message="All records and published attributes have been cleared"
    )
