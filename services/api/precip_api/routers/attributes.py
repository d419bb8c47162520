"""Read-only endpoints for published attributes, records and retention."""

from fastapi import APIRouter, Depends

from precip_api.dependencies import get_monitor
from precip_api.models import (
    AttributesResponse,
    RecordListResponse,
    RecordResponse,
    RetentionResponse,
)
from precip_monitor.addressing import record_key
from precip_monitor.monitor import PrecipitationMonitor

router = APIRouter(prefix="/api/v1", tags=["attributes"])


def attributes_response(monitor: PrecipitationMonitor) -> AttributesResponse:
    state = monitor.state()
    return AttributesResponse(
        airport_code=monitor.config.airport_code,
        newest_record=state.newest_record,
        record_count=state.record_count,
        has_data=state.has_data,
        attributes=state.attributes,
    )


@router.get("/attributes", response_model=AttributesResponse)
def get_attributes(monitor: PrecipitationMonitor = Depends(get_monitor)) -> AttributesResponse:
    """
    Current published attributes.

    Attribute names are stable: Precip1Hr, Precip3Hr, Precip6Hr, Precip12Hr,
    Precip24Hr, Precip-Today, Precip-Yesterday, Precip-<Weekday>,
    Temperature24HrAvg, Humidity24HrAvg plus the newest hour's conditions.
    """
    return attributes_response(monitor)


@router.get("/records", response_model=RecordListResponse)
def list_records(monitor: PrecipitationMonitor = Depends(get_monitor)) -> RecordListResponse:
    """Stored records ordered by address."""
    records = [
        RecordResponse(
            key=record_key(address),
            address=address,
            month=str(month) if month is not None else None,
            day_of_month=record.day_of_month,
            hour_of_day=record.hour_of_day,
            precipitation_in=record.precipitation_in,
            humidity_pct=record.humidity_pct,
            temperature_f=record.temperature_f,
            dewpoint_f=record.dewpoint_f,
            pressure_mb=record.pressure_mb,
            wind=record.wind,
            visibility_mi=record.visibility_mi,
            weather=record.weather,
            sky=record.sky,
        )
        for address, month, record in monitor.stored_records()
    ]
    return RecordListResponse(total=len(records), records=records)


@router.get("/retention", response_model=RetentionResponse)
def get_retention(monitor: PrecipitationMonitor = Depends(get_monitor)) -> RetentionResponse:
    """Addresses the retention period keeps at this hour."""
    window = monitor.retention_window()
    return RetentionResponse(
        retention_period=monitor.config.retention_period,
        straddles_months=window.straddles_months,
        current_month=str(window.month) if window.month is not None else None,
        previous_month=str(window.previous_month) if window.previous_month is not None else None,
        size=len(window),
        keys=window.keys(),
    )
