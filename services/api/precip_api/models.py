"""Pydantic response schemas."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from precip_monitor.monitor import WaterState


class AttributesResponse(BaseModel):
    """Published attributes of the monitor."""
    airport_code: str
    newest_record: Optional[str] = Field(None, description="Key of the newest record, e.g. R-483")
    record_count: int
    has_data: bool = Field(..., description="False until at least one record is stored")
    attributes: Dict[str, Any]


class RecordResponse(BaseModel):
    """One stored hour of observations."""
    key: str
    address: int
    month: Optional[str] = None
    day_of_month: int
    hour_of_day: int
    precipitation_in: float
    humidity_pct: float
    temperature_f: float
    dewpoint_f: Optional[float] = None
    pressure_mb: Optional[float] = None
    wind: Optional[str] = None
    visibility_mi: Optional[float] = None
    weather: Optional[str] = None
    sky: Optional[str] = None


class RecordListResponse(BaseModel):
    total: int
    records: List[RecordResponse]


class RetentionResponse(BaseModel):
    """Addresses the retention period currently keeps."""
    retention_period: int
    straddles_months: bool
    current_month: Optional[str] = None
    previous_month: Optional[str] = None
    size: int
    keys: List[str]


class PurgeResponse(BaseModel):
    purged: List[str]
    remaining: int


class ThresholdResponse(BaseModel):
    threshold: float
    precip_24hr: float
    water: WaterState


class ResetResponse(BaseModel):
    status: str
    message: str
