"""
Configuration management for the monitor service.
"""
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .observations import DetailLevel


class PollFrequency(str, Enum):
    """How often the observation page is fetched."""

    NEVER = "never"
    HALF_HOUR = "half_hour"
    HOURLY = "hourly"
    THREE_HOURS = "three_hours"

    @property
    def minutes(self) -> Optional[int]:
        return {
            PollFrequency.NEVER: None,
            PollFrequency.HALF_HOUR: 30,
            PollFrequency.HOURLY: 60,
            PollFrequency.THREE_HOURS: 180,
        }[self]


class MonitorConfig(BaseSettings):
    """Configuration for one monitored location."""

    # Location
    airport_code: str = ""

    # Retention and thresholds
    retention_period: int = Field(default=72, ge=48, le=168)
    watering_threshold: float = Field(default=0.15, ge=0)
    threshold_check_hour: int = Field(default=4, ge=0, le=6)  # 0 disables the daily check

    # Collection
    poll_frequency: PollFrequency = PollFrequency.HOURLY
    detail: DetailLevel = DetailLevel.BRIEF
    incremental_eviction: bool = False

    # NWS source
    nws_base_url: str = "https://forecast.weather.gov/data/obhistory"
    request_timeout: int = 30
    max_rows: int = 72  # the page only carries three days of hourly rows

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "MONITOR_"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("airport_code")
    @classmethod
    def _normalize_airport_code(cls, value: str) -> str:
        value = value.strip().upper()
        if value and (len(value) != 4 or not value.isalnum()):
            raise ValueError(f"Expected a 4 character ICAO code, got {value!r}")
        return value

    @property
    def row_limit(self) -> int:
        """Number of table rows worth reading for the retention period."""
        return min(self.max_rows, self.retention_period)

    @property
    def observation_url(self) -> str:
        return f"{self.nws_base_url.rstrip('/')}/{self.airport_code}.html"


# Global config instance
_config: Optional[MonitorConfig] = None


def get_config() -> MonitorConfig:
    """Get or create global configuration instance."""
    global _config
    if _config is None:
        _config = MonitorConfig()
    return _config
