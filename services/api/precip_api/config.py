"""Configuration management for the PrecipMonitor API."""

from typing import Optional
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration; the monitored location is configured via MonitorConfig."""

    # API settings
    api_title: str = "PrecipMonitor API"
    api_version: str = "1.1.0"
    api_description: str = "Rolling precipitation, temperature and humidity totals from NWS airport observations"

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Start the polling and daily jobs with the application
    scheduler_enabled: bool = True

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global config instance
_config: Optional[APIConfig] = None


def get_config() -> APIConfig:
    """Get or create global configuration instance."""
    global _config
    if _config is None:
        _config = APIConfig()
    return _config
