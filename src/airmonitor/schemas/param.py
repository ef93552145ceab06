"""ParamConfig: Expert defaults for airmonitor.

This module defines the complete default configuration. ALL tunable
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal
from pydantic import Field, field_validator
from airmonitor.schemas.base import AirMonitorBaseModel
from airmonitor.schemas.columns import MetadataColumnSet

DEFAULT_BASE_URL = "https://airfire-data-exports.s3.us-west-2.amazonaws.com/monitoring/v2"


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ArchiveConfig(AirMonitorBaseModel):
    """Location of the monitoring archive."""
    base_url: str = DEFAULT_BASE_URL
    provider: Literal["airnow", "airsis", "wrcc"] = "airnow"
    pollutant: str = "PM2.5"

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        """URLs are joined with '/', so drop any trailing separator."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v


class FetchConfig(AirMonitorBaseModel):
    """CSV fetch retry and timeout settings."""
    retries: int = Field(3, ge=1, description="Attempts per file before giving up")
    retry_delay_sec: float = Field(1.0, ge=0, description="Base delay between attempts")
    timeout_sec: float = Field(30.0, gt=0, description="Per-request timeout")

    @field_validator("retry_delay_sec", "timeout_sec", mode="before")
    @classmethod
    def coerce_to_float(cls, v):
        """Allow int or float for durations."""
        return float(v)


class MetadataConfig(AirMonitorBaseModel):
    """Metadata parsing configuration."""
    column_set: MetadataColumnSet = MetadataColumnSet.CORE


class TrimConfig(AirMonitorBaseModel):
    """trim_date() policy."""
    drop_empty_days: bool = False


class StatusConfig(AirMonitorBaseModel):
    """Current-status rendering."""
    value_digits: int = Field(1, ge=0, le=6)


class LoggingConfig(AirMonitorBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(AirMonitorBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    trim: TrimConfig = Field(default_factory=TrimConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
