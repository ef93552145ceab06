"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and immutable.
"""

from typing import Literal
from pydantic import ConfigDict, Field
from airmonitor.schemas.base import AirMonitorBaseModel
from airmonitor.schemas.columns import MetadataColumnSet


class InternalArchiveConfig(AirMonitorBaseModel):
    """Runtime archive location."""
    base_url: str
    provider: Literal["airnow", "airsis", "wrcc"]
    pollutant: str


class InternalFetchConfig(AirMonitorBaseModel):
    """Runtime fetch settings."""
    retries: int = Field(ge=1)
    retry_delay_sec: float = Field(ge=0)
    timeout_sec: float = Field(gt=0)


class InternalMetadataConfig(AirMonitorBaseModel):
    """Runtime metadata parsing settings."""
    column_set: MetadataColumnSet


class InternalTrimConfig(AirMonitorBaseModel):
    """Runtime trim_date() policy."""
    drop_empty_days: bool


class InternalStatusConfig(AirMonitorBaseModel):
    """Runtime status rendering."""
    value_digits: int


class InternalLoggingConfig(AirMonitorBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class InternalConfig(AirMonitorBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        fetcher = CsvFetcher(config.fetch)
        meta = parse_meta(raw, column_set=config.metadata.column_set)

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    archive: InternalArchiveConfig
    fetch: InternalFetchConfig
    metadata: InternalMetadataConfig
    trim: InternalTrimConfig
    status: InternalStatusConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
