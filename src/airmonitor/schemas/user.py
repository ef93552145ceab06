"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., BASE_URL → base_url, RETRIES → retries).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from airmonitor.schemas.base import AirMonitorBaseModel
from airmonitor.schemas.columns import MetadataColumnSet


class UserFetchConfig(AirMonitorBaseModel):
    """User-facing fetch config."""
    retries: Optional[int] = None
    retry_delay_sec: Optional[float] = None
    timeout_sec: Optional[float] = None


class UserArchiveConfig(AirMonitorBaseModel):
    """User-facing archive config."""
    base_url: Optional[str] = None
    provider: Optional[str] = None
    pollutant: Optional[str] = None

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        """Normalize provider names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserConfig(AirMonitorBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            provider="wrcc",
            retries=5,
            column_set="minimal",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Archive settings
    base_url: Optional[str] = Field(None, alias="BASE_URL")
    provider: Optional[Literal["airnow", "airsis", "wrcc"]] = Field(None, alias="PROVIDER")
    pollutant: Optional[str] = Field(None, alias="POLLUTANT")

    # Fetch settings
    retries: Optional[int] = Field(None, alias="RETRIES")
    retry_delay_sec: Optional[float] = Field(None, alias="RETRY_DELAY_SEC")
    timeout_sec: Optional[float] = Field(None, alias="TIMEOUT_SEC")

    # Parsing / operator policies
    column_set: Optional[MetadataColumnSet] = Field(None, alias="COLUMN_SET")
    drop_empty_days: Optional[bool] = Field(None, alias="DROP_EMPTY_DAYS")
    value_digits: Optional[int] = Field(None, alias="VALUE_DIGITS")

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )

    # Nested overrides (advanced users)
    archive: Optional[UserArchiveConfig] = None
    fetch: Optional[UserFetchConfig] = None

    model_config = AirMonitorBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("provider", "column_set", mode="before")
    @classmethod
    def normalize_names(cls, v):
        """Normalize provider and column-set names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept 'debug', 'Info', ..."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        # Archive section
        archive = {}
        if self.base_url is not None:
            archive["base_url"] = self.base_url
        if self.provider is not None:
            archive["provider"] = self.provider
        if self.pollutant is not None:
            archive["pollutant"] = self.pollutant

        # Merge with explicit archive config
        if self.archive is not None:
            archive.update(self.archive.model_dump(exclude_none=True))

        if archive:
            overrides["archive"] = archive

        # Fetch section
        fetch = {}
        if self.retries is not None:
            fetch["retries"] = self.retries
        if self.retry_delay_sec is not None:
            fetch["retry_delay_sec"] = self.retry_delay_sec
        if self.timeout_sec is not None:
            fetch["timeout_sec"] = self.timeout_sec

        if self.fetch is not None:
            fetch.update(self.fetch.model_dump(exclude_none=True))

        if fetch:
            overrides["fetch"] = fetch

        if self.column_set is not None:
            overrides["metadata"] = {"column_set": self.column_set}

        if self.drop_empty_days is not None:
            overrides["trim"] = {"drop_empty_days": self.drop_empty_days}

        if self.value_digits is not None:
            overrides["status"] = {"value_digits": self.value_digits}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
