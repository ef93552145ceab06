"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: provider, archive location, verbosity.
"""

from typing import Literal, Optional
from airmonitor.schemas.base import AirMonitorBaseModel


class CLIConfig(AirMonitorBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(provider="wrcc", log_level="DEBUG")
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    provider: Optional[Literal["airnow", "airsis", "wrcc"]] = None
    base_url: Optional[str] = None
    drop_empty_days: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        archive = {}
        if self.provider is not None:
            archive["provider"] = self.provider
        if self.base_url is not None:
            archive["base_url"] = self.base_url
        if archive:
            overrides["archive"] = archive

        if self.drop_empty_days is not None:
            overrides["trim"] = {"drop_empty_days": self.drop_empty_days}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
