"""Pydantic configuration schemas for airmonitor.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
MetadataColumnSet : enum
    Named metadata column allow-lists
"""

from airmonitor.schemas.resolve import resolve_config
from airmonitor.schemas.internal import InternalConfig
from airmonitor.schemas.param import ParamConfig
from airmonitor.schemas.user import UserConfig
from airmonitor.schemas.cli import CLIConfig
from airmonitor.schemas.columns import MetadataColumnSet

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
    'MetadataColumnSet',
]
