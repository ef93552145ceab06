"""Named metadata column sets.

Each loader passes one of these into ``parse_meta()`` explicitly. ``ALL``
retains every column found in the input file.
"""

from enum import Enum


class MetadataColumnSet(str, Enum):
    """Metadata column allow-list variants."""
    CORE = "core"
    MINIMAL = "minimal"
    ANNUAL = "annual"
    ALL = "all"


MINIMAL_COLUMNS = (
    "deviceDeploymentID",
    "locationName",
    "longitude",
    "latitude",
    "elevation",    # missing is allowed
    "countryCode",  # missing is allowed
    "stateCode",    # missing is allowed
    "timezone",
)

CORE_COLUMNS = (
    "deviceDeploymentID",
    "deviceID",
    "deviceType",
    "deploymentType",
    "deviceDescription",
    "pollutant",
    "units",
    "dataIngestSource",
    "locationID",
    "locationName",
    "longitude",
    "latitude",
    "elevation",
    "countryCode",
    "stateCode",
    "countyName",
    "timezone",
    "AQSID",
    "fullAQSID",
)

# Annual archives ship neither deploymentType nor fullAQSID
ANNUAL_COLUMNS = tuple(
    c for c in CORE_COLUMNS if c not in ("deploymentType", "fullAQSID")
)

FLOAT_COLUMNS = ("longitude", "latitude", "elevation")


def columns_for(column_set) -> tuple[str, ...] | None:
    """Return the allow-list for a column set, or None for ``ALL``."""
    column_set = MetadataColumnSet(column_set)
    if column_set is MetadataColumnSet.ALL:
        return None
    return {
        MetadataColumnSet.CORE: CORE_COLUMNS,
        MetadataColumnSet.MINIMAL: MINIMAL_COLUMNS,
        MetadataColumnSet.ANNUAL: ANNUAL_COLUMNS,
    }[column_set]
