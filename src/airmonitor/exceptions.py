"""Exceptions raised by monitor operators and loaders.

Schema violations are ``ContractViolation`` (see ``airmonitor.contracts``).
Everything here means "the requested operation is impossible given the
current data", not a bug in the tables themselves.
"""


class MonitorError(Exception):
    """Base class for all monitor operation errors."""


class IdentifierError(MonitorError, ValueError):
    """Unknown, duplicate or malformed deviceDeploymentID argument."""


class FilterTypeError(MonitorError, TypeError):
    """Filtering on an unsupported column type, or an unparsable value."""


class TimezoneError(MonitorError, ValueError):
    """Timezone string does not resolve to a known IANA zone."""


class EmptyDataError(MonitorError, ValueError):
    """Operation requires at least one time-series row."""


class DataAcquisitionError(MonitorError, RuntimeError):
    """Remote or local CSV could not be fetched after all retries."""


class UnknownColumnError(MonitorError, ValueError):
    """Metadata column does not exist."""
