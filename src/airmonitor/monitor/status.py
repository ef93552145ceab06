"""Current-status summary and GeoJSON export."""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from airmonitor.contracts.monitor import ID_COLUMN
from airmonitor.contracts.timeseries import DATETIME
from airmonitor.monitor.transform import resolve_timezone
from airmonitor.exceptions import TimezoneError

__all__ = [
    'get_current_status',
    'last_valid_index',
    'create_geojson',
    'LAST_VALID_DATETIME',
    'LAST_VALID_VALUE',
]

logger = logging.getLogger(__name__)

LAST_VALID_DATETIME = "lastValidDatetime"
LAST_VALID_VALUE = "lastValidValue"

UTC_FORMAT = "%Y-%m-%d %H:%M:%S"
LOCAL_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def last_valid_index(values: np.ndarray) -> np.ndarray:
    """Row index of the last finite value in each column, -1 if none.

    Examples
    --------
    >>> last_valid_index(np.array([[1.0], [np.nan], [3.0], [np.nan]]))
    array([2])
    """
    if values.shape[0] == 0:
        return np.full(values.shape[1], -1, dtype=int)
    rows = np.arange(values.shape[0])[:, None]
    return np.where(np.isfinite(values), rows, -1).max(axis=0)


def get_current_status(monitor) -> pd.DataFrame:
    """Metadata with the most recent valid observation of every series.

    Returns a copy of ``monitor.meta`` with two extra columns, aligned
    with the metadata rows:

    - ``lastValidDatetime``: UTC time of the last non-missing value
    - ``lastValidValue``: that value

    A series with no valid values gets ``NaT`` and ``NaN``.
    """
    meta = monitor.meta.reset_index(drop=True).copy()
    ids = meta[ID_COLUMN].tolist()
    data = monitor.data

    values = data[ids].to_numpy(dtype=float) if ids else np.empty((len(data), 0))
    index = last_valid_index(values)
    found = index >= 0
    safe = np.where(found, index, 0)

    times = data[DATETIME].reset_index(drop=True)
    if len(data):
        last_time = times.iloc[safe].reset_index(drop=True).where(found)
        last_value = np.where(found, values[safe, np.arange(len(ids))], np.nan)
    else:
        last_time = pd.Series(pd.NaT, index=range(len(ids)), dtype=times.dtype)
        last_value = np.full(len(ids), np.nan)

    meta[LAST_VALID_DATETIME] = last_time
    meta[LAST_VALID_VALUE] = last_value.astype(float)

    missing = int((~found).sum())
    if missing:
        logger.debug("get_current_status: %d series without any valid value", missing)
    return meta


def _format_value(value: float, digits: int) -> Optional[str]:
    if value is None or not np.isfinite(value):
        return None
    return f"{value:.{digits}f}"


def _to_local(timestamp: pd.Timestamp, timezone) -> Optional[pd.Timestamp]:
    if pd.isna(timestamp):
        return None
    if not isinstance(timezone, str) or not timezone:
        return None
    try:
        tz = resolve_timezone(timezone)
    except TimezoneError:
        logger.warning("Unknown timezone %r, local timestamp omitted", timezone)
        return None
    return timestamp.tz_convert(tz)


def _format_offset(timestamp: pd.Timestamp, local: Optional[pd.Timestamp]) -> Optional[str]:
    # ISO 8601 with numeric offset; UTC when the local zone is unknown
    if pd.isna(timestamp):
        return None
    return (timestamp if local is None else local).isoformat()


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


def _coordinate(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def create_geojson(monitor, value_digits: Optional[int] = None) -> dict:
    """Render the current status as a GeoJSON FeatureCollection.

    One Point feature per series, coordinates ``[longitude, latitude]``.

    Parameters
    ----------
    monitor : Monitor
        Source monitor.
    value_digits : int, optional
        Decimals in ``last_PM2.5``. Defaults to ``config.status.value_digits``.

    Returns
    -------
    dict
        JSON-serializable FeatureCollection.
    """
    if value_digits is None:
        value_digits = monitor.config.status.value_digits

    status = get_current_status(monitor)

    features = []
    for row in status.to_dict(orient="records"):
        last_time = row[LAST_VALID_DATETIME]
        timezone = row.get("timezone")
        local = _to_local(last_time, timezone)
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [
                    _coordinate(row.get("longitude")),
                    _coordinate(row.get("latitude")),
                ],
            },
            "properties": {
                "deviceDeploymentID": row[ID_COLUMN],
                "locationName": _text(row.get("locationName")),
                "timezone": _text(timezone),
                "last_validTime": None if pd.isna(last_time) else last_time.strftime(UTC_FORMAT),
                "last_validLocalTimestamp": None if local is None else local.strftime(LOCAL_FORMAT),
                "last_validTimeISO": _format_offset(last_time, local),
                "last_PM2.5": _format_value(row[LAST_VALID_VALUE], value_digits),
            },
        })

    logger.debug("create_geojson: %d features", len(features))
    return {"type": "FeatureCollection", "features": features}
