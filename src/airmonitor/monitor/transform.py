"""Transform and restructure Monitor objects.

Every function takes a Monitor and returns a NEW Monitor; inputs are never
modified. Each result is rebuilt through the Monitor constructor, which
re-checks the metadata, time-series and binding contracts.

- select: subset and reorder series by deviceDeploymentID
- filter_by_value: keep series whose metadata column equals a value
- drop_empty: remove series without a single valid observation
- trim_date: trim the time axis to whole local-time days
- combine: union of two monitors, earlier operand wins on ID collisions
- collapse: reduce all series to one with an aggregation function
"""

import logging
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import numpy as np
import pandas as pd

from airmonitor.contracts.base import require
from airmonitor.contracts.monitor import ID_COLUMN
from airmonitor.contracts.timeseries import DATETIME
from airmonitor.exceptions import (
    EmptyDataError,
    FilterTypeError,
    IdentifierError,
    TimezoneError,
    UnknownColumnError,
)
from airmonitor.monitor.helpers import array_mean, normalize_ids, round_values

__all__ = [
    'select',
    'filter_by_value',
    'drop_empty',
    'trim_date',
    'combine',
    'collapse',
    'resolve_timezone',
    'COLLAPSE_FUNCTIONS',
]

logger = logging.getLogger(__name__)


def _rebuild(monitor, meta: pd.DataFrame, data: pd.DataFrame):
    """New instance of the same class, carrying the source config."""
    return type(monitor)(
        meta.reset_index(drop=True),
        data.reset_index(drop=True),
        config=monitor.config,
    )


def _series_ids(data: pd.DataFrame) -> list[str]:
    return [c for c in data.columns if c != DATETIME]


# ============================================================================
# Structural operators
# ============================================================================

def select(monitor, ids: Union[str, list[str]]):
    """Subset and reorder time series by deviceDeploymentID.

    Metadata rows and data columns of the result appear in exactly the
    order of ``ids``.

    Parameters
    ----------
    monitor : Monitor
        Source monitor.
    ids : str or list of str
        A single deviceDeploymentID or an ordered list of them.

    Returns
    -------
    Monitor
        A (reordered) subset of ``monitor``.

    Raises
    ------
    IdentifierError
        If ``ids`` is empty, malformed, has duplicates, or names an ID that
        is not in the metadata.
    """
    ids = normalize_ids(ids)

    known = set(monitor.meta[ID_COLUMN])
    for id in ids:
        if id not in known:
            raise IdentifierError(f"deviceDeploymentID '{id}' not found in metadata")

    meta = monitor.meta.set_index(ID_COLUMN, drop=False).loc[ids]
    data = monitor.data[[DATETIME, *ids]].copy()

    logger.debug("select: %d -> %d series", monitor.count(), len(ids))
    return _rebuild(monitor, meta.copy(), data)


def filter_by_value(monitor, column: str, value):
    """Keep series whose metadata ``column`` equals ``value``.

    Numeric columns compare against ``float(value)``; text columns compare
    against ``str(value)``.

    Raises
    ------
    UnknownColumnError
        If ``column`` is not a metadata column.
    FilterTypeError
        If ``column`` is neither numeric nor text, or ``value`` cannot be
        parsed as a number for a numeric column.
    """
    meta = monitor.meta
    if column not in meta.columns:
        raise UnknownColumnError(f"Column '{column}' not found in metadata")

    series = meta[column]
    if pd.api.types.is_bool_dtype(series):
        raise FilterTypeError(f"Unsupported column type for filtering: {series.dtype}")

    if pd.api.types.is_numeric_dtype(series):
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            raise FilterTypeError(f"Value '{value}' could not be parsed as a number") from None
        if np.isnan(parsed):
            raise FilterTypeError(f"Value '{value}' could not be parsed as a number")
        mask = series == parsed
    elif _is_text(series):
        mask = series.astype(object) == str(value)
    else:
        raise FilterTypeError(f"Unsupported column type for filtering: {series.dtype}")

    kept = meta[mask.fillna(False).astype(bool)]
    ids = kept[ID_COLUMN].tolist()
    data = monitor.data[[DATETIME, *ids]].copy()

    logger.debug("filter_by_value(%s == %r): %d -> %d series", column, value, len(meta), len(ids))
    return _rebuild(monitor, kept.copy(), data)


def _is_text(series: pd.Series) -> bool:
    if pd.api.types.is_string_dtype(series.dtype) and series.dtype != object:
        return True
    if series.dtype != object:
        return False
    return all(isinstance(v, str) for v in series.dropna())


def drop_empty(monitor):
    """Drop series that contain no valid (finite, non-missing) values.

    The ``datetime`` column is always retained, even if no series survive.
    """
    data = monitor.data
    ids = monitor.get_ids()

    if ids:
        values = data[ids].to_numpy(dtype=float)
        valid_count = np.isfinite(values).sum(axis=0)
    else:
        valid_count = np.array([], dtype=int)

    keep = [id for id, n in zip(ids, valid_count) if n > 0]

    meta = monitor.meta[monitor.meta[ID_COLUMN].isin(keep)]
    data = data[[DATETIME, *keep]].copy()

    logger.debug("drop_empty: %d -> %d series", len(ids), len(keep))
    return _rebuild(monitor, meta.copy(), data)


# ============================================================================
# Temporal operator
# ============================================================================

def resolve_timezone(timezone: str) -> ZoneInfo:
    """Resolve an IANA timezone name.

    Raises
    ------
    TimezoneError
        If ``timezone`` is not a recognized zone.
    """
    if not isinstance(timezone, str) or not timezone:
        raise TimezoneError(f"Unrecognized timezone: {timezone!r}")
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise TimezoneError(f"Unrecognized timezone: {timezone!r}") from None


def trim_date(monitor, timezone: str, drop_empty_days: bool = False):
    """Trim the time axis to whole days in local ``timezone``.

    The kept range starts at the first row whose local hour is 0 and ends
    at the last row whose local hour is 23. Away from DST transitions this
    is the usual ``start = 24 - first_hour`` / ``end = n - last_hour - 1``
    arithmetic; working from wall-clock hours keeps it correct when a
    transition falls inside a partial day.

    Parameters
    ----------
    monitor : Monitor
        Source monitor.
    timezone : str
        IANA timezone name, e.g. "America/Los_Angeles".
    drop_empty_days : bool, optional
        After trimming, also drop leading and trailing whole local days in
        which every value of every series is missing.

    Returns
    -------
    Monitor
        Same metadata, data restricted to whole local days. May have zero
        rows if the input does not span a full local day.

    Raises
    ------
    EmptyDataError
        If ``monitor.data`` has no rows.
    TimezoneError
        If ``timezone`` is not recognized.
    """
    tz = resolve_timezone(timezone)
    data = monitor.data
    if len(data) == 0:
        raise EmptyDataError("No datetime values found in monitor data")

    hours = data[DATETIME].dt.tz_convert(tz).dt.hour.to_numpy()

    midnights = np.flatnonzero(hours == 0)
    last_hours = np.flatnonzero(hours == 23)
    start = int(midnights[0]) if midnights.size else len(hours)
    end = int(last_hours[-1]) + 1 if last_hours.size else 0

    if end <= start:
        trimmed = data.iloc[0:0]
    else:
        trimmed = data.iloc[start:end]

    if drop_empty_days and len(trimmed) and _series_ids(trimmed):
        trimmed = _drop_empty_edge_days(trimmed, tz)

    logger.debug("trim_date(%s): %d -> %d rows", timezone, len(data), len(trimmed))
    return _rebuild(monitor, monitor.meta.copy(), trimmed.copy())


def _drop_empty_edge_days(data: pd.DataFrame, tz: ZoneInfo) -> pd.DataFrame:
    """Drop leading/trailing local days in which every value is missing."""
    local_day = data[DATETIME].dt.tz_convert(tz).dt.date
    row_empty = data[_series_ids(data)].isna().all(axis=1)
    day_empty = row_empty.groupby(local_day.to_numpy()).all()

    days = list(day_empty.index)
    first, last = 0, len(days)
    while first < last and day_empty.iloc[first]:
        first += 1
    while last > first and day_empty.iloc[last - 1]:
        last -= 1

    kept_days = set(days[first:last])
    return data[local_day.isin(list(kept_days)).to_numpy()]


# ============================================================================
# Merge operator
# ============================================================================

def combine(monitor, other):
    """Combine two monitors.

    Series whose deviceDeploymentID already exists in ``monitor`` are
    dropped from ``other`` before merging: the earlier operand wins. Metadata
    rows are concatenated (``monitor`` first). Time series are joined on
    ``datetime`` with a full outer join, sorted ascending and laid onto a
    complete hourly grid so that hours covered by neither input are missing
    in every series.

    Returns
    -------
    Monitor
        Union of both monitors.

    Raises
    ------
    ContractViolation
        If the two time axes are not on one hourly grid.
    """
    ids_a = set(monitor.get_ids())
    ids_b = other.get_ids()
    overlapping = [id for id in ids_b if id in ids_a]
    unique = [id for id in ids_b if id not in ids_a]

    if overlapping:
        logger.debug("combine: keeping %d colliding series from the first monitor", len(overlapping))

    meta_b = other.meta[other.meta[ID_COLUMN].isin(unique)]
    if len(monitor.meta) == 0:
        meta = meta_b.copy()
    elif len(meta_b) == 0:
        meta = monitor.meta.copy()
    else:
        meta = pd.concat([monitor.meta, meta_b], ignore_index=True)

    data = monitor.data.merge(other.data[[DATETIME, *unique]], on=DATETIME, how="outer")
    data = data.sort_values(DATETIME, kind="mergesort").reset_index(drop=True)
    data = _complete_hourly(data)

    logger.debug(
        "combine: %d + %d -> %d series, %d rows",
        len(ids_a), len(unique), len(meta), len(data),
    )
    return _rebuild(monitor, meta, data)


def _complete_hourly(data: pd.DataFrame) -> pd.DataFrame:
    """Reindex onto every hour between the first and last timestamp.

    Raises ContractViolation when the timestamps do not share one hourly
    grid (for example one input on the hour and the other on the half hour),
    since reindexing would silently drop the off-grid rows.
    """
    if len(data) == 0:
        return data
    axis = pd.date_range(data[DATETIME].iloc[0], data[DATETIME].iloc[-1], freq="h")
    off_grid = data.loc[~data[DATETIME].isin(axis), DATETIME]
    require(
        off_grid.empty,
        "Timeseries contract violated: combined 'datetime' values are not on one hourly grid"
        + ("" if off_grid.empty else f" (first offending timestamp {off_grid.iloc[0]})")
    )
    if len(axis) == len(data):
        return data
    out = data.set_index(DATETIME).reindex(axis)
    out.index.name = DATETIME
    return out.reset_index()


# ============================================================================
# Aggregation operator
# ============================================================================

COLLAPSE_FUNCTIONS = (
    "mean", "median", "min", "max", "sum", "count", "std", "variance", "quantile",
)


def collapse(monitor, new_id: str = "generatedID", fn: str = "mean", fn_arg: Optional[float] = 0.8):
    """Collapse all series into a single series.

    The data are folded from wide (one column per series) to long
    (datetime, deviceDeploymentID, value), regrouped by ``datetime`` and
    reduced with ``fn`` across every series sharing that timestamp. The
    result is rounded to one decimal place and keeps the exact timestamp
    set of the input.

    The metadata row is the first input row with identity fields
    overwritten. It is located at the mean longitude/latitude of all input
    series (missing coordinates excluded; None if none are valid).

    Parameters
    ----------
    monitor : Monitor
        Source monitor with at least one series.
    new_id : str, optional
        deviceDeploymentID (and data column name) of the collapsed series.
    fn : str, optional
        One of ``COLLAPSE_FUNCTIONS``. Missing values are skipped; a
        timestamp with no valid value yields NaN (``count`` yields 0).
    fn_arg : float, optional
        Probability for ``fn="quantile"`` (default 0.8). Ignored otherwise.

    Raises
    ------
    EmptyDataError
        If ``monitor`` has no series.
    ValueError
        If ``fn`` is unknown or ``fn_arg`` is not a probability.
    """
    if fn not in COLLAPSE_FUNCTIONS:
        raise ValueError(f"Unknown collapse function '{fn}'. Use one of {COLLAPSE_FUNCTIONS}")
    if fn == "quantile" and (fn_arg is None or not 0.0 <= float(fn_arg) <= 1.0):
        raise ValueError(f"Quantile probability must be within [0, 1], got {fn_arg!r}")
    if not isinstance(new_id, str) or not new_id:
        raise IdentifierError(f"Collapsed deviceDeploymentID must be a non-empty string, got {new_id!r}")
    if new_id == DATETIME:
        raise IdentifierError(f"Collapsed deviceDeploymentID cannot be '{DATETIME}'")

    meta = monitor.meta
    ids = monitor.get_ids()
    if not ids:
        raise EmptyDataError("collapse requires at least one time series")

    # ----- New metadata --------------------------------------------------
    longitude = array_mean(meta["longitude"]) if "longitude" in meta.columns else None
    latitude = array_mean(meta["latitude"]) if "latitude" in meta.columns else None

    new_meta = meta.iloc[[0]].copy()
    new_meta[ID_COLUMN] = [new_id]
    new_meta["longitude"] = [np.nan if longitude is None else longitude]
    new_meta["latitude"] = [np.nan if latitude is None else latitude]

    # Only overwrite descriptive fields the column set actually carries
    optional = {
        "deviceID": new_id,
        "locationID": "xxx",  # placeholder until a location hash exists
        "locationName": new_id,
        "elevation": np.nan,
        "deviceType": None,
        "deploymentType": None,
        "houseNumber": None,
        "street": None,
        "city": None,
        "zip": None,
    }
    for name, value in optional.items():
        if name in new_meta.columns:
            new_meta[name] = [value]
    for name in ("longitude", "latitude", "elevation"):
        if name in new_meta.columns:
            new_meta[name] = new_meta[name].astype(float)

    # ----- New data: fold -> regroup by datetime -> reduce ---------------
    data = monitor.data
    long = data.melt(id_vars=[DATETIME], value_vars=ids, var_name=ID_COLUMN, value_name="value")
    grouped = long.groupby(DATETIME, sort=True)["value"]

    if fn == "count":
        reduced = grouped.count()
    elif fn == "quantile":
        reduced = grouped.quantile(float(fn_arg))
    elif fn == "sum":
        reduced = grouped.sum(min_count=1)
    elif fn == "variance":
        reduced = grouped.var()
    else:
        reduced = getattr(grouped, fn)()

    values = pd.Series(reduced.reindex(data[DATETIME]).to_numpy(dtype=float))
    new_data = pd.DataFrame({
        DATETIME: data[DATETIME].reset_index(drop=True),
        new_id: round_values(values, 1),
    })

    logger.debug("collapse(%s, %s): %d series -> 1", new_id, fn, len(ids))
    return _rebuild(monitor, new_meta, new_data)
