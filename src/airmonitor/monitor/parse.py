"""Parse and clean raw CSV tables into canonical ``meta`` and ``data`` tables.

Raw tables are read with every cell as text so that the ``'NA'`` sentinel
survives until it is replaced here. Cleaning:

- meta: replace ``'NA'`` with null, coerce longitude/latitude/elevation to
  float, optionally restrict to a named column set
- data: parse ``datetime`` as UTC, replace ``'NA'`` with null, parse floats,
  replace non-finite values with null, lift negative values to zero

The cleaned ``data`` table is checked with ``assert_timeseries()`` before it
is returned.
"""

import logging
from typing import Callable, Iterable

import numpy as np
import pandas as pd

from airmonitor.contracts import assert_metadata, assert_timeseries, require
from airmonitor.contracts.monitor import ID_COLUMN
from airmonitor.contracts.timeseries import DATETIME
from airmonitor.schemas.columns import FLOAT_COLUMNS, MetadataColumnSet, columns_for

__all__ = ['map_columns', 'parse_meta', 'parse_data', 'NA_SENTINEL', 'DATETIME_DTYPE']

logger = logging.getLogger(__name__)

NA_SENTINEL = "NA"
DATETIME_DTYPE = "datetime64[ns, UTC]"


def map_columns(
    df: pd.DataFrame,
    columns: Iterable[str],
    func: Callable[[pd.Series], pd.Series],
) -> pd.DataFrame:
    """Apply a pure per-column function to the named columns.

    Returns a new DataFrame; ``df`` is not modified. ``func`` receives one
    column as a Series and must return a Series of the same length.
    """
    out = df.copy()
    for name in columns:
        out[name] = func(out[name])
    return out


def _replace_na(series: pd.Series) -> pd.Series:
    return series.mask(series.astype(object) == NA_SENTINEL)


def _to_float(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce").astype(float)


def _clean_values(series: pd.Series) -> pd.Series:
    values = _to_float(_replace_na(series))
    # Negative readings are sensor noise: lift to zero, never drop.
    # Test with "< 0" so that missing values stay missing.
    values = values.mask(values < 0, 0.0)
    # Clamp first, so -inf ends up as 0 and only +inf is left to null.
    return values.mask(np.isinf(values))


def parse_meta(
    raw: pd.DataFrame,
    column_set=MetadataColumnSet.CORE,
) -> pd.DataFrame:
    """Clean a raw metadata table.

    Parameters
    ----------
    raw : pd.DataFrame
        Metadata as read from ``*_meta.csv``.
    column_set : MetadataColumnSet or str, optional
        Which columns to retain. ``ALL`` keeps every input column; any other
        set selects (and orders) its columns, adding missing ones as null.

    Returns
    -------
    pd.DataFrame
        Cleaned metadata table.

    Raises
    ------
    ContractViolation
        If ``deviceDeploymentID`` is missing or not unique.
    """
    columns = list(raw.columns)
    meta = map_columns(raw, columns, _replace_na)
    meta = map_columns(meta, [c for c in FLOAT_COLUMNS if c in columns], _to_float)

    selected = columns_for(column_set)
    if selected is not None:
        missing = [c for c in selected if c not in columns]
        if missing:
            logger.warning("Metadata is missing columns %s (filled with null)", missing)
        meta = meta.reindex(columns=list(selected))
        for name in FLOAT_COLUMNS:
            if name in selected:
                meta[name] = meta[name].astype(float)

    meta = meta.reset_index(drop=True)
    if ID_COLUMN in meta.columns:
        meta[ID_COLUMN] = meta[ID_COLUMN].astype(object)

    assert_metadata(meta)
    logger.debug("Parsed metadata: %d rows, %d columns", len(meta), len(meta.columns))
    return meta


def parse_data(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean a raw time-series table.

    The ``datetime`` column must be present; every other column is treated
    as one device deployment.

    Parameters
    ----------
    raw : pd.DataFrame
        Time series as read from ``*_data.csv``.

    Returns
    -------
    pd.DataFrame
        ``datetime`` (UTC) followed by one float column per deployment.

    Raises
    ------
    ContractViolation
        If ``datetime`` is missing or the cleaned table is not a regular
        hourly UTC grid of finite-or-missing values.
    """
    require(
        DATETIME in raw.columns,
        "Timeseries contract violated: missing 'datetime' column"
    )

    ids = [c for c in raw.columns if c != DATETIME]
    data = map_columns(raw, ids, _clean_values)
    data[DATETIME] = pd.to_datetime(data[DATETIME], utc=True).astype(DATETIME_DTYPE)
    data = data[[DATETIME, *ids]].reset_index(drop=True)

    assert_timeseries(data)
    logger.debug("Parsed data: %d rows, %d series", len(data), len(ids))
    return data
