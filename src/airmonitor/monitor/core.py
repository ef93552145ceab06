"""Monitor: paired metadata and hourly time-series tables.

A Monitor holds two tables bound by ``deviceDeploymentID``:

- ``meta``: one row per device deployment
- ``data``: a ``datetime`` column (UTC, hourly) followed by one column per
  device deployment

Every operator returns a new Monitor and leaves its input untouched. The
async loaders are the only methods that replace the tables of an existing
instance; they return ``self`` so that calls can be chained after
``await``::

    monitor = await Monitor().load_latest()
    status = monitor.select(["a", "b"]).trim_date("America/Los_Angeles")
"""

import logging
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

from airmonitor.contracts import assert_monitor
from airmonitor.contracts.monitor import ID_COLUMN
from airmonitor.contracts.timeseries import DATETIME
from airmonitor.exceptions import UnknownColumnError
from airmonitor.monitor import load, status, transform
from airmonitor.monitor.helpers import round_values, validate_device_id
from airmonitor.monitor.parse import DATETIME_DTYPE
from airmonitor.schemas import InternalConfig, resolve_config
from airmonitor.schemas.columns import CORE_COLUMNS, FLOAT_COLUMNS, MetadataColumnSet

__all__ = ['Monitor']

logger = logging.getLogger(__name__)


def _empty_meta() -> pd.DataFrame:
    meta = pd.DataFrame({name: pd.Series(dtype=object) for name in CORE_COLUMNS})
    for name in FLOAT_COLUMNS:
        meta[name] = meta[name].astype(float)
    return meta


def _empty_data() -> pd.DataFrame:
    return pd.DataFrame({DATETIME: pd.Series(dtype=DATETIME_DTYPE)})


class Monitor:
    """Paired ``meta``/``data`` tables for a set of air-quality monitors.

    Parameters
    ----------
    meta : pd.DataFrame, optional
        Metadata table. Defaults to an empty table with the core columns.
    data : pd.DataFrame, optional
        Time-series table. Defaults to a lone, empty ``datetime`` column.
    config : InternalConfig, optional
        Runtime configuration. Defaults to ``resolve_config()``.

    Raises
    ------
    ContractViolation
        If the tables violate the metadata, time-series or binding contract.
    """

    def __init__(
        self,
        meta: Optional[pd.DataFrame] = None,
        data: Optional[pd.DataFrame] = None,
        config: Optional[InternalConfig] = None,
    ):
        self.meta = _empty_meta() if meta is None else meta
        self.data = _empty_data() if data is None else data
        self.config = resolve_config() if config is None else config
        assert_monitor(self.meta, self.data)

    def __repr__(self) -> str:
        return f"Monitor({self.count()} series, {len(self.data)} hours)"

    # ========================================================================
    # Loaders (replace tables in place)
    # ========================================================================

    def _fetcher(self):
        return load.CsvFetcher(self.config.fetch)

    async def _load(self, urls: tuple[str, str], column_set, fetcher=None) -> "Monitor":
        meta_url, data_url = urls
        if fetcher is None:
            with self._fetcher() as owned:
                meta, data = await load.load_tables(owned, meta_url, data_url, column_set=column_set)
        else:
            meta, data = await load.load_tables(fetcher, meta_url, data_url, column_set=column_set)
        assert_monitor(meta, data)
        self.meta = meta
        self.data = data
        return self

    async def load_latest(self, provider: Optional[str] = None, base_url: Optional[str] = None, fetcher=None) -> "Monitor":
        """Load the most recent days of data (refreshed every few minutes).

        Parameters
        ----------
        provider : str, optional
            "airnow", "airsis" or "wrcc". Defaults to ``config.archive.provider``.
        base_url : str, optional
            Archive root. Defaults to ``config.archive.base_url``.
        fetcher : CsvFetcher, optional
            Injectable fetcher (for testing).
        """
        archive = self.config.archive
        urls = load.latest_urls(base_url or archive.base_url, provider or archive.provider, archive.pollutant)
        return await self._load(urls, self.config.metadata.column_set, fetcher)

    async def load_daily(self, provider: Optional[str] = None, base_url: Optional[str] = None, fetcher=None) -> "Monitor":
        """Load the rolling multi-week window (refreshed once per day)."""
        archive = self.config.archive
        urls = load.daily_urls(base_url or archive.base_url, provider or archive.provider, archive.pollutant)
        return await self._load(urls, self.config.metadata.column_set, fetcher)

    async def load_annual(self, year: Union[int, str], base_url: Optional[str] = None, fetcher=None) -> "Monitor":
        """Load one calendar year of AirNow data.

        Annual archives use the ``annual`` metadata column set.
        """
        archive = self.config.archive
        urls = load.annual_urls(base_url or archive.base_url, year, archive.pollutant)
        return await self._load(urls, MetadataColumnSet.ANNUAL, fetcher)

    async def load_custom(
        self,
        base_name: str,
        base_url: str,
        use_all_columns: bool = True,
        fetcher=None,
    ) -> "Monitor":
        """Load ``<base_url>/<base_name>_meta.csv`` and ``..._data.csv``.

        Parameters
        ----------
        base_name : str
            File name prefix shared by the two files.
        base_url : str
            URL or directory holding the files.
        use_all_columns : bool, optional
            Keep every metadata column (default) or only the core set.
        """
        urls = load.custom_urls(base_name, base_url)
        column_set = MetadataColumnSet.ALL if use_all_columns else MetadataColumnSet.CORE
        return await self._load(urls, column_set, fetcher)

    # ========================================================================
    # Operators (return new instances)
    # ========================================================================

    def select(self, ids) -> "Monitor":
        return transform.select(self, ids)

    def filter_by_value(self, column: str, value) -> "Monitor":
        return transform.filter_by_value(self, column, value)

    def drop_empty(self) -> "Monitor":
        return transform.drop_empty(self)

    def trim_date(self, timezone: str, drop_empty_days: Optional[bool] = None) -> "Monitor":
        if drop_empty_days is None:
            drop_empty_days = self.config.trim.drop_empty_days
        return transform.trim_date(self, timezone, drop_empty_days=drop_empty_days)

    def combine(self, other: "Monitor") -> "Monitor":
        return transform.combine(self, other)

    def collapse(self, new_id: str = "generatedID", fn: str = "mean", fn_arg: Optional[float] = 0.8) -> "Monitor":
        return transform.collapse(self, new_id=new_id, fn=fn, fn_arg=fn_arg)

    def get_current_status(self) -> pd.DataFrame:
        return status.get_current_status(self)

    def create_geojson(self, value_digits: Optional[int] = None) -> dict:
        return status.create_geojson(self, value_digits=value_digits)

    # ========================================================================
    # Accessors
    # ========================================================================

    def get_ids(self) -> list[str]:
        """deviceDeploymentIDs in metadata order."""
        return self.meta[ID_COLUMN].tolist()

    def count(self) -> int:
        """Number of series."""
        return len(self.meta)

    def get_datetime(self) -> pd.DatetimeIndex:
        """UTC timestamps of the time axis."""
        return pd.DatetimeIndex(self.data[DATETIME])

    def validate_device_id(self, id) -> str:
        return validate_device_id(self.get_ids(), id)

    def get_meta_object(self, id) -> dict[str, Any]:
        """One metadata row as a dict, missing values as None."""
        device_id = self.validate_device_id(id)
        row = self.meta.loc[self.meta[ID_COLUMN] == device_id].iloc[0]
        return {k: (None if _is_missing(v) else v) for k, v in row.items()}

    def get_metadata(self, id, field: str):
        """Single metadata value, None when missing.

        Raises
        ------
        UnknownColumnError
            If ``field`` is not a metadata column.
        """
        if field not in self.meta.columns:
            raise UnknownColumnError(f"Column '{field}' not found in metadata")
        return self.get_meta_object(id)[field]

    def get_timezone(self, id) -> Optional[str]:
        return self.get_metadata(id, "timezone")

    def get_values(self, id) -> list[Optional[float]]:
        """Values of one series rounded to one decimal, missing as None."""
        device_id = self.validate_device_id(id)
        values = round_values(self.data[device_id], 1)
        return [None if np.isnan(v) else float(v) for v in values.to_numpy(dtype=float)]


def _is_missing(value) -> bool:
    if isinstance(value, (list, tuple, dict)):
        return False
    return bool(pd.isna(value))
