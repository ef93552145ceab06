"""Acquisition of paired ``*_meta.csv`` / ``*_data.csv`` files.

Both files of a dataset are fetched concurrently and awaited together. Each
fetch is retried a fixed number of times; if either file still fails, the
whole load fails with a single ``DataAcquisitionError`` and no partial
tables are returned.

Sources may be ``http(s)://`` URLs (fetched with requests), ``file://`` URLs
or plain filesystem paths.

URL layout::

    latest/daily  {base}/{timespan}/data/{provider}_{pollutant}_{timespan}_{meta|data}.csv
    annual        {base}/airnow/{year}/data/airnow_{pollutant}_{year}_{meta|data}.csv
    custom        {base}/{name}_{meta|data}.csv
"""

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import pandas as pd
import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from airmonitor.exceptions import DataAcquisitionError
from airmonitor.monitor.parse import parse_data, parse_meta
from airmonitor.schemas.columns import MetadataColumnSet

__all__ = [
    'CsvFetcher',
    'fetch_pair',
    'build_urls',
    'latest_urls',
    'daily_urls',
    'annual_urls',
    'custom_urls',
    'load_tables',
]

logger = logging.getLogger(__name__)

RETRYABLE = (requests.RequestException, OSError)


class CsvFetcher:
    """Reads one CSV file into an all-text DataFrame, with retries.

    Every cell is read as a string so that the ``'NA'`` sentinel is
    replaced during parsing, not by the CSV reader. Empty cells are null.

    Parameters
    ----------
    fetch_config : InternalFetchConfig
        Retry count, delay between attempts and per-request timeout.
    session : requests.Session, optional
        HTTP session. If None, the fetcher creates one and closes it in
        ``close()``. Allows injection for testing.
    """

    def __init__(self, fetch_config, session: Optional[requests.Session] = None):
        self.retries = fetch_config.retries
        self.retry_delay_sec = fetch_config.retry_delay_sec
        self.timeout_sec = fetch_config.timeout_sec
        # Created up front: both halves of a pair share it from worker threads
        self._owns_session = session is None
        self.session = requests.Session() if session is None else session

    def close(self) -> None:
        """Close the session if this fetcher created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def fetch(self, source: str) -> pd.DataFrame:
        """Fetch ``source`` with retries.

        Raises
        ------
        DataAcquisitionError
            If every attempt failed.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_fixed(self.retry_delay_sec),
            retry=retry_if_exception_type(RETRYABLE),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            return retrying(self._fetch_once, source)
        except RETRYABLE as exc:
            raise DataAcquisitionError(
                f"Failed to fetch {source} after {self.retries} attempt(s): {exc}"
            ) from exc

    def _fetch_once(self, source: str) -> pd.DataFrame:
        scheme = urlparse(source).scheme
        if scheme in ("http", "https"):
            logger.info("GET %s", source)
            response = self.session.get(source, timeout=self.timeout_sec)
            response.raise_for_status()
            return read_text_csv(io.StringIO(response.text))

        path = Path(unquote(urlparse(source).path)) if scheme == "file" else Path(source)
        logger.info("Reading %s", path)
        with path.open("r", encoding="utf-8") as f:
            return read_text_csv(f)


def read_text_csv(buffer) -> pd.DataFrame:
    """Read CSV with every cell as text; empty cells become null."""
    return pd.read_csv(buffer, dtype=str, keep_default_na=False, na_values=[""])


async def fetch_pair(fetcher, meta_url: str, data_url: str) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Fetch the metadata and data files concurrently.

    Returns
    -------
    tuple of pd.DataFrame
        Raw ``(meta, data)`` tables.

    Raises
    ------
    DataAcquisitionError
        If either fetch failed. Both failures are reported together.
    """
    results = await asyncio.gather(
        asyncio.to_thread(fetcher.fetch, meta_url),
        asyncio.to_thread(fetcher.fetch, data_url),
        return_exceptions=True,
    )

    failures = [
        (url, result)
        for url, result in zip((meta_url, data_url), results)
        if isinstance(result, BaseException)
    ]
    if failures:
        detail = "; ".join(f"{url}: {exc}" for url, exc in failures)
        raise DataAcquisitionError(f"Could not load dataset: {detail}") from failures[0][1]

    raw_meta, raw_data = results
    return raw_meta, raw_data


# ============================================================================
# URL builders
# ============================================================================

def build_urls(prefix: str) -> tuple[str, str]:
    """``(<prefix>_meta.csv, <prefix>_data.csv)``."""
    return f"{prefix}_meta.csv", f"{prefix}_data.csv"


def _timespan_urls(base_url: str, timespan: str, provider: str, pollutant: str) -> tuple[str, str]:
    base_url = base_url.rstrip("/")
    return build_urls(f"{base_url}/{timespan}/data/{provider}_{pollutant}_{timespan}")


def latest_urls(base_url: str, provider: str, pollutant: str = "PM2.5") -> tuple[str, str]:
    return _timespan_urls(base_url, "latest", provider, pollutant)


def daily_urls(base_url: str, provider: str, pollutant: str = "PM2.5") -> tuple[str, str]:
    return _timespan_urls(base_url, "daily", provider, pollutant)


def annual_urls(base_url: str, year, pollutant: str = "PM2.5") -> tuple[str, str]:
    # Annual archives are only published for AirNow
    base_url = base_url.rstrip("/")
    return build_urls(f"{base_url}/airnow/{year}/data/airnow_{pollutant}_{year}")


def custom_urls(base_name: str, base_url: str) -> tuple[str, str]:
    base_url = base_url.rstrip("/")
    if not base_url:
        return build_urls(base_name)
    return build_urls(f"{base_url}/{base_name}")


async def load_tables(
    fetcher,
    meta_url: str,
    data_url: str,
    column_set=MetadataColumnSet.CORE,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Fetch and parse a meta/data pair.

    Returns
    -------
    tuple of pd.DataFrame
        Cleaned ``(meta, data)`` tables.
    """
    raw_meta, raw_data = await fetch_pair(fetcher, meta_url, data_url)
    meta = parse_meta(raw_meta, column_set=column_set)
    data = parse_data(raw_data)
    logger.info(
        "Loaded %d series x %d hours from %s",
        len(meta), len(data), data_url,
    )
    return meta, data

