import numpy as np
import pandas as pd

from airmonitor.schemas.columns import CORE_COLUMNS


def make_meta(ids, **columns):
    """
    Core-column metadata table for ``ids``.

    Keyword arguments override whole columns (one value per id).
    Unspecified columns get plausible defaults.
    """
    n = len(ids)
    meta = pd.DataFrame({name: pd.Series([None] * n, dtype=object) for name in CORE_COLUMNS})
    meta["deviceDeploymentID"] = list(ids)
    meta["deviceID"] = [f"dev_{i}" for i in ids]
    meta["locationName"] = [f"Site {i}" for i in ids]
    meta["longitude"] = np.linspace(-120.0, -118.0, n) if n else []
    meta["latitude"] = np.linspace(34.0, 36.0, n) if n else []
    meta["elevation"] = [100.0] * n
    meta["countryCode"] = ["US"] * n
    meta["stateCode"] = ["CA"] * n
    meta["timezone"] = ["America/Los_Angeles"] * n
    for name, values in columns.items():
        meta[name] = list(values)
    for name in ("longitude", "latitude", "elevation"):
        meta[name] = meta[name].astype(float)
    return meta


def make_data(values, start="2024-01-01 00:00", periods=None):
    """
    Hourly UTC time-series table.

    ``values`` maps deviceDeploymentID -> list of readings (None/NaN for
    missing). All lists must have ``periods`` entries.
    """
    if periods is None:
        periods = len(next(iter(values.values()))) if values else 0
    datetime = pd.date_range(start, periods=periods, freq="h", tz="UTC")
    data = pd.DataFrame({"datetime": datetime.astype("datetime64[ns, UTC]")})
    for id, series in values.items():
        data[id] = np.array([np.nan if v is None else v for v in series], dtype=float)
    return data


def write_csv_pair(directory, name, meta_rows, data_rows):
    """
    Write ``<name>_meta.csv`` and ``<name>_data.csv`` as raw text.

    Rows are lists of strings; the first row is the header.
    """
    meta_path = directory / f"{name}_meta.csv"
    data_path = directory / f"{name}_data.csv"
    meta_path.write_text("\n".join(",".join(r) for r in meta_rows) + "\n", encoding="utf-8")
    data_path.write_text("\n".join(",".join(r) for r in data_rows) + "\n", encoding="utf-8")
    return meta_path, data_path
