"""Metadata and binding contracts.

Enforces the guarantee that a meta/data pair describes the same set of
device deployments: one metadata row per time-series column.
"""

import pandas as pd

from airmonitor.contracts.base import require
from airmonitor.contracts.timeseries import DATETIME, assert_timeseries

ID_COLUMN = "deviceDeploymentID"


def assert_metadata(meta: pd.DataFrame) -> None:
    """Enforce metadata table contract.

    Parameters
    ----------
    meta : pd.DataFrame
        Metadata table with one row per device deployment.

    Raises
    ------
    ContractViolation
        If the identifier column is missing, null or duplicated.
    """
    require(
        isinstance(meta, pd.DataFrame),
        f"Metadata contract violated: meta is {type(meta)}, expected DataFrame"
    )
    require(
        ID_COLUMN in meta.columns,
        f"Metadata contract violated: missing '{ID_COLUMN}' column"
    )

    ids = meta[ID_COLUMN]
    require(
        not ids.isna().any(),
        f"Metadata contract violated: '{ID_COLUMN}' contains missing values"
    )
    duplicated = ids[ids.duplicated()].tolist()
    require(
        not duplicated,
        f"Metadata contract violated: duplicate '{ID_COLUMN}' values {duplicated}"
    )


def assert_monitor(meta: pd.DataFrame, data: pd.DataFrame, ordered: bool = False) -> None:
    """Enforce the full monitor contract: metadata, time series and binding.

    Parameters
    ----------
    meta : pd.DataFrame
        Metadata table.

    data : pd.DataFrame
        Time-series table.

    ordered : bool, optional
        If True, the data columns must appear in the same order as the
        metadata rows (default False, set equality only).

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    assert_metadata(meta)
    assert_timeseries(data)

    meta_ids = meta[ID_COLUMN].tolist()
    data_ids = [c for c in data.columns if c != DATETIME]

    missing_in_data = sorted(set(meta_ids) - set(data_ids))
    missing_in_meta = sorted(set(data_ids) - set(meta_ids))
    require(
        not missing_in_data,
        f"Binding contract violated: meta IDs without data column {missing_in_data}"
    )
    require(
        not missing_in_meta,
        f"Binding contract violated: data columns without meta row {missing_in_meta}"
    )

    if ordered:
        require(
            meta_ids == data_ids,
            "Binding contract violated: data column order differs from meta row order"
        )
