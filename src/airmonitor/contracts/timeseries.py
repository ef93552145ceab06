"""Time-series table contract.

Enforces the guarantee that after parsing (and after every operator), the
``data`` table sits on a regular hourly UTC grid and holds only finite
numbers or missing values.
"""

import numbers

import numpy as np
import pandas as pd

from airmonitor.contracts.base import require

DATETIME = "datetime"
ONE_HOUR = pd.Timedelta(hours=1)


def assert_timeseries(data: pd.DataFrame) -> None:
    """Enforce time-series table contract.

    Called immediately after ``parse_data()`` and available to tests as a
    standalone assertion. This is a precondition check, not a repair step.

    Parameters
    ----------
    data : pd.DataFrame
        Time-series table with a ``datetime`` column and one column per
        deviceDeploymentID.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        isinstance(data, pd.DataFrame),
        f"Timeseries contract violated: data is {type(data)}, expected DataFrame"
    )
    require(
        DATETIME in data.columns,
        "Timeseries contract violated: missing 'datetime' column"
    )
    require(
        data.columns[0] == DATETIME,
        f"Timeseries contract violated: first column is '{data.columns[0]}', expected 'datetime'"
    )
    require(
        data.columns.is_unique,
        "Timeseries contract violated: duplicate column names"
    )

    # Zone identity: tz-aware and UTC
    datetime = data[DATETIME]
    require(
        isinstance(datetime.dtype, pd.DatetimeTZDtype),
        f"Timeseries contract violated: 'datetime' dtype is {datetime.dtype}, expected tz-aware UTC"
    )
    require(
        str(datetime.dt.tz) == "UTC",
        f"Timeseries contract violated: 'datetime' zone is {datetime.dt.tz}, expected UTC"
    )
    require(
        not datetime.isna().any(),
        "Timeseries contract violated: 'datetime' contains missing values"
    )

    # Regular hourly grid: no gaps, no duplicates, ascending
    if len(datetime) > 1:
        steps = datetime.diff().iloc[1:]
        bad = steps[steps != ONE_HOUR]
        require(
            bad.empty,
            "Timeseries contract violated: 'datetime' is not hourly"
            + ("" if bad.empty else f" at row {bad.index[0]} (step {bad.iloc[0]})")
        )

    for name in data.columns[1:]:
        column = data[name]
        if not pd.api.types.is_numeric_dtype(column):
            # Object columns pass when every non-null cell is a number
            bad = [
                value for value in column.dropna()
                if isinstance(value, bool) or not isinstance(value, numbers.Real)
            ]
            require(
                not bad,
                f"Timeseries contract violated: column '{name}' dtype is {column.dtype}, expected numeric"
                + ("" if not bad else f" (found {bad[0]!r})")
            )
        values = pd.to_numeric(column, errors="coerce").to_numpy(dtype=float)
        require(
            not np.isinf(values).any(),
            f"Timeseries contract violated: column '{name}' contains non-finite values"
        )
