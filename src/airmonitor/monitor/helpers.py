"""Small helpers shared by the monitor operators.

- array_mean: mean of the finite values in a sequence, None when there are none
- round_values: round a numeric Series, keeping missing values missing
- normalize_ids: turn a deviceDeploymentID argument into a checked list
- validate_device_id: resolve a single deviceDeploymentID argument
"""

import logging
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from airmonitor.exceptions import IdentifierError

__all__ = ['array_mean', 'round_values', 'normalize_ids', 'validate_device_id']

logger = logging.getLogger(__name__)


def array_mean(values: Iterable) -> Optional[float]:
    """Arithmetic mean of the finite numeric entries of ``values``.

    Non-numeric entries, None, NaN and +/-Inf are ignored. The mean of zero
    valid values is undefined and returned as None (not an exception).

    Examples
    --------
    >>> array_mean([1.0, None, 3.0, float("nan")])
    2.0
    >>> array_mean([None]) is None
    True
    """
    numbers = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce")
    arr = numbers.to_numpy(dtype=float)
    valid = arr[np.isfinite(arr)]
    if valid.size == 0:
        return None
    return float(valid.mean())


def round_values(series: pd.Series, digits: int = 1) -> pd.Series:
    """Round a numeric Series to ``digits`` decimals (NaN stays NaN)."""
    return series.astype(float).round(digits)


def normalize_ids(ids: Union[str, Iterable[str]]) -> list[str]:
    """Normalize a deviceDeploymentID argument to a list of strings.

    Accepts a single string or an ordered collection of strings. Rejects
    empty input, non-string entries and duplicates.

    Raises
    ------
    IdentifierError
        If the argument is empty, malformed or contains duplicates.
    """
    if isinstance(ids, str):
        ids = [ids]
    elif isinstance(ids, (list, tuple, pd.Index, pd.Series, np.ndarray)):
        ids = list(ids)
    else:
        raise IdentifierError(
            f"Expected a deviceDeploymentID string or a list of strings. Received: {ids!r}"
        )

    if len(ids) == 0:
        raise IdentifierError("ids must be a non-empty list of deviceDeploymentIDs")

    bad = [i for i in ids if not isinstance(i, str)]
    if bad:
        raise IdentifierError(f"deviceDeploymentIDs must be strings. Received: {bad!r}")

    seen = set()
    duplicates = []
    for i in ids:
        if i in seen and i not in duplicates:
            duplicates.append(i)
        seen.add(i)
    if duplicates:
        raise IdentifierError(f"Duplicate deviceDeploymentIDs: {duplicates}")

    return ids


def validate_device_id(available: Iterable[str], id) -> str:
    """Resolve a single deviceDeploymentID.

    Accepts either a string or a single-element list of strings and checks
    that it is one of ``available``.

    Raises
    ------
    IdentifierError
        If the argument has the wrong shape or the ID is unknown.
    """
    if isinstance(id, str):
        device_id = id
    elif isinstance(id, (list, tuple)) and len(id) == 1 and isinstance(id[0], str):
        device_id = id[0]
    else:
        raise IdentifierError(
            "Expected deviceDeploymentID to be a string or a single-element "
            f"string list. Received: {id!r}"
        )

    if device_id not in set(available):
        raise IdentifierError(f"deviceDeploymentID '{device_id}' not found")

    return device_id
