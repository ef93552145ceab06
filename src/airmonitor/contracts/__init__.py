"""Table contracts: fail-fast enforcement of monitor invariants.

This package enforces the structural guarantees every monitor operator
relies on. Contracts fail immediately and loudly when a table does not
satisfy its invariants; they never repair data.

Key principle:
- Pydantic validates config correctness
- Contracts validate table correctness
- Operators handle data edge cases (all-missing series, empty means)
"""

from airmonitor.contracts.failure import ContractViolation, FailurePolicy
from airmonitor.contracts.base import require
from airmonitor.contracts.timeseries import assert_timeseries
from airmonitor.contracts.monitor import assert_metadata, assert_monitor

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "require",
    "assert_timeseries",
    "assert_metadata",
    "assert_monitor",
]
