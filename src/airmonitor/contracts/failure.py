"""Centralized failure policy for contract violations.

Contracts fail fast, loud, and once. All schema violations raise the same
exception type, so callers can treat broken tables uniformly.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """Failure policy for contract violations.

    FAIL_FAST (default): Raise immediately on contract violation

    Tables are never repaired by a contract. Cleaning belongs to
    ``airmonitor.monitor.parse``; contracts only check its output.
    """
    FAIL_FAST = "fail_fast"


class ContractViolation(RuntimeError):
    """Raised when a monitor table contract is violated.

    This indicates that a meta/data table does not satisfy the invariants
    every operator relies on: missing ``datetime`` column, non-hourly or
    non-UTC time axis, non-numeric cells, or meta/data misalignment.

    Key distinction:
    - ContractViolation: broken table (bug in parsing or in an operator)
    - IdentifierError / FilterTypeError: caller asked for something impossible
    - DataAcquisitionError: remote files could not be fetched
    """
    pass
