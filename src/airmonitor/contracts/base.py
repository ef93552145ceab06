"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
"""

from airmonitor.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a table contract.

    This is called after parsing and by tests to verify that a table
    satisfies its invariants. It is fail-fast: no recovery, no fallback,
    no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation.

    Raises
    ------
    ContractViolation
        If condition is False.

    Examples
    --------
    >>> require("datetime" in data.columns, "Timeseries contract: missing 'datetime'")
    >>> require(meta["deviceDeploymentID"].is_unique, "Metadata contract: duplicate IDs")
    """
    if not condition:
        raise ContractViolation(message)
