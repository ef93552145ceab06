"""`airmonitor` - hourly air-quality monitoring data as paired tables.

Subpackages:
- monitor: Monitor object, parsing, operators, loaders, status export
- contracts: fail-fast checks of the table invariants
- schemas: layered configuration
- cli: command-line execution
"""

from airmonitor.monitor import Monitor

__version__ = "0.1.0"

__all__ = ['Monitor', '__version__']
