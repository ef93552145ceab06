"""Command-line interface for airmonitor runs.

This package contains the execution logic; the ``airmonitor`` console
script and ``scripts/run_monitor.py`` are thin wrappers around it.
"""

from airmonitor.cli.run_monitor import run_monitor, main

__all__ = ['run_monitor', 'main']
