#!/usr/bin/env python3
"""``airmonitor`` runner for a source checkout.

Usage:
    python scripts/run_monitor.py latest --config scripts/user_config.py
    python scripts/run_monitor.py daily --provider wrcc --trim America/Denver
    python scripts/run_monitor.py annual --year 2023 --format csv -o status.csv

Note: User config in scripts/user_config.py, expert defaults in
src/airmonitor/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from airmonitor.cli.run_monitor import main


if __name__ == "__main__":
    sys.exit(main())
