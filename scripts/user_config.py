"""airmonitor user configuration.

This is the user-facing configuration file. Only list what should differ
from the expert defaults in src/airmonitor/schemas/param.py

Usage:
    python scripts/run_monitor.py latest --config scripts/user_config.py
    airmonitor daily --config scripts/user_config.py --trim America/Los_Angeles
"""

CONFIG = {
    # ========================================================================
    # ARCHIVE
    # ========================================================================
    "PROVIDER": "airnow",     # "airnow", "airsis" or "wrcc"
    # "BASE_URL": "https://airfire-data-exports.s3.us-west-2.amazonaws.com/monitoring/v2",

    # ========================================================================
    # FETCH
    # ========================================================================
    "RETRIES": 3,             # Attempts per file
    "RETRY_DELAY_SEC": 2,     # Seconds between attempts
    "TIMEOUT_SEC": 30,        # Per-request timeout

    # ========================================================================
    # PARSING / OPERATORS
    # ========================================================================
    "COLUMN_SET": "core",     # "core", "minimal", "annual" or "all"
    "DROP_EMPTY_DAYS": False, # trim_date(): also drop all-missing edge days
    "VALUE_DIGITS": 1,        # Decimals in the GeoJSON last_PM2.5 property

    "LOG_LEVEL": "INFO",
}
