"""Formal monitor invariants.

This file documents what every meta/data pair MUST satisfy. This is
architecture, not code. Use this file as a reviewer anchor and system reference.
"""

MONITOR_INVARIANTS = {
    "metadata": [
        "One row per device deployment",
        "'deviceDeploymentID' column exists, values are non-null strings",
        "'deviceDeploymentID' values are unique",
        "longitude/latitude/elevation are float typed (elevation may be NaN)",
    ],

    "timeseries": [
        "'datetime' column exists and is the first column",
        "'datetime' is timezone-aware with UTC zone",
        "'datetime' is strictly increasing in steps of exactly one hour",
        "Every other column is numeric: finite value or NaN, never +/-Inf",
    ],

    "binding": [
        "Non-'datetime' data columns == set of meta 'deviceDeploymentID'",
        "select() additionally guarantees identical order",
    ],
}

# Which operators must restore which invariants before returning
OPERATOR_GUARANTEES = {
    "select": ["metadata", "timeseries", "binding (ordered)"],
    "filter_by_value": ["metadata", "timeseries", "binding (ordered)"],
    "drop_empty": ["metadata", "timeseries", "binding (ordered)"],
    "trim_date": ["metadata", "timeseries", "binding"],
    "combine": ["metadata", "timeseries", "binding (ordered)"],
    "collapse": ["metadata", "timeseries", "binding (ordered)"],
}
