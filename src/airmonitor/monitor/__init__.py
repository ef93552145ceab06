"""Monitor object, its operators and loaders.

- core: the Monitor class (paired meta/data tables, accessors, loaders)
- parse: raw CSV tables -> canonical meta/data tables
- transform: select, filter, drop_empty, trim_date, combine, collapse
- status: current status and GeoJSON export
- load: concurrent, retried fetch of meta/data file pairs
"""

from airmonitor.monitor.core import Monitor

__all__ = ['Monitor']
