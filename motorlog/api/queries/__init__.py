"""
Telemetry Query Modules

Pure functions over a single motor series, split by concern:
- downsample.py: bounded representative subset (buckets + transitions)
- live_window.py: trailing window anchored to wall clock or last sample
- analytics.py: run summary and data freshness

Store-side queries (peewee) live in hierarchy.py, rows.py and store.py and
are imported directly, keeping these functions free of database imports.
"""

from .downsample import RANKING_METRICS, bucket_count_for, reduce_series, validate_budget
from .live_window import WindowAnchor, resolve_anchor, select_window, validate_window, window_bounds
from .analytics import DataAge, RunSummary, classify_data_age, summarize

__all__ = [
    # Downsampling
    'RANKING_METRICS',
    'bucket_count_for',
    'reduce_series',
    'validate_budget',

    # Live window
    'WindowAnchor',
    'resolve_anchor',
    'select_window',
    'validate_window',
    'window_bounds',

    # Analytics
    'DataAge',
    'RunSummary',
    'classify_data_age',
    'summarize',
]
