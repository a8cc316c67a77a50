"""
Query utility functions.

Shared helpers used across the store query modules.
"""

import functools
import logging

from peewee import PeeweeException

from ...core.errors import BackingStoreUnavailable

logger = logging.getLogger("motorlog.store")


def store_call(func):
    """Re-raise database failures as BackingStoreUnavailable."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PeeweeException as e:
            logger.error(f"{func.__name__} failed: {e}")
            raise BackingStoreUnavailable(f"{func.__name__} failed: {e}") from e
    return wrapper


def iso_to_sqlite_weekdays(days):
    """ISO weekdays (Monday=1 .. Sunday=7) as SQLite strftime('%w') values (Sunday=0)."""
    return sorted(str(d % 7) for d in days)
