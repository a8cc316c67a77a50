#!/usr/bin/env python3
"""
motorlog Error Taxonomy

- InvalidArgument: caller contract violation, rejected before any store call
- BackingStoreUnavailable: the store failed (connection, timeout, query error)

An empty result is not an error: queries return empty lists.
"""


class MotorLogError(Exception):
    """Base class for all motorlog errors."""


class InvalidArgument(MotorLogError, ValueError):
    """Malformed identity, non-positive point budget, negative window, etc."""


class BackingStoreUnavailable(MotorLogError):
    """Backing store call failed. Never cached; the next call retries."""
