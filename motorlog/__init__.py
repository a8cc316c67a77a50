"""
motorlog - motor-current telemetry query server

Hierarchy lookups (zone -> line -> motor) served through a single-flight
metadata cache, and telemetry series reduced by an adaptive downsampler.
"""

__version__ = "1.0.0"
