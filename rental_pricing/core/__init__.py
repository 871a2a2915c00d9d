"""
Core modules for rental pricing.

This package contains the rate calculator, usage meter and aggregator,
together with the shared timestamp, fee and rounding helpers they rely on.
"""
