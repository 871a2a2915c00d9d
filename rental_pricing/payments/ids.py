"""
Opaque identifiers for payments, quotes and metering records.

IDs are derived from the wall clock; callers must treat them as opaque.
"""

import time
from typing import Callable

from .proofs import sha256_hex

Clock = Callable[[], float]


def generate_payment_id(clock: Clock = time.time_ns) -> str:
    """``pay_`` followed by 16 hex chars of a hash over the current time."""
    digest = sha256_hex(f"payment_{int(clock())}")
    return f"pay_{digest[:16]}"


def generate_quote_id(clock: Clock = time.time) -> str:
    """``quote_<epoch seconds>_<seconds mod 10000>``."""
    timestamp = int(clock())
    return f"quote_{timestamp}_{timestamp % 10000}"


def generate_metering_record_id(clock: Clock = time.time) -> str:
    """``meter_<epoch seconds>_<seconds mod 100000>``."""
    timestamp = int(clock())
    return f"meter_{timestamp}_{timestamp % 100000}"
