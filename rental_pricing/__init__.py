"""
Pricing and metering for compute-resource rentals.

Quotes RAM/GPU rentals, meters observed usage into cost and aggregates
usage records. All operations are pure and safe to call concurrently.
"""

from .core.aggregation import UsageAggregate, aggregate_usage
from .core.errors import (
    MalformedInput,
    MalformedTimestamp,
    OutOfRange,
    UnknownResourceType,
    ValidationError,
)
from .core.metering import MeteringInput, UsageRecord, meter_usage
from .core.money import (
    calculate_fee,
    calculate_total_with_fee,
    calculate_utilization,
    round_to_decimals,
)
from .core.pricing import (
    RentalQuoteRequest,
    RentalQuoteResult,
    quote_rental_cost,
)
from .core.resources import ResourceType

__all__ = [
    "MalformedInput",
    "MalformedTimestamp",
    "MeteringInput",
    "OutOfRange",
    "RentalQuoteRequest",
    "RentalQuoteResult",
    "ResourceType",
    "UnknownResourceType",
    "UsageAggregate",
    "UsageRecord",
    "ValidationError",
    "aggregate_usage",
    "calculate_fee",
    "calculate_total_with_fee",
    "calculate_utilization",
    "meter_usage",
    "quote_rental_cost",
    "round_to_decimals",
]
