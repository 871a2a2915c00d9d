"""
Usage metering for rental sessions.

Converts an observed start/end interval into billable duration and cost.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Union

import structlog

from .errors import MalformedInput
from .money import Number
from .resources import ResourceType, resource_cost
from .timestamps import parse_timestamp
from .validation import require_positive, require_text

logger = structlog.get_logger()


@dataclass(frozen=True)
class MeteringInput:
    """Observed rental session to bill.

    ``rental_id`` is assigned externally and carried through untouched.
    """
    rental_id: str
    start_time: str
    end_time: str
    resource_type: Union[ResourceType, str]
    amount: Number
    price_per_unit_per_time: Number


@dataclass(frozen=True)
class UsageRecord:
    """Immutable record of metered usage.

    ``clamped`` is set when end_time preceded start_time and the duration
    was clamped to zero.
    """
    rental_id: str
    start_time: str
    end_time: str
    duration_seconds: int
    amount: Decimal
    cost: Decimal
    clamped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rental_id": self.rental_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
            "amount": float(self.amount),
            "cost": float(self.cost),
            "clamped": self.clamped,
        }


def meter_usage(metering_input: MeteringInput) -> UsageRecord:
    """Meter a rental session into a usage record.

    RAM cost is amount * (duration_seconds / 3600) * price, GPU cost is
    amount * (duration_seconds / 60) * price. An end time before the start
    time bills zero seconds and marks the record as clamped.

    Args:
        metering_input: Session interval and pricing

    Returns:
        UsageRecord with elapsed seconds and cost

    Raises:
        MalformedInput: If input or one of its fields has the wrong type
        MalformedTimestamp: If start_time or end_time is malformed
        OutOfRange: If amount or price is not a positive finite number
        UnknownResourceType: If resource_type is not RAM or GPU
    """
    if not isinstance(metering_input, MeteringInput):
        raise MalformedInput(
            f"input must be a MeteringInput, got {type(metering_input).__name__}"
        )

    rental_id = require_text(metering_input.rental_id, "rental_id")
    resource_type = ResourceType.parse(metering_input.resource_type)
    amount = require_positive(metering_input.amount, "amount")
    price = require_positive(metering_input.price_per_unit_per_time, "price_per_unit_per_time")
    start = parse_timestamp(metering_input.start_time, "start_time")
    end = parse_timestamp(metering_input.end_time, "end_time")

    elapsed = end - start
    clamped = elapsed < 0
    if clamped:
        logger.warning(
            "usage_interval_clamped",
            rental_id=rental_id,
            start_time=metering_input.start_time,
            end_time=metering_input.end_time,
            elapsed_seconds=elapsed,
        )
    duration_seconds = max(0, elapsed)

    cost = resource_cost(resource_type, amount, Decimal(duration_seconds), price)

    return UsageRecord(
        rental_id=rental_id,
        start_time=metering_input.start_time,
        end_time=metering_input.end_time,
        duration_seconds=duration_seconds,
        amount=amount,
        cost=cost,
        clamped=clamped,
    )
