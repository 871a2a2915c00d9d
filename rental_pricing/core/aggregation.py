"""
Aggregation of usage records into summary statistics.

Records are trusted as-is; validation happens when they are metered.
"""

from dataclasses import dataclass
from decimal import MAX_PREC, Decimal, localcontext
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from .metering import UsageRecord
from .money import as_decimal

UsageLike = Union[UsageRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class UsageAggregate:
    """Summary over a collection of usage records."""
    total_cost: Decimal
    total_duration_seconds: int
    record_count: int
    average_cost_per_record: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cost": float(self.total_cost),
            "total_duration_seconds": self.total_duration_seconds,
            "record_count": self.record_count,
            "average_cost_per_record": float(self.average_cost_per_record),
        }


def aggregate_usage(records: Iterable[UsageLike]) -> UsageAggregate:
    """Sum cost and duration over usage records.

    Accepts UsageRecord objects or mappings with ``cost`` and
    ``duration_seconds`` keys. The input is consumed once, so generators
    work without materialising a list. An empty input yields an all-zero
    aggregate.

    Args:
        records: Usage records in any order

    Returns:
        UsageAggregate; identical for any permutation of the same records
    """
    total_cost = Decimal(0)
    total_duration = 0
    count = 0

    with localcontext() as ctx:
        # exact sums keep the result independent of record order
        ctx.prec = MAX_PREC
        for record in records:
            cost, duration_seconds = _cost_and_duration(record)
            total_cost += cost
            total_duration += duration_seconds
            count += 1

    if count:
        average = total_cost / count
    else:
        average = Decimal(0)

    return UsageAggregate(
        total_cost=total_cost,
        total_duration_seconds=total_duration,
        record_count=count,
        average_cost_per_record=average,
    )


def _cost_and_duration(record: UsageLike) -> Tuple[Decimal, int]:
    if isinstance(record, UsageRecord):
        return as_decimal(record.cost), int(record.duration_seconds)
    return as_decimal(record["cost"]), int(record["duration_seconds"])
