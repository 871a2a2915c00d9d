"""
Resource types and their billing time units.

RAM is billed per unit-hour, GPU per unit-minute.
"""

from decimal import Decimal
from enum import Enum
from typing import Union

from .errors import UnknownResourceType


class ResourceType(str, Enum):
    """Kind of compute resource being rented."""
    RAM = "RAM"
    GPU = "GPU"

    @property
    def seconds_per_unit(self) -> int:
        """Length of one billing time unit in seconds."""
        return _SECONDS_PER_UNIT[self]

    @property
    def units_per_hour(self) -> int:
        """Number of billing time units in one hour."""
        return 3600 // self.seconds_per_unit

    @classmethod
    def parse(cls, value: Union["ResourceType", str], field: str = "resource_type") -> "ResourceType":
        """Resolve a resource type, rejecting anything but the exact names.

        Args:
            value: ResourceType member or its string name
            field: Field name reported on failure

        Returns:
            Matching ResourceType

        Raises:
            UnknownResourceType: If value is not RAM or GPU
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        valid = [member.value for member in cls]
        raise UnknownResourceType(
            f"Unknown resource type: {value!r} (expected one of: {valid})",
            field=field,
        )


_SECONDS_PER_UNIT = {
    ResourceType.RAM: 3600,
    ResourceType.GPU: 60,
}


def resource_cost(
    resource_type: ResourceType,
    amount: Decimal,
    seconds: Decimal,
    price_per_unit_per_time: Decimal,
) -> Decimal:
    """Cost of holding ``amount`` units for ``seconds`` at the per-unit-time price.

    The division by the time unit is applied last so that exact inputs
    give exact costs (8 GB * 3600 s * 0.1 / 3600 == 0.8).
    """
    return amount * seconds * price_per_unit_per_time / Decimal(resource_type.seconds_per_unit)
