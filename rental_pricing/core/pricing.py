"""
Rental pricing and provider earnings.

Turns a rental request into a cost breakdown at quote time.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from .errors import MalformedInput
from .money import Number, as_decimal, fee_amount
from .resources import ResourceType, resource_cost
from .validation import (
    optional_text,
    require_duration_minutes,
    require_percent,
    require_positive,
)
from rental_pricing.config.loader import DEFAULT_CONFIG, PlatformConfig

SECONDS_PER_MINUTE = Decimal(60)
HOURS_PER_DAY = Decimal(24)
DAYS_PER_MONTH = Decimal(30)
UTILIZATION_TIERS = (50, 75, 100)


@dataclass(frozen=True)
class RentalQuoteRequest:
    """Parameters of a rental to be quoted.

    ``price_per_unit_per_time`` is per unit-hour for RAM and per
    unit-minute for GPU. Unset currency and fee fall back to the
    platform configuration.
    """
    resource_type: Union[ResourceType, str]
    amount: Number
    duration_minutes: Number
    price_per_unit_per_time: Number
    currency: Optional[str] = None
    platform_fee_percent: Optional[Number] = None


@dataclass(frozen=True)
class CostBreakdown:
    """Cost components of a quote."""
    resource_cost: Decimal
    platform_fee: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, float]:
        return {
            "resource_cost": float(self.resource_cost),
            "platform_fee": float(self.platform_fee),
            "total": float(self.total),
        }


@dataclass(frozen=True)
class RentalQuoteResult:
    """Priced rental. ``total`` is always ``resource_cost + platform_fee``."""
    resource_type: ResourceType
    amount: Decimal
    duration_minutes: Decimal
    unit_price: Decimal
    resource_cost: Decimal
    platform_fee: Decimal
    total: Decimal
    currency: str
    breakdown: CostBreakdown

    @property
    def subtotal(self) -> Decimal:
        """Cost before the platform fee."""
        return self.resource_cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_type": self.resource_type.value,
            "amount": float(self.amount),
            "duration_minutes": float(self.duration_minutes),
            "unit_price": float(self.unit_price),
            "subtotal": float(self.resource_cost),
            "resource_cost": float(self.resource_cost),
            "platform_fee": float(self.platform_fee),
            "total": float(self.total),
            "currency": self.currency,
            "breakdown": self.breakdown.to_dict(),
        }


def quote_rental_cost(
    request: RentalQuoteRequest,
    config: Optional[PlatformConfig] = None,
) -> RentalQuoteResult:
    """Price a rental request.

    RAM is billed per unit-hour: amount * (duration_minutes / 60) * price.
    GPU is billed per unit-minute: amount * duration_minutes * price.
    The platform fee is a percentage of the resource cost.

    Args:
        request: Rental parameters
        config: Platform defaults (fee, currency, duration ceiling)

    Returns:
        RentalQuoteResult with the full cost breakdown

    Raises:
        MalformedInput: If request or one of its fields has the wrong type
        OutOfRange: If a number is non-positive, non-finite, the duration
            exceeds the ceiling or the fee lies outside [0, 100]
        UnknownResourceType: If resource_type is not RAM or GPU
    """
    config = config or DEFAULT_CONFIG
    if not isinstance(request, RentalQuoteRequest):
        raise MalformedInput(
            f"request must be a RentalQuoteRequest, got {type(request).__name__}"
        )

    resource_type = ResourceType.parse(request.resource_type)
    amount = require_positive(request.amount, "amount")
    duration_minutes = require_duration_minutes(
        request.duration_minutes, config.max_duration_minutes
    )
    price = require_positive(request.price_per_unit_per_time, "price_per_unit_per_time")
    if request.platform_fee_percent is None:
        fee_percent = as_decimal(config.platform_fee_percent)
    else:
        fee_percent = require_percent(request.platform_fee_percent, "platform_fee_percent")
    currency = optional_text(request.currency, "currency", config.currency)

    cost = resource_cost(resource_type, amount, duration_minutes * SECONDS_PER_MINUTE, price)
    platform_fee = fee_amount(cost, fee_percent)
    total = cost + platform_fee

    return RentalQuoteResult(
        resource_type=resource_type,
        amount=amount,
        duration_minutes=duration_minutes,
        unit_price=price,
        resource_cost=cost,
        platform_fee=platform_fee,
        total=total,
        currency=currency,
        breakdown=CostBreakdown(
            resource_cost=cost,
            platform_fee=platform_fee,
            total=total,
        ),
    )


@dataclass(frozen=True)
class EarningsRequest:
    """Provider offer to project earnings for."""
    resource_type: Union[ResourceType, str]
    amount: Number
    price_per_unit_per_time: Number
    utilization_percent: Number


@dataclass(frozen=True)
class EarningsProjection:
    """Projected provider income at a given utilization."""
    hourly_rate: Decimal
    daily_earnings: Decimal
    monthly_earnings: Decimal
    utilization_breakdown: Dict[int, Decimal]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hourly_rate": float(self.hourly_rate),
            "daily_earnings": float(self.daily_earnings),
            "monthly_earnings": float(self.monthly_earnings),
            "utilization_breakdown": {
                f"at{tier}_percent": float(value)
                for tier, value in self.utilization_breakdown.items()
            },
        }


def estimate_provider_earnings(request: EarningsRequest) -> EarningsProjection:
    """Project hourly, daily and 30-day earnings for a provider offer.

    Args:
        request: Offer parameters and expected utilization

    Returns:
        EarningsProjection including full-month figures at 50/75/100% utilization

    Raises:
        MalformedInput: If request or one of its fields has the wrong type
        OutOfRange: If amount or price is not positive, or utilization
            lies outside [0, 100]
        UnknownResourceType: If resource_type is not RAM or GPU
    """
    if not isinstance(request, EarningsRequest):
        raise MalformedInput(
            f"request must be an EarningsRequest, got {type(request).__name__}"
        )

    resource_type = ResourceType.parse(request.resource_type)
    amount = require_positive(request.amount, "amount")
    price = require_positive(request.price_per_unit_per_time, "price_per_unit_per_time")
    utilization = require_percent(request.utilization_percent, "utilization_percent")

    hourly_rate = amount * price * resource_type.units_per_hour
    full_month = hourly_rate * HOURS_PER_DAY * DAYS_PER_MONTH
    daily = hourly_rate * HOURS_PER_DAY * utilization / 100

    return EarningsProjection(
        hourly_rate=hourly_rate,
        daily_earnings=daily,
        monthly_earnings=daily * DAYS_PER_MONTH,
        utilization_breakdown={
            tier: full_month * tier / 100 for tier in UTILIZATION_TIERS
        },
    )
