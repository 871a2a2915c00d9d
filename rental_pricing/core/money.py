"""
Currency arithmetic, fees and rounding.

Shared by the rate calculator and the usage meter. Floats are converted
through their shortest decimal representation so that 0.1 is treated as
the decimal 0.1 rather than its binary approximation.
"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

from .errors import OutOfRange

Number = Union[int, float, Decimal]

HUNDRED = Decimal("100")


def as_decimal(value: Number) -> Decimal:
    """Convert a trusted numeric value to Decimal without binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(repr(float(value)))


def quantize(value: Decimal, decimals: int) -> Decimal:
    """Round half away from zero at the given number of decimal places."""
    if decimals < 0:
        raise OutOfRange(f"decimals must be >= 0, got {decimals}", field="decimals")
    with localcontext() as ctx:
        # quantize fails if the result needs more digits than the context holds
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def fee_amount(amount: Decimal, percent: Decimal) -> Decimal:
    """Fee on ``amount`` at ``percent``; percentages outside [0, 100] charge nothing."""
    if percent < 0 or percent > HUNDRED:
        return Decimal(0)
    return amount * percent / HUNDRED


def calculate_fee(amount: Number, percent: Number) -> float:
    """Calculate the fee for an amount at a percentage.

    Out-of-range percentages degrade to a zero fee instead of raising.

    Args:
        amount: Base amount
        percent: Fee percentage, expected within [0, 100]

    Returns:
        Fee amount, or 0.0 when percent is outside [0, 100]
    """
    return float(fee_amount(as_decimal(amount), as_decimal(percent)))


def calculate_total_with_fee(amount: Number, percent: Number) -> float:
    """Amount plus its fee (see calculate_fee for out-of-range handling)."""
    base = as_decimal(amount)
    return float(base + fee_amount(base, as_decimal(percent)))


def round_to_decimals(value: Number, decimals: int) -> float:
    """Round half away from zero to ``decimals`` places.

    Works on the decimal representation, so 2.675 rounds to 2.68 where
    multiply-round-divide on binary floats gives 2.67.

    Raises:
        OutOfRange: If decimals is negative
    """
    number = as_decimal(value)
    if not number.is_finite():
        return float(number)
    return float(quantize(number, decimals))


def calculate_utilization(used: Number, total: Number) -> float:
    """Percentage of ``total`` that is ``used``, clamped to [0, 100].

    A non-positive total yields 0.0 rather than a division error. A NaN
    ratio also yields 0.0.
    """
    if total <= 0:
        return 0.0
    utilization = (float(used) / float(total)) * 100.0
    if math.isnan(utilization):
        return 0.0
    return min(max(utilization, 0.0), 100.0)


def validate_payment_amount(amount: Number, minimum: Number, maximum: Number) -> bool:
    """Check a payment amount is positive, finite and within [minimum, maximum]."""
    if isinstance(amount, bool) or not math.isfinite(amount):
        return False
    return amount > 0 and minimum <= amount <= maximum


def format_currency_amount(amount: Number, decimals: int) -> str:
    """Format an amount with a fixed number of decimal places."""
    return str(quantize(as_decimal(amount), decimals))
