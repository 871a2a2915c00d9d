"""
Input validation for the pricing and metering entry points.

The ``require_*`` helpers raise typed errors naming the offending field;
the ``validate_*`` predicates answer yes/no for callers that only need a
check.
"""

import math
from decimal import Decimal
from typing import Any, Optional

from .errors import MalformedInput, OutOfRange
from .money import as_decimal
from .resources import ResourceType
from rental_pricing.config.loader import DEFAULT_MAX_DURATION_MINUTES as MAX_DURATION_MINUTES


def require_number(value: Any, field: str) -> Decimal:
    """Coerce a finite int, float or Decimal to Decimal.

    Raises:
        MalformedInput: If value is not a number (bool counts as not a number)
        OutOfRange: If value is NaN or infinite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise MalformedInput(
            f"'{field}' must be a number, got {type(value).__name__}",
            field=field,
        )
    if isinstance(value, Decimal):
        finite = value.is_finite()
    else:
        finite = math.isfinite(value)
    if not finite:
        raise OutOfRange(f"'{field}' must be finite, got {value}", field=field)
    return as_decimal(value)


def require_positive(value: Any, field: str) -> Decimal:
    """Coerce a number and require it to be > 0."""
    number = require_number(value, field)
    if number <= 0:
        raise OutOfRange(f"'{field}' must be > 0, got {value}", field=field)
    return number


def require_duration_minutes(value: Any, ceiling: float = MAX_DURATION_MINUTES) -> Decimal:
    """Require a positive duration no longer than ``ceiling`` minutes."""
    duration = require_positive(value, "duration_minutes")
    if duration > as_decimal(ceiling):
        raise OutOfRange(
            f"'duration_minutes' must be <= {ceiling}, got {value}",
            field="duration_minutes",
        )
    return duration


def require_percent(value: Any, field: str) -> Decimal:
    """Require a percentage within [0, 100]."""
    percent = require_number(value, field)
    if percent < 0 or percent > 100:
        raise OutOfRange(f"'{field}' must be between 0 and 100, got {value}", field=field)
    return percent


def require_text(value: Any, field: str) -> str:
    """Require a non-empty string."""
    if not isinstance(value, str):
        raise MalformedInput(
            f"'{field}' must be a string, got {type(value).__name__}",
            field=field,
        )
    if not value.strip():
        raise MalformedInput(f"'{field}' cannot be empty", field=field)
    return value


def optional_text(value: Optional[Any], field: str, default: str) -> str:
    """Return ``default`` for None, otherwise require a non-empty string."""
    if value is None:
        return default
    return require_text(value, field)


def validate_resource_type(resource_type: str) -> bool:
    """True for the exact names RAM and GPU."""
    return resource_type in {member.value for member in ResourceType}


def validate_duration_minutes(duration: float, ceiling: float = MAX_DURATION_MINUTES) -> bool:
    """True for a finite duration in (0, ceiling]."""
    if isinstance(duration, bool) or not isinstance(duration, (int, float, Decimal)):
        return False
    return math.isfinite(duration) and 0 < duration <= ceiling


def validate_price(price: float) -> bool:
    """True for a finite price > 0."""
    if isinstance(price, bool) or not isinstance(price, (int, float, Decimal)):
        return False
    return math.isfinite(price) and price > 0
