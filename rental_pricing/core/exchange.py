"""
JSON exchange boundary.

Each function accepts a JSON string or an already-decoded mapping and
returns a plain dict. Invalid input never raises: it comes back as
``{"error": ..., "kind": ..., "field": ...}``.
"""

import json
import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .aggregation import aggregate_usage
from .errors import MalformedInput, OutOfRange, ValidationError
from .metering import MeteringInput, meter_usage
from .pricing import (
    EarningsRequest,
    RentalQuoteRequest,
    estimate_provider_earnings,
    quote_rental_cost,
)
from rental_pricing.config.loader import PlatformConfig

Payload = Union[str, bytes, Mapping[str, Any]]

QUOTE_FIELDS = ("resource_type", "amount", "duration_minutes", "price_per_unit_per_time")
QUOTE_OPTIONAL_FIELDS = ("currency", "platform_fee_percent")
METERING_FIELDS = (
    "rental_id",
    "start_time",
    "end_time",
    "resource_type",
    "amount",
    "price_per_unit_per_time",
)
EARNINGS_FIELDS = ("resource_type", "amount", "price_per_unit_per_time", "utilization_percent")
# accepted for compatibility, not used in the projection
EARNINGS_IGNORED_FIELDS = ("duration_minutes",)


def quote_rental_cost_json(
    payload: Payload,
    config: Optional[PlatformConfig] = None,
) -> Dict[str, Any]:
    """Quote a rental from a JSON request object."""
    def run() -> Dict[str, Any]:
        data = _decode_object(payload)
        fields = _pick(data, QUOTE_FIELDS, QUOTE_OPTIONAL_FIELDS)
        return quote_rental_cost(RentalQuoteRequest(**fields), config).to_dict()
    return _guarded(run)


def meter_usage_json(payload: Payload) -> Dict[str, Any]:
    """Meter a session from a JSON metering input object."""
    def run() -> Dict[str, Any]:
        data = _decode_object(payload)
        fields = _pick(data, METERING_FIELDS)
        return meter_usage(MeteringInput(**fields)).to_dict()
    return _guarded(run)


def aggregate_usage_json(payload: Union[str, bytes, List[Any]]) -> Dict[str, Any]:
    """Aggregate a JSON array of usage records.

    Records are trusted; each must only carry ``cost`` and
    ``duration_seconds``.
    """
    def run() -> Dict[str, Any]:
        records = _decode(payload)
        if not isinstance(records, list):
            raise MalformedInput(f"expected a JSON array, got {type(records).__name__}")
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise MalformedInput(f"record {index} must be an object", field=f"[{index}]")
            for name in ("cost", "duration_seconds"):
                value = record.get(name)
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise MalformedInput(
                        f"record {index} '{name}' must be a number",
                        field=f"[{index}].{name}",
                    )
                if not math.isfinite(value):
                    raise OutOfRange(
                        f"record {index} '{name}' must be finite, got {value}",
                        field=f"[{index}].{name}",
                    )
        return aggregate_usage(records).to_dict()
    return _guarded(run)


def estimate_provider_earnings_json(payload: Payload) -> Dict[str, Any]:
    """Project provider earnings from a JSON request object."""
    def run() -> Dict[str, Any]:
        data = _decode_object(payload)
        fields = _pick(data, EARNINGS_FIELDS, ignored=EARNINGS_IGNORED_FIELDS)
        return estimate_provider_earnings(EarningsRequest(**fields)).to_dict()
    return _guarded(run)


def _guarded(run: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    try:
        return run()
    except ValidationError as e:
        return e.to_dict()


def _decode(payload: Any) -> Any:
    if isinstance(payload, (str, bytes)):
        try:
            return json.loads(payload)
        except ValueError as e:
            raise MalformedInput(f"Invalid input: {e}")
    return payload


def _decode_object(payload: Any) -> Mapping[str, Any]:
    data = _decode(payload)
    if not isinstance(data, Mapping):
        raise MalformedInput(f"expected a JSON object, got {type(data).__name__}")
    return data


def _pick(
    data: Mapping[str, Any],
    required: tuple,
    optional: tuple = (),
    ignored: tuple = (),
) -> Dict[str, Any]:
    unknown = set(data.keys()) - set(required) - set(optional) - set(ignored)
    if unknown:
        raise MalformedInput(f"Unknown fields: {sorted(unknown)}", field=sorted(unknown)[0])
    missing = [name for name in required if name not in data]
    if missing:
        raise MalformedInput(f"Missing required field '{missing[0]}'", field=missing[0])
    return {name: data[name] for name in required + optional if name in data}
