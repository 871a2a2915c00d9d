"""
Tests for the JSON exchange boundary.

Invalid input must come back as an error object, never as an exception.
"""

import json

import pytest

from rental_pricing.config.loader import PlatformConfig
from rental_pricing.core.exchange import (
    aggregate_usage_json,
    estimate_provider_earnings_json,
    meter_usage_json,
    quote_rental_cost_json,
)

QUOTE = {
    "resource_type": "RAM",
    "amount": 8,
    "duration_minutes": 60,
    "price_per_unit_per_time": 0.1,
    "platform_fee_percent": 5,
}

METERING = {
    "rental_id": "rental_123",
    "start_time": "2024-01-01T00:00:00Z",
    "end_time": "2024-01-01T01:00:00Z",
    "resource_type": "RAM",
    "amount": 8,
    "price_per_unit_per_time": 0.1,
}


class TestQuoteJson:
    """Test quoting through the JSON boundary."""

    def test_quote_from_string(self):
        """Verify a JSON string produces the full result object."""
        result = quote_rental_cost_json(json.dumps(QUOTE))
        assert result["resource_type"] == "RAM"
        assert result["resource_cost"] == 0.8
        assert result["platform_fee"] == 0.04
        assert result["total"] == 0.84
        assert result["currency"] == "USDC"
        assert result["breakdown"]["total"] == 0.84

    def test_quote_from_mapping_with_null_options(self):
        """Verify null optional fields fall back to configuration."""
        payload = dict(QUOTE, platform_fee_percent=None, currency=None)
        config = PlatformConfig(platform_fee_percent=10, currency="SOL")
        result = quote_rental_cost_json(payload, config)
        assert result["platform_fee"] == 0.08
        assert result["currency"] == "SOL"

    def test_unknown_resource_type(self):
        """Verify CPU yields a structured UnknownResourceType error."""
        result = quote_rental_cost_json(dict(QUOTE, resource_type="CPU"))
        assert result["kind"] == "UnknownResourceType"
        assert result["field"] == "resource_type"
        assert "CPU" in result["error"]

    @pytest.mark.parametrize("payload,kind,field", [
        ("{not json", "MalformedInput", None),
        ("[1, 2]", "MalformedInput", None),
        (json.dumps(dict(QUOTE, amount="8")), "MalformedInput", "amount"),
        (json.dumps({k: v for k, v in QUOTE.items() if k != "amount"}), "MalformedInput", "amount"),
        (json.dumps(dict(QUOTE, colour="red")), "MalformedInput", "colour"),
        (json.dumps(dict(QUOTE, platform_fee_percent=150)), "OutOfRange", "platform_fee_percent"),
        (json.dumps(dict(QUOTE, duration_minutes=600000)), "OutOfRange", "duration_minutes"),
        ('{"resource_type": "RAM", "amount": NaN, "duration_minutes": 60, '
         '"price_per_unit_per_time": 0.1}', "OutOfRange", "amount"),
    ])
    def test_malformed_input_returns_error(self, payload, kind, field):
        """Verify each malformed payload maps to its error kind."""
        result = quote_rental_cost_json(payload)
        assert set(result) == {"error", "kind", "field"}
        assert result["kind"] == kind
        assert result["field"] == field

    def test_error_round_trips_through_json(self):
        """Verify error objects survive serialization unchanged."""
        error = quote_rental_cost_json(dict(QUOTE, resource_type="CPU"))
        assert json.loads(json.dumps(error)) == error


class TestMeteringJson:
    """Test metering through the JSON boundary."""

    def test_meter_from_string(self):
        """Verify the reference session meters to 0.8."""
        result = meter_usage_json(json.dumps(METERING))
        assert result["rental_id"] == "rental_123"
        assert result["duration_seconds"] == 3600
        assert result["cost"] == 0.8
        assert result["clamped"] is False

    def test_malformed_timestamp(self):
        """Verify a bad timestamp is reported as data."""
        result = meter_usage_json(dict(METERING, end_time="2024-01-01"))
        assert result["kind"] == "MalformedTimestamp"
        assert result["field"] == "end_time"

    def test_bytes_payload(self):
        """Verify UTF-8 bytes are accepted."""
        result = meter_usage_json(json.dumps(METERING).encode("utf-8"))
        assert result["cost"] == 0.8


class TestAggregateJson:
    """Test aggregation through the JSON boundary."""

    def test_empty_array(self):
        """Verify an empty array aggregates to zeros."""
        assert aggregate_usage_json("[]") == {
            "total_cost": 0.0,
            "total_duration_seconds": 0,
            "record_count": 0,
            "average_cost_per_record": 0.0,
        }

    def test_metered_records(self):
        """Verify records emitted by meter_usage_json aggregate directly."""
        record = meter_usage_json(METERING)
        result = aggregate_usage_json(json.dumps([record, record]))
        assert result["total_cost"] == 1.6
        assert result["total_duration_seconds"] == 7200
        assert result["record_count"] == 2
        assert result["average_cost_per_record"] == 0.8

    @pytest.mark.parametrize("payload,field", [
        ('{"cost": 1}', None),
        ('[1]', "[0]"),
        ('[{"cost": 1}]', "[0].duration_seconds"),
        ('[{"cost": "1", "duration_seconds": 5}]', "[0].cost"),
    ])
    def test_malformed_records(self, payload, field):
        """Verify malformed records are reported, not raised."""
        result = aggregate_usage_json(payload)
        assert result["kind"] == "MalformedInput"
        assert result["field"] == field

    @pytest.mark.parametrize("payload,field", [
        ('[{"cost": Infinity, "duration_seconds": 1}, {"cost": -Infinity, "duration_seconds": 1}]', "[0].cost"),
        ('[{"cost": 1, "duration_seconds": 1}, {"cost": NaN, "duration_seconds": 1}]', "[1].cost"),
        ('[{"cost": 1, "duration_seconds": Infinity}]', "[0].duration_seconds"),
    ])
    def test_non_finite_records(self, payload, field):
        """Verify infinite or NaN values are reported as out of range."""
        result = aggregate_usage_json(payload)
        assert result["kind"] == "OutOfRange"
        assert result["field"] == field


class TestEarningsJson:
    """Test earnings projection through the JSON boundary."""

    def test_earnings(self):
        """Verify the projection and the ignored duration field."""
        result = estimate_provider_earnings_json({
            "resource_type": "GPU",
            "amount": 2,
            "duration_minutes": 60,
            "price_per_unit_per_time": 0.5,
            "utilization_percent": 50,
        })
        assert result["hourly_rate"] == 60.0
        assert result["daily_earnings"] == 720.0
        assert result["monthly_earnings"] == 21600.0
        assert result["utilization_breakdown"] == {
            "at50_percent": 21600.0,
            "at75_percent": 32400.0,
            "at100_percent": 43200.0,
        }

    def test_missing_utilization(self):
        """Verify a missing field is reported."""
        result = estimate_provider_earnings_json({
            "resource_type": "GPU",
            "amount": 2,
            "price_per_unit_per_time": 0.5,
        })
        assert result["field"] == "utilization_percent"
