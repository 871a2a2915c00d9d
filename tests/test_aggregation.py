"""
Unit tests for usage aggregation.

Tests totals, averages, the empty case and order independence.
"""

from decimal import Decimal
from itertools import permutations

from rental_pricing.core.aggregation import UsageAggregate, aggregate_usage
from rental_pricing.core.metering import MeteringInput, UsageRecord, meter_usage


def _record(cost, duration_seconds, rental_id="rental_1") -> UsageRecord:
    return UsageRecord(
        rental_id=rental_id,
        start_time="2024-01-01T00:00:00Z",
        end_time="2024-01-01T01:00:00Z",
        duration_seconds=duration_seconds,
        amount=Decimal(1),
        cost=cost,
    )


class TestAggregateUsage:
    """Test summary statistics over usage records."""

    def test_empty_input(self):
        """Verify no records gives an all-zero aggregate."""
        result = aggregate_usage([])
        assert result == UsageAggregate(
            total_cost=Decimal(0),
            total_duration_seconds=0,
            record_count=0,
            average_cost_per_record=Decimal(0),
        )
        assert result.to_dict() == {
            "total_cost": 0.0,
            "total_duration_seconds": 0,
            "record_count": 0,
            "average_cost_per_record": 0.0,
        }

    def test_totals_and_average(self):
        """Verify sums and mean cost."""
        records = [
            _record(Decimal("1"), 60),
            _record(Decimal("2"), 120),
            _record(Decimal("3"), 180),
        ]
        result = aggregate_usage(records)
        assert result.total_cost == 6
        assert result.total_duration_seconds == 360
        assert result.record_count == 3
        assert result.average_cost_per_record == 2

    def test_metered_records(self):
        """Verify records produced by the meter aggregate directly."""
        records = [
            meter_usage(MeteringInput(
                rental_id=f"rental_{hour}",
                start_time=f"2024-01-01T0{hour}:00:00Z",
                end_time=f"2024-01-01T0{hour + 1}:00:00Z",
                resource_type="RAM",
                amount=8,
                price_per_unit_per_time=0.1,
            ))
            for hour in range(3)
        ]
        result = aggregate_usage(records)
        assert result.total_cost == Decimal("2.4")
        assert result.total_duration_seconds == 10800
        assert result.average_cost_per_record == Decimal("0.8")

    def test_order_independence(self):
        """Verify every permutation yields the identical aggregate."""
        records = [
            _record(0.1, 10),
            _record(0.2, 20),
            _record(Decimal(1) / Decimal(3), 30),
            _record(Decimal("1E+20"), 40),
            _record(Decimal("1E-20"), 50),
        ]
        results = {aggregate_usage(list(order)) for order in permutations(records)}
        assert len(results) == 1

    def test_generator_input(self):
        """Verify a one-shot iterator is accepted."""
        result = aggregate_usage(_record(Decimal("0.5"), 30) for _ in range(4))
        assert result.record_count == 4
        assert result.total_cost == 2
        assert result.total_duration_seconds == 120

    def test_mapping_records(self):
        """Verify records loaded from JSON are accepted."""
        records = [
            {"rental_id": "a", "cost": 0.8, "duration_seconds": 3600},
            {"rental_id": "b", "cost": 0.4, "duration_seconds": 1800},
        ]
        result = aggregate_usage(records)
        assert result.total_cost == Decimal("1.2")
        assert result.total_duration_seconds == 5400
        assert result.average_cost_per_record == Decimal("0.6")

    def test_records_trusted_as_is(self):
        """Verify aggregation does not re-validate records."""
        records = [_record(Decimal("-1.5"), 10), _record(Decimal("0.5"), 10)]
        result = aggregate_usage(records)
        assert result.total_cost == -1
        assert result.average_cost_per_record == Decimal("-0.5")

    def test_metering_and_aggregation_write_no_output(self, capsys):
        """Verify the happy path has no side effects on stdout or stderr."""
        record = meter_usage(MeteringInput(
            rental_id="rental_1",
            start_time="2024-01-01T00:00:00Z",
            end_time="2024-01-01T01:00:00Z",
            resource_type="RAM",
            amount=8,
            price_per_unit_per_time=0.1,
        ))
        aggregate_usage([record])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
