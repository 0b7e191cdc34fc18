from datetime import datetime
from decimal import Decimal

import pytest

from clinic_analytics.errors import DataSourceError
from clinic_analytics.providers import InMemorySource
from clinic_analytics.services.metrics import MetricsAggregator, run_concurrently

NOW = datetime(2025, 10, 15, 10, 30)
OWNER = "user-a"


class FailingSource(InMemorySource):
    def sum_amount(self, owner_id, window=None, status=None):
        raise DataSourceError("database offline", operation="sum:receipts")


@pytest.fixture
def source():
    return InMemorySource()


@pytest.fixture
def aggregator(source):
    return MetricsAggregator(source, max_workers=3)


class TestSummary:
    def test_empty_source_returns_zeros(self, aggregator):
        summary = aggregator.get_summary(OWNER, NOW)
        assert summary.total_count == 0
        assert summary.count_today == 0
        assert summary.count_this_week == 0
        assert summary.generated_at == NOW

    def test_counts_nest(self, source, aggregator):
        source.add_patient(OWNER, datetime(2025, 10, 15, 8, 0))
        source.add_patient(OWNER, datetime(2025, 10, 13, 9, 0))
        source.add_patient(OWNER, datetime(2025, 10, 1, 9, 0))
        source.add_patient(OWNER, datetime(2024, 5, 1, 9, 0))

        summary = aggregator.get_summary(OWNER, NOW)
        assert summary.total_count == 4
        assert summary.count_this_week == 2
        assert summary.count_today == 1
        assert summary.count_today <= summary.count_this_week <= summary.total_count

    def test_other_owners_are_ignored(self, source, aggregator):
        source.add_patient("user-b", datetime(2025, 10, 15, 8, 0))
        assert aggregator.get_summary(OWNER, NOW).total_count == 0


class TestAdvancedMetrics:
    def test_empty_source_returns_zeros(self, aggregator):
        metrics = aggregator.get_advanced_metrics(OWNER, NOW)
        assert metrics.monthly_revenue == Decimal("0.00")
        assert metrics.monthly_receipt_count == 0
        assert metrics.average_receipt_value == Decimal("0.00")
        assert metrics.active_prescription_count == 0

    def test_revenue_and_average(self, source, aggregator):
        source.add_receipt(OWNER, "100.00", datetime(2025, 10, 2))
        source.add_receipt(OWNER, "200.00", datetime(2025, 10, 10), status="paid")
        source.add_receipt(OWNER, "150.00", datetime(2025, 10, 14), status="cancelled")
        source.add_receipt(OWNER, "999.00", datetime(2025, 9, 30, 23, 59))

        metrics = aggregator.get_advanced_metrics(OWNER, NOW)
        assert metrics.monthly_revenue == Decimal("450.00")
        assert metrics.monthly_receipt_count == 3
        assert metrics.average_receipt_value == Decimal("150.00")

    def test_average_rounds_half_up(self, source, aggregator):
        source.add_receipt(OWNER, "0.01", datetime(2025, 10, 2))
        source.add_receipt(OWNER, "0.00", datetime(2025, 10, 3))
        assert aggregator.get_advanced_metrics(OWNER, NOW).average_receipt_value == Decimal("0.01")

    def test_active_prescriptions_not_limited_to_month(self, source, aggregator):
        source.add_prescription(OWNER, datetime(2024, 1, 5), ["Amoxicillin"])
        source.add_prescription(OWNER, datetime(2025, 10, 5), ["Ibuprofen"])
        source.add_prescription(OWNER, datetime(2025, 10, 6), ["Ibuprofen"], status="completed")

        assert aggregator.get_advanced_metrics(OWNER, NOW).active_prescription_count == 2

    def test_includes_summary_counts(self, source, aggregator):
        source.add_patient(OWNER, datetime(2025, 10, 15, 8, 0))
        metrics = aggregator.get_advanced_metrics(OWNER, NOW)
        assert metrics.total_count == 1
        assert metrics.count_today == 1
        assert metrics.generated_at == NOW

    def test_source_failure_propagates(self):
        aggregator = MetricsAggregator(FailingSource())
        with pytest.raises(DataSourceError):
            aggregator.get_advanced_metrics(OWNER, NOW)


class TestRunConcurrently:
    def test_collects_every_result(self):
        results = run_concurrently({"a": lambda: 1, "b": lambda: 2, "c": lambda: 3}, max_workers=2)
        assert results == {"a": 1, "b": 2, "c": 3}

    def test_reraises_failure(self):
        def boom():
            raise DataSourceError("offline")

        with pytest.raises(DataSourceError):
            run_concurrently({"ok": lambda: 1, "bad": boom}, max_workers=3)
