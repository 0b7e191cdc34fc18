from datetime import datetime

import pytest

from clinic_analytics.errors import InvalidParameterError
from clinic_analytics.providers import InMemorySource
from clinic_analytics.services.ranking import RankingEngine, period_label, rank_counts

NOW = datetime(2025, 10, 15, 10, 30)
OWNER = "user-a"


@pytest.fixture
def source():
    return InMemorySource()


@pytest.fixture
def engine(source):
    return RankingEngine(source)


class TestRankCounts:
    def test_limit_and_percentages_use_full_total(self):
        items = rank_counts({"A": 10, "B": 10, "C": 5}, limit=2)
        assert [(i.name, i.count, i.percentage) for i in items] == [("A", 10, 40.0), ("B", 10, 40.0)]

    def test_ties_broken_by_name(self):
        items = rank_counts({"Zinc": 3, "Aspirin": 3, "Metformin": 7}, limit=10)
        assert [i.name for i in items] == ["Metformin", "Aspirin", "Zinc"]

    def test_untruncated_percentages_sum_to_hundred(self):
        items = rank_counts({"A": 1, "B": 1, "C": 2}, limit=10)
        assert sum(i.percentage for i in items) == pytest.approx(100.0)

    def test_one_decimal_half_up(self):
        items = rank_counts({"A": 1, "B": 2}, limit=10)
        assert [i.percentage for i in items] == [66.7, 33.3]

    def test_independent_rounding_can_exceed_hundred(self):
        items = rank_counts({"A": 1, "B": 1, "C": 4}, limit=10)
        assert [i.percentage for i in items] == [66.7, 16.7, 16.7]
        assert sum(i.percentage for i in items) == pytest.approx(100.1)

    def test_zero_total(self):
        items = rank_counts({"A": 0}, limit=10)
        assert items[0].percentage == 0.0

    def test_empty(self):
        assert rank_counts({}, limit=5) == []


class TestPeriodLabel:
    def test_labels(self):
        assert period_label(1) == "last month"
        assert period_label(12) == "last year"
        assert period_label(6) == "last 6 months"


class TestRankingEngine:
    def test_top_medications(self, source, engine):
        source.add_prescription(OWNER, datetime(2025, 9, 1), ["Amoxicillin", "Ibuprofen"])
        source.add_prescription(OWNER, datetime(2025, 10, 1), ["Amoxicillin"])
        source.add_prescription(OWNER, datetime(2025, 10, 10), ["Paracetamol"], status="completed")

        result = engine.get_top_ranked(OWNER, NOW, limit=2, period_months=6)

        assert result.total_considered == 4
        assert [i.name for i in result.items] == ["Amoxicillin", "Ibuprofen"]
        assert result.items[0].percentage == 50.0
        assert result.period_label == "last 6 months"

    def test_period_excludes_older_prescriptions(self, source, engine):
        source.add_prescription(OWNER, datetime(2025, 4, 14), ["Old"])
        source.add_prescription(OWNER, datetime(2025, 4, 16), ["Recent"])

        result = engine.get_top_ranked(OWNER, NOW, limit=10, period_months=6)
        assert [i.name for i in result.items] == ["Recent"]

    def test_other_owners_ignored(self, source, engine):
        source.add_prescription("user-b", datetime(2025, 10, 1), ["Amoxicillin"])
        result = engine.get_top_ranked(OWNER, NOW)
        assert result.items == ()
        assert result.total_considered == 0

    @pytest.mark.parametrize("limit,period", [(0, 6), (51, 6), (10, 0), (10, 25)])
    def test_invalid_parameters(self, source, engine, limit, period):
        with pytest.raises(InvalidParameterError):
            engine.get_top_ranked(OWNER, NOW, limit=limit, period_months=period)
        assert source.query_count == 0
