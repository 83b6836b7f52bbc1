"""
Unit tests for summary records and the summary publisher.
"""
from datetime import date, datetime, timezone

import pytest

from mood_analytics.models import StatsResult
from mood_analytics.risk import assess_risk
from mood_analytics.summary import (
    SNAPSHOT_ROW,
    RiskSummaryRecord,
    SummaryPublisher,
    SummaryRecord,
    build_risk_summary,
    build_summary,
)
from tests.conftest import make_series

NOW = datetime(2024, 3, 7, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def publisher(store):
    publisher = SummaryPublisher(store)
    publisher.provision()
    return publisher


@pytest.fixture
def hypomania_assessment():
    series = make_series([2, 3, 5, 6, 7, 8, 9], energy=5, anxiety=2)
    return assess_risk(series[-1], series)


class TestRecords:
    """Test shaping of summary records."""

    def test_build_summary(self):
        record = build_summary(StatsResult(average=2.6, highest=4, lowest=1, total_entries=5), now=NOW)

        assert record.to_dict() == {
            "lastUpdated": NOW.isoformat(),
            "totalEntries": 5,
            "average": 2.6,
            "highest": 4,
            "lowest": 1,
        }
        assert record.to_row() == [NOW.isoformat(), "5", "2.6", "4", "1"]

    def test_build_summary_defaults_to_now(self):
        record = build_summary(StatsResult.empty())

        assert record.last_updated.tzinfo is not None
        assert record.total_entries == 0

    def test_build_risk_summary(self, hypomania_assessment):
        record = build_risk_summary(date(2024, 3, 7), hypomania_assessment)

        assert record.date == date(2024, 3, 7)
        assert record.mood_mean7 == 5.71
        assert record.trend_mood == 1.18
        assert record.risk_hypomania is True
        assert record.risk_depression is False
        assert record.reason.startswith("Hypomania pattern")

    def test_risk_summary_row_uses_sheet_booleans(self, hypomania_assessment):
        record = build_risk_summary(date(2024, 3, 7), hypomania_assessment, reason="manual")

        row = record.to_row()

        assert len(row) == len(RiskSummaryRecord.HEADERS)
        assert row[0] == "2024-03-07"
        assert row[7:] == ["TRUE", "FALSE", "manual"]

    def test_risk_summary_dict_keys(self, hypomania_assessment):
        data = build_risk_summary(date(2024, 3, 7), hypomania_assessment).to_dict()

        assert set(data) == {
            "date",
            "mood_mean7",
            "energy_mean7",
            "anxiety_mean7",
            "irritability_mean7",
            "z_mood",
            "trend_mood",
            "risk_hypomania",
            "risk_depression",
            "reason",
        }


class TestPublisher:
    """Test snapshot publishing."""

    def test_provision_writes_headers(self, publisher, store):
        assert store.read("Summary") == [SummaryRecord.HEADERS]
        assert store.read("RiskSummary") == [RiskSummaryRecord.HEADERS]

    def test_publish_overwrites_snapshot_row(self, publisher, store):
        publisher.publish(build_summary(StatsResult(5, 5, 5, 1), now=NOW))
        publisher.publish(build_summary(StatsResult(6, 7, 5, 2), now=NOW))

        rows = store.read("Summary")
        assert len(rows) == SNAPSHOT_ROW
        assert rows[1] == [NOW.isoformat(), "2", "6", "7", "5"]

    def test_publish_routes_by_record_type(self, publisher, store, hypomania_assessment):
        publisher.publish(build_risk_summary(date(2024, 3, 7), hypomania_assessment))

        assert len(store.read("Summary")) == 1
        assert store.read("RiskSummary")[1][7] == "TRUE"

    def test_publish_provisions_missing_sheet(self, store):
        publisher = SummaryPublisher(store, summary_sheet="Weekly")

        publisher.publish(build_summary(StatsResult.empty(), now=NOW))

        rows = store.read("Weekly")
        assert rows[0] == SummaryRecord.HEADERS
        assert rows[1][1] == "0"
