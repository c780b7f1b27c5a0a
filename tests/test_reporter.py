"""Tests for building and saving the export record."""

import json
from datetime import datetime, timezone, timedelta

import pytest

from followback.models import RelationshipReport
from followback.reporter import build_report, export_filename, format_follow_ratio, save_export


@pytest.fixture
def report():
    return RelationshipReport(
        followers=["alice", "bob", "carol"],
        following=["alice", "dave"],
        not_following_back=["dave"],
        mutual_followers=["alice"],
    )


class TestFollowRatio:
    """Test format_follow_ratio()."""

    def test_two_decimals(self):
        assert format_follow_ratio(3, 2) == "150.00%"
        assert format_follow_ratio(1, 3) == "33.33%"
        assert format_follow_ratio(2, 3) == "66.67%"
        assert format_follow_ratio(0, 5) == "0.00%"

    def test_zero_following(self):
        """Division by zero never reaches the output."""
        assert format_follow_ratio(0, 0) == "0%"
        assert format_follow_ratio(10, 0) == "0%"

    def test_half_rounds_up(self):
        # 1/32 * 100 is exactly 3.125
        assert format_follow_ratio(1, 32) == "3.13%"

    def test_never_nan_or_infinity(self):
        for followers in range(0, 4):
            for following in range(0, 4):
                ratio = format_follow_ratio(followers, following)
                assert "NaN" not in ratio and "Infinity" not in ratio and "inf" not in ratio
                assert ratio.endswith("%")


class TestBuildReport:
    """Test build_report()."""

    def test_summary(self, report):
        generated = datetime(2025, 3, 4, 5, 6, 7, 891000, tzinfo=timezone.utc)
        record = build_report(report, generated_at=generated)

        assert record.summary.total_followers == 3
        assert record.summary.total_following == 2
        assert record.summary.not_following_back_count == 1
        assert record.summary.mutual_followers_count == 1
        assert record.summary.follow_ratio == "150.00%"
        assert record.not_following_back == ["dave"]
        assert record.mutual_followers == ["alice"]

    def test_export_dict_shape(self, report):
        generated = datetime(2025, 3, 4, 5, 6, 7, 891000, tzinfo=timezone.utc)
        exported = build_report(report, generated_at=generated).to_export_dict()

        assert exported == {
            "generated_at": "2025-03-04T05:06:07.891Z",
            "summary": {
                "total_followers": 3,
                "total_following": 2,
                "not_following_back_count": 1,
                "mutual_followers_count": 1,
                "follow_ratio": "150.00%",
            },
            "not_following_back": ["dave"],
            "mutual_followers": ["alice"],
        }
        # plain data only
        json.dumps(exported)

    def test_empty_following_ratio(self):
        record = build_report(RelationshipReport(followers=["a"]))
        assert record.summary.follow_ratio == "0%"

    def test_default_generated_at_is_utc_now(self, report):
        before = datetime.now(timezone.utc)
        record = build_report(report)
        assert record.generated_at >= before
        assert record.to_export_dict()["generated_at"].endswith("Z")

    def test_naive_datetime_treated_as_utc(self, report):
        record = build_report(report, generated_at=datetime(2025, 1, 2, 3, 4, 5))
        assert record.to_export_dict()["generated_at"] == "2025-01-02T03:04:05.000Z"


class TestSaveExport:
    """Test export file naming and writing."""

    def test_filename_uses_utc_date(self, report):
        # 23:30 at UTC-2 is already the next day in UTC
        local = datetime(2025, 6, 30, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
        record = build_report(report, generated_at=local)
        assert export_filename(record) == "instagram-analysis-2025-07-01.json"

    def test_custom_prefix(self, report):
        record = build_report(report, generated_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert export_filename(record, prefix="audit") == "audit-2025-01-01.json"

    def test_save_export(self, report, tmp_path):
        record = build_report(report, generated_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        path = save_export(record, output_dir=tmp_path / "exports")

        assert path == tmp_path / "exports" / "instagram-analysis-2025-01-01.json"
        with open(path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        assert loaded == record.to_export_dict()
