"""
Unit Tests - Report Export
"""
import json

import pytest
import polars as pl

from ecommerce_report.pipeline import ReportPipeline
from ecommerce_report.reporting import build_summary, export_report


@pytest.fixture
def report(datasets, window):
    return ReportPipeline(window=window).run(datasets)


class TestExportReport:
    """Tests for export_report"""

    def test_csv_export(self, report, tmp_path):
        """Test one CSV per summary table plus summary.json"""
        written = export_report(report, tmp_path / "out", "csv")

        assert set(written) == set(report.summary_tables()) | {"summary"}
        assert all(path.exists() for path in written.values())

        daily = pl.read_csv(written["daily_sales"])
        assert daily["total_sales"].to_list() == [100.0, 100.0, 80.0]

    def test_parquet_export(self, report, tmp_path):
        """Test Parquet tables round-trip their schema"""
        written = export_report(report, tmp_path, "parquet")

        categories = pl.read_parquet(written["category_sales"])
        assert categories["product_category_name_english"].to_list() == ["health_beauty", "computers_accessories"]

    def test_json_export(self, report, tmp_path):
        """Test JSON tables"""
        written = export_report(report, tmp_path, "json")

        assert written["review_score_distribution"].suffix == ".json"

    def test_summary_file(self, report, tmp_path):
        """Test the scalar figures are written"""
        written = export_report(report, tmp_path, "csv")

        with open(written["summary"], encoding="utf-8") as f:
            summary = json.load(f)

        assert summary["window"] == {"start": "2017-01-01", "end": "2018-09-30", "closed": "none"}
        assert summary["headline"]["order_count"] == 3
        assert summary["delivery_delay"]["lowest_rated_days"] == 5.0
        assert len(summary["stages"]) == 5

    def test_unknown_format(self, report, tmp_path):
        """Test an unsupported format is rejected"""
        with pytest.raises(ValueError):
            export_report(report, tmp_path, "xlsx")


class TestBuildSummary:
    """Tests for build_summary"""

    def test_is_json_serializable(self, report):
        """Test the summary only holds plain values"""
        summary = build_summary(report)

        assert json.loads(json.dumps(summary)) == summary
        assert summary["reviews"]["total"] == 3
