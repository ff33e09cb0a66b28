"""
Unit Tests - Configuration
"""
import io
import json
import logging
from datetime import date

import pytest
import structlog
from pydantic import ValidationError

from ecommerce_report.config import Settings
from ecommerce_report.config.logging import configure_logging
from ecommerce_report.config.settings import AnalysisSettings, DataSourceSettings


class TestSettings:
    """Tests for Settings"""

    def test_defaults(self, test_settings):
        """Test the report defaults"""
        assert test_settings.app_env == "testing"
        assert test_settings.app_name == "ecommerce-report"
        assert test_settings.analysis.window_start == date(2017, 1, 1)
        assert test_settings.analysis.window_end == date(2018, 9, 30)
        assert test_settings.data.orders_file == "olist_orders_dataset"
        assert test_settings.output.output_format == "csv"

    def test_invalid_environment(self):
        """Test an unknown environment is rejected"""
        with pytest.raises(ValidationError):
            Settings(APP_ENV="qa")

    def test_reversed_window_rejected(self):
        """Test the window start must precede its end"""
        with pytest.raises(ValidationError):
            AnalysisSettings(window_start=date(2018, 9, 30), window_end=date(2017, 1, 1))

    def test_environment_override(self, monkeypatch):
        """Test values are read from the environment"""
        monkeypatch.setenv("ANALYSIS_WINDOW_CLOSED", "both")
        monkeypatch.setenv("DATA_FILE_FORMAT", "parquet")

        assert AnalysisSettings().window_closed == "both"
        assert DataSourceSettings().file_format == "parquet"


class TestConfigureLogging:
    """Tests for configure_logging"""

    def test_json_lines(self):
        """Test the json format renders one object per event"""
        stream = io.StringIO()
        configure_logging("INFO", "json", stream=stream)

        structlog.get_logger("ecommerce_report.tests.json").info("Report ready", rows=3)

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "Report ready"
        assert event["rows"] == 3
        assert event["level"] == "info"

    def test_level_filters_events(self):
        """Test events below the configured level are dropped"""
        stream = io.StringIO()
        configure_logging("WARNING", "text", stream=stream)

        log = structlog.get_logger("ecommerce_report.tests.level")
        log.info("Window applied", rows=10)
        log.warning("Transactions delivered before purchase", rows=1)

        output = stream.getvalue()
        assert "Window applied" not in output
        assert "Transactions delivered before purchase" in output

    def test_faker_debug_quieted(self):
        """Test Faker's locale lookups stay out of debug output"""
        configure_logging("DEBUG", "text", stream=io.StringIO())

        assert logging.getLogger("faker").level == logging.WARNING

    def test_unknown_format(self):
        """Test an unknown format is rejected"""
        with pytest.raises(ValueError):
            configure_logging("INFO", "xml", stream=io.StringIO())
