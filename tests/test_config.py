import logging
import os

from clickwheel.core.config import load_config, setup_logging
from clickwheel.core.utils import fmt_time, title_key, truncate_name, unique_sorted


class TestLoadConfig:
    """Tests for environment configuration."""

    def test_defaults(self):
        """Test an empty environment gives the defaults."""
        cfg = load_config({}, default_data_dir="/tmp/cw")
        assert cfg.data_dir == "/tmp/cw"
        assert cfg.log_level == "INFO"
        assert cfg.initial_volume == 0.8
        assert cfg.debug_schema is False
        assert cfg.db_path == os.path.join("/tmp/cw", "library.sqlite3")

    def test_overrides(self):
        """Test environment values override the defaults."""
        cfg = load_config({
            "CLICKWHEEL_DATA_DIR": "/data",
            "CLICKWHEEL_LOG_LEVEL": "debug",
            "CLICKWHEEL_VOLUME": "0.25",
            "CLICKWHEEL_DEBUG_SCHEMA": "1",
        }, default_data_dir="/tmp/cw")
        assert cfg.data_dir == "/data"
        assert cfg.log_level == "DEBUG"
        assert cfg.initial_volume == 0.25
        assert cfg.debug_schema is True

    def test_invalid_values_fall_back(self, caplog):
        """Test bad values are logged and ignored."""
        with caplog.at_level(logging.WARNING):
            cfg = load_config({"CLICKWHEEL_LOG_LEVEL": "loud", "CLICKWHEEL_VOLUME": "2"})
        assert cfg.log_level == "INFO"
        assert cfg.initial_volume == 0.8
        assert len(caplog.records) == 2


class TestSetupLogging:
    """Tests for the root logging handler."""

    def test_single_handler(self):
        """Test repeated setup does not stack handlers."""
        root = logging.getLogger()
        saved = list(root.handlers), root.level
        try:
            setup_logging("DEBUG")
            setup_logging("WARNING")
            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])


class TestUtils:
    """Tests for small formatting helpers."""

    def test_fmt_time(self):
        """Test m:ss formatting."""
        assert fmt_time(0) == "0:00"
        assert fmt_time(59.9) == "0:59"
        assert fmt_time(754) == "12:34"
        assert fmt_time(-3) == "0:00"

    def test_title_order(self):
        """Test case-insensitive ordering with a stable tie-break."""
        assert unique_sorted(["b", "B", "a", "b"]) == ["a", "B", "b"]
        assert title_key("Abc") < title_key("abd")

    def test_truncate_name(self):
        """Test long names are cut at 20 characters."""
        assert truncate_name("x" * 25) == "x" * 20 + "..."
        assert truncate_name("short") == "short"
