"""
Tests for logger functionality.
"""

import pytest
from salarybench.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["reports_finalized"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        # Should not raise exceptions
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context is appended to the message as JSON."""
        logger = StructuredLogger(
            name="test-context",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Report finalized", report_id=12, match_tier="full_match")

        log_content = next(tmp_path.glob("*.log")).read_text(encoding="utf-8")
        assert '"report_id": 12' in log_content
        assert '"match_tier": "full_match"' in log_content

    def test_finalization_metrics(self, tmp_path):
        """Finalizations are counted per tier."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
            enable_file=False,
        )

        logger.record_finalization("full_match", awaiting_data=False)
        logger.record_finalization("full_match", awaiting_data=False)
        logger.record_finalization("insufficient_data", awaiting_data=True)
        logger.record_postings_scored(4)
        logger.record_postings_scored(3)

        metrics = logger.get_metrics()

        assert metrics["reports_finalized"] == 3
        assert metrics["reports_awaiting_data"] == 1
        assert metrics["postings_scored"] == 7
        assert metrics["match_tiers"] == {"full_match": 2, "insufficient_data": 1}

    def test_get_metrics_returns_copy(self, tmp_path):
        logger = StructuredLogger(name="test", enable_console=False, enable_file=False)
        logger.record_finalization("title_match", awaiting_data=False)

        metrics = logger.get_metrics()
        metrics["match_tiers"]["title_match"] = 99

        assert logger.metrics["match_tiers"]["title_match"] == 1

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(
            name="test-summary",
            log_dir=tmp_path,
            enable_console=False,
        )
        logger.record_finalization("region_match", awaiting_data=False)

        logger.log_metrics_summary()

        log_content = next(tmp_path.glob("*.log")).read_text(encoding="utf-8")
        assert "Finalization Metrics" in log_content
        assert "region_match: 1" in log_content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        # Check that a log file was created
        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1

        # Check that message was written
        log_content = log_files[0].read_text()
        assert "Test message" in log_content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        reset_logger()  # Start fresh

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_postings_scored(5)

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        # Should be different instance with fresh metrics
        assert logger2 is not logger1
        assert logger2.metrics["postings_scored"] == 0

    def test_invalid_level_rejected(self):
        with pytest.raises(AttributeError):
            StructuredLogger(name="test", level="LOUD", enable_console=False, enable_file=False)
