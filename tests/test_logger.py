"""Test logging configuration"""

import logging

import pytest

from track_codec.core.exceptions import TrackTruncatedError
from track_codec.core.logger import (
    ColoredConsoleFormatter,
    ErrorOnlyFilter,
    TqdmLoggingHandler,
    get_logger,
    log_decode_failure,
    setup_logging,
    shutdown_logging,
)


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


class TestFormattersAndFilters:
    """Test logging building blocks"""

    def test_plain_console_format(self):
        """Without colors the console shows 'LEVEL: message'"""
        formatter = ColoredConsoleFormatter(use_colors=False)
        assert formatter.format(_record(logging.INFO, "Decoded 3 tracks")) == "INFO: Decoded 3 tracks"

    def test_colored_console_format(self):
        """With colors the level name is wrapped in ANSI codes"""
        formatted = ColoredConsoleFormatter().format(_record(logging.ERROR, "boom"))
        assert formatted.endswith("ERROR\x1b[0m: boom")

    def test_error_only_filter(self):
        """Only ERROR and above pass"""
        error_filter = ErrorOnlyFilter()
        assert not error_filter.filter(_record(logging.WARNING, "w"))
        assert error_filter.filter(_record(logging.ERROR, "e"))
        assert error_filter.filter(_record(logging.CRITICAL, "c"))


@pytest.mark.usefixtures("clean_logging")
class TestSetupLogging:
    """Test setup_logging and friends"""

    def test_console_only(self):
        """Without a directory only the console handler is installed"""
        setup_logging(level="warning")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], TqdmLoggingHandler)
        assert handlers[0].level == logging.WARNING

    def test_unknown_level(self):
        """Unknown level names are rejected"""
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")

    def test_log_files(self, temp_dir):
        """A directory gets full, error and decode failure logs"""
        setup_logging(temp_dir, level="INFO", use_colors=False)
        logger = get_logger("track_codec.tests")

        logger.debug("debug detail")
        logger.error("something failed")
        log_decode_failure(
            logger,
            "QAAAAQ==",
            TrackTruncatedError("Unexpected end of track data")
        )
        shutdown_logging()

        logs_dir = temp_dir / "logs"
        full_log = next(logs_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        error_log = next(logs_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")
        failures = next(logs_dir.glob("decode_failures_*.log")).read_text(encoding="utf-8")

        assert "debug detail" in full_log
        assert "debug detail" not in error_log
        assert "something failed" in error_log
        assert "Decode failed: Unexpected end of track data" in error_log
        assert failures == "QAAAAQ==\nUnexpected end of track data\n\n"

    def test_shutdown_removes_handlers(self, temp_dir):
        """shutdown_logging leaves the root logger without handlers"""
        setup_logging(temp_dir)
        shutdown_logging()
        assert logging.getLogger().handlers == []
