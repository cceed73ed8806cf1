"""
Logging configuration for track-codec.

This module sets up the logging system used by the command line tool:
    - Console: Colored, tqdm-compatible output
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - decode_failures.log: Inputs that could not be decoded, with the reason

The codec modules only ever obtain loggers; they never configure logging.
Applications embedding the codec keep full control of their own handlers.

Log File Locations:
    File logging is optional. When a directory is configured, files are
    created in <directory>/logs with a timestamp in their names.

Usage:
    from track_codec.core.logger import setup_logging, get_logger

    setup_logging(log_dir, level="INFO")  # Call once at startup
    logger = get_logger(__name__)         # Get logger for each module

    logger.info("Decoding 12 tracks")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

import colorama
from colorama import Fore, Style
from tqdm import tqdm


LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
DECODE_FAILURES_FILENAME = "decode_failures"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name for console output.

    Colors:
        - DEBUG: Cyan
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bright Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as "LEVEL: message".

        Args:
            record: The log record to format.

        Returns:
            Formatted string, with ANSI color codes when enabled.
        """
        levelname = record.levelname
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            levelname = f"{color}{levelname}{Style.RESET_ALL}"

        message = f"{levelname}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    tqdm progress bars redraw in place with carriage returns. Writing log
    lines through tqdm.write() places them above any active bar instead of
    tearing it.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """
        Initialize the tqdm-compatible handler.

        Args:
            stream: Output stream for log messages. Defaults to stderr,
                    which is also where tqdm draws its bars. Resolved at
                    emit time so a replaced sys.stderr is honored.
        """
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class DecodeFailedTrackHandler(logging.Handler):
    """
    Handler that collects tracks which failed to decode into a report file.

    Only records carrying the 'decode_failed_track' extra field are written;
    everything else is ignored. Each entry is the original input followed
    by the failure reason:

        QAAAjQIAJVJpY2sgQXN0bGV5...
        Failed to read track field 4 (length): Unexpected end of track data...

    Attributes:
        report_path: Path to the decode_failures log file.
        report_file: Open file handle, None until open() is called.

    Usage:
        log_decode_failure(logger, encoded, error)
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        Called by setup_logging() after the handler is created.
        File is opened in write mode (overwrites existing content).
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "decode_failed_track"):
            return

        if self.report_file is None:
            return

        try:
            track = getattr(record, "decode_failed_track", "")
            reason = getattr(record, "decode_failed_reason", "")
            self.report_file.write(f"{track}\n")
            self.report_file.write(f"{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            self.report_file.close()
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(
    log_dir: Path | None = None,
    level: str = "INFO",
    use_colors: bool = True
) -> None:
    """
    Configure the logging system for the command line tool.

    Call once at startup, after the configuration is loaded.

    Args:
        log_dir: Directory for log files. Files go in a 'logs'
                 subdirectory. None disables file logging.
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        use_colors: Color the console level names.

    Behavior:
        1. Configure root logger level to DEBUG and remove existing handlers
           (call shutdown_logging() first to close handlers from a previous run)
        2. Add console handler (TqdmLoggingHandler) at the requested level
        3. If log_dir is given, create log_dir/logs and add:
           - log_full_{timestamp}.log at DEBUG
           - log_errors_{timestamp}.log filtered to ERROR+
           - decode_failures_{timestamp}.log via DecodeFailedTrackHandler

    Raises:
        ValueError: If level is not a known level name.

    Thread Safety:
        Not thread-safe. Call from the main thread before any work starts.
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    colorama.just_fix_windows_console()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(getattr(logging, level_name))
    console_handler.setFormatter(ColoredConsoleFormatter(use_colors=use_colors))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return

    logs_dir = log_dir / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        logs_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        logs_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = DecodeFailedTrackHandler(
        logs_dir / f"{DECODE_FAILURES_FILENAME}_{timestamp}.log"
    )
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'track_codec.codec.track'.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called have no
        handlers of their own and follow whatever the host application
        configured on the root logger.
    """
    return logging.getLogger(name)


def log_decode_failure(logger: logging.Logger, track: str, error: Exception) -> None:
    """
    Log a track input that could not be decoded.

    Logs at ERROR level with the extra fields DecodeFailedTrackHandler
    uses to write decode_failures.log.

    Args:
        logger: The logger to use for the message.
        track: The input as the user supplied it (usually base64 text).
        error: The exception raised by the decoder.

    Example:
        try:
            decode(encoded)
        except TrackDecodeError as e:
            log_decode_failure(logger, encoded, e)
    """
    logger.error(
        f"Decode failed: {error}",
        extra={
            "decode_failed_track": track,
            "decode_failed_reason": str(error),
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and remove every handler on the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)
