"""
Logging utilities for the bistatic Doppler core.
Provides console and rotating-file logging with a per-target context prefix.
"""

import logging
import logging.handlers
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

# Context variable for the target currently being processed
current_target: ContextVar[str | None] = ContextVar("current_target", default=None)


class TargetContextFilter(logging.Filter):
    """Add the current target id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add target id to the log record."""
        record.target_id = current_target.get() or "no-target"
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter that prefixes messages with the target id when one is set."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with target id."""
        if getattr(record, "target_id", "no-target") != "no-target":
            # Prefix a copy; the same record is formatted once per handler
            record = logging.makeLogRecord(record.__dict__)
            record.msg = f"[{record.target_id}] {record.getMessage()}"
            record.args = ()

        return super().format(record)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file_path: str | None = None,
    log_file_max_bytes: int = 10485760,  # 10 MB
    log_file_backup_count: int = 5,
    enable_console: bool = True,
    enable_file: bool = False,
) -> None:
    """
    Set up logging configuration with console and file handlers.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log message format string
        log_file_path: Path to log file
        log_file_max_bytes: Maximum size of log file before rotation
        log_file_backup_count: Number of backup files to keep
        enable_console: Enable console logging
        enable_file: Enable file logging
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Clear any existing handlers
    root_logger.handlers.clear()

    formatter = StructuredFormatter(log_format)
    target_filter = TargetContextFilter()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(target_filter)
        root_logger.addHandler(console_handler)

    if enable_file and log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=log_file_max_bytes, backupCount=log_file_backup_count
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(target_filter)
        root_logger.addHandler(file_handler)

    logging.info(f"Logging configured with level: {log_level}")


def configure_from(config: Any) -> None:
    """Apply a LoggingConfig section."""
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_format=config.LOG_FORMAT,
        log_file_path=config.LOG_FILE_PATH or None,
        log_file_max_bytes=config.LOG_FILE_MAX_BYTES,
        log_file_backup_count=config.LOG_FILE_BACKUP_COUNT,
        enable_console=config.LOG_ENABLE_CONSOLE,
        enable_file=config.LOG_ENABLE_FILE,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def get_current_target() -> str | None:
    return current_target.get()


class TargetContext:
    """Context manager that tags log lines with a target id."""

    def __init__(self, target_id: str):
        self.target_id = target_id
        self.token = None

    def __enter__(self) -> str:
        self.token = current_target.set(self.target_id)
        return self.target_id

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        current_target.reset(self.token)


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level
        message: Log message
        **context: Additional context fields to include
    """
    if context:
        context_str = " ".join([f"{k}={v}" for k, v in context.items()])
        full_message = f"{message} | {context_str}"
    else:
        full_message = message

    logger.log(level, full_message)
