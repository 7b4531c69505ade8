"""System logger for operational events.

This module provides a singleton system logger for operational events of the
filter (configuration loaded, value skipped by a filter gate, value derived).

Logging strategy:
- Console (stderr): INFO and above by default, DEBUG when enabled via
  set_system_log_level() (the CLI's --debug flag)
- File (JSONL): every event at DEBUG and above, configured separately via
  configure_system_logger_file() (the CLI's --log-file option)

Messages are dicts with an "event" field. Salts and hash inputs are never
logged: they are secret material for offline correlation.
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "set_system_log_level",
]

import logging
import sys
from pathlib import Path

from targeted_id.constants import APP_NAME
from targeted_id.utils.logging.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    Remaining fields are appended as key=value pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human-readable console output.

        Args:
            record: The log record to format.

        Returns:
            str: Formatted log message with level prefix.
        """
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            details = " ".join(
                f"{key}={value}" for key, value in record.msg.items() if key not in ("message", "event")
            )
            return f"{record.levelname}: {msg} {details}".rstrip()
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger
_system_logger: logging.Logger | None = None
_stderr_handler: logging.Handler | None = None
_file_handler: logging.Handler | None = None


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Creates the logger on first call with stderr handler only.

    Returns:
        logging.Logger: Configured system logger instance.

    Example:
        >>> from targeted_id.telemetry.system.system_logger import get_system_logger
        >>> logger = get_system_logger()
        >>> logger.debug({"event": "value_skipped", "value": "default", "reason": "ifTarget"})
    """
    global _system_logger, _stderr_handler

    if _system_logger is not None:
        return _system_logger

    _system_logger = logging.getLogger(f"{APP_NAME}.system")
    _system_logger.setLevel(logging.INFO)
    _system_logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in _system_logger.handlers:
        handler.close()
    _system_logger.handlers.clear()

    _stderr_handler = logging.StreamHandler(sys.stderr)
    _stderr_handler.setLevel(logging.INFO)
    _stderr_handler.setFormatter(ConsoleFormatter())
    _system_logger.addHandler(_stderr_handler)

    return _system_logger


def set_system_log_level(level: int) -> None:
    """Set the level of the system logger and its console handler.

    A configured log file keeps receiving events at its own level, even
    when the console is quieter.

    Args:
        level: Logging level (e.g., logging.DEBUG).
    """
    logger = get_system_logger()
    if _stderr_handler is not None:
        _stderr_handler.setLevel(level)
    if _file_handler is not None:
        level = min(level, _file_handler.level)
    logger.setLevel(level)


def configure_system_logger_file(log_path: Path, level: int = logging.DEBUG) -> None:
    """Write system events to a JSONL file.

    Records every event at `level` and above (DEBUG by default, so
    value_skipped/value_derived/config_loaded are recorded). A second call
    replaces the previous file.

    Args:
        log_path: Path to the system log file.
        level: Minimum level written to the file.

    Raises:
        OSError: If the log file cannot be opened.
    """
    global _file_handler

    logger = get_system_logger()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    _file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(_file_handler)

    if logger.level > level:
        logger.setLevel(level)
