"""Log formatting for JSONL output.

Provides ISO 8601 timestamp formatting for the system.jsonl file.
"""

from __future__ import annotations

__all__ = ["ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone


class ISO8601Formatter(logging.Formatter):
    """Formatter emitting one JSON object per record with an ISO 8601 UTC time.

    Format: YYYY-MM-DDTHH:MM:SS.sssZ
    Example: {"time": "2025-12-04T10:48:37.123Z", "level": "WARNING", "event": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSONL.

        Args:
            record: The log record to format

        Returns:
            str: JSON-formatted log entry with time and level first
        """
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        # Structured messages are dicts; everything else becomes {"message": ...}
        if isinstance(record.msg, dict):
            log_data = record.msg
        else:
            log_data = {"message": record.getMessage()}

        log_entry = {"time": timestamp, "level": record.levelname, **log_data}
        return json.dumps(log_entry, default=str)
