"""System operational logging.

Provides the system logger for operational events of the filter
(configuration loaded, values derived or skipped).
"""

from targeted_id.telemetry.system.system_logger import (
    ConsoleFormatter,
    configure_system_logger_file,
    get_system_logger,
    set_system_log_level,
)

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "set_system_log_level",
]
