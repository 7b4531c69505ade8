"""Shared fixtures for targeted-id tests."""

import logging
from typing import Generator

import pytest

from targeted_id.telemetry.system import system_logger


@pytest.fixture
def detach_log_file() -> Generator[None, None, None]:
    """Remove any JSONL log file handler and restore the INFO level afterwards."""
    yield
    handler = system_logger._file_handler
    if handler is not None:
        system_logger.get_system_logger().removeHandler(handler)
        handler.close()
        system_logger._file_handler = None
    system_logger.set_system_log_level(logging.INFO)
