"""Shared file utilities for targeted-id.

Provides common utilities used by config loading and the CLI:
- get_app_dir / get_config_path: OS-appropriate default locations
- require_file_exists: Clear error for missing files
- load_json_file: JSON parsing with consistent errors
- load_validated_json: JSON parsing + Pydantic validation
- format_validation_errors: Readable summary of a pydantic ValidationError
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

import click
from pydantic import BaseModel, ValidationError

from targeted_id.constants import APP_NAME
from targeted_id.exceptions import ConfigurationError

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    "format_validation_errors",
    "get_app_dir",
    "get_config_path",
    "load_json_file",
    "load_validated_json",
    "require_file_exists",
]

CONFIG_FILE_NAME = "config.json"


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/targeted-id
    - Linux: ~/.config/targeted-id (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\targeted-id

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def get_config_path() -> Path:
    """Get the default filter configuration path (<app_dir>/config.json)."""
    return get_app_dir() / CONFIG_FILE_NAME


def require_file_exists(file_path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError with helpful message if file doesn't exist.

    Args:
        file_path: Path to check.
        file_type: Description for error message (e.g., "configuration").

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if file_path.exists():
        return
    raise FileNotFoundError(f"{file_type.capitalize()} file not found at {file_path}.")


def load_json_file(file_path: Path, file_type: str = "file") -> Any:
    """Read and parse a JSON file.

    Raises:
        ValueError: If the file cannot be read or is not valid JSON.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e


def format_validation_errors(error: ValidationError) -> str:
    """Summarize a ValidationError as one "location: message" line per error."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"]) or "<root>"
        lines.append(f"  {loc}: {item['msg']}")
    return "\n".join(lines)


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
) -> T:
    """Load JSON file and validate against Pydantic model.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "config").

    Returns:
        Validated Pydantic model instance.

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or fails validation.
    """
    try:
        data = load_json_file(file_path, file_type=file_type)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid {file_type} file {file_path}:\n{format_validation_errors(e)}"
        ) from e
