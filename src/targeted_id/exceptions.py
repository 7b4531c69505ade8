"""Custom exceptions for targeted-id.

This module contains all custom exceptions used throughout the package.
Both errors are fatal to the caller; they differ in when they happen:

Load-time Errors (filter must not be used until corrected):
    - ConfigurationError: Unsupported hash algorithm, malformed attribute
      path, unknown field name, invalid pattern, unreadable config file

Invocation-time Errors (authentication event must be aborted):
    - MissingAttributeError: No user identifier found for a value

Values suppressed by an ifUser/ifTarget filter are not errors. They are
reported as ValueOutcome.SKIPPED_* and never surface to the caller.

Usage:
    from targeted_id.exceptions import ConfigurationError, MissingAttributeError
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "MissingAttributeError",
    "TargetedIDError",
]


class TargetedIDError(Exception):
    """Base exception for failures surfaced to the protocol engine.

    Subclasses define specific failure types with distinct exit codes,
    used by the CLI:
    - ConfigurationError (exit 2): Filter configuration is invalid
    - MissingAttributeError (exit 3): Mandatory user identifier missing

    Attributes:
        exit_code: Process exit code.
        failure_type: Category string for logging.
    """

    exit_code: int = 1
    failure_type: str = "unknown"


class ConfigurationError(TargetedIDError):
    """Configuration is invalid.

    Raised when:
    - hashFunction names an unsupported hash algorithm
    - An attribute path is not "group" or "group/key"
    - fields contains an unknown field name
    - An ifUser/ifTarget/targetTransform pattern does not compile
    - Config file is missing, not valid JSON, or fails schema validation

    Exit code 2 indicates configuration failure.
    """

    exit_code = 2
    failure_type = "configuration_failure"


class MissingAttributeError(TargetedIDError):
    """No user identifier could be resolved for a value.

    A targeted identifier requires a user to identify. Downstream services
    rely on it being present, so the whole authentication event is aborted
    rather than silently omitting the identifier.

    Exit code 3 indicates a missing mandatory attribute.

    Attributes:
        value_name: Name of the configured value being derived, if known.
    """

    exit_code = 3
    failure_type = "missing_attribute"

    def __init__(self, message: str, *, value_name: str | None = None) -> None:
        """Initialize MissingAttributeError.

        Args:
            message: Human-readable reason.
            value_name: Name of the value whose user identifier is missing.
        """
        super().__init__(message)
        self.message = message
        self.value_name = value_name

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if self.value_name is not None:
            return f"MissingAttributeError({self.message!r}, value_name={self.value_name!r})"
        return f"MissingAttributeError({self.message!r})"
