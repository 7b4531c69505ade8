"""Outcome of deriving one configured value.

Filter gates are a designed skip, not an error: a skipped value is simply
absent from the output collection.
"""

from __future__ import annotations

__all__ = ["ValueOutcome"]

from enum import Enum


class ValueOutcome(str, Enum):
    """Per-value derivation outcome.

    Inherits from str for easy serialization and comparison.

    Attributes:
        DERIVED: An identifier was produced.
        SKIPPED_USER: userID did not match any ifUser pattern.
        SKIPPED_TARGET: Transformed targetID did not match any ifTarget pattern.
    """

    DERIVED = "derived"
    SKIPPED_USER = "skipped_user"
    SKIPPED_TARGET = "skipped_target"
