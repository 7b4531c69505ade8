"""Attribute paths and value resolution against the session state.

An attribute path names where a fact lives in the session state:

    "UserID"                      -> state["UserID"]
    "Attributes/schacHomeOrganization"
                                  -> state["Attributes"]["schacHomeOrganization"]

Paths are parsed once at configuration load time into AttributePath objects.
Resolution then uses direct lookups, no string splitting per call.

Resolution walks alternatives in preference order and returns the first
non-empty value. When a group or key holds a list, its first element is used.
"""

from __future__ import annotations

__all__ = [
    "AttributePath",
    "OnMissing",
    "parse_attribute_path",
    "parse_attribute_paths",
    "resolve_value",
]

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from targeted_id.exceptions import ConfigurationError, MissingAttributeError

# Separator between group and key
_PATH_SEPARATOR = "/"


class OnMissing(str, Enum):
    """What resolve_value does when no alternative yields a value.

    Attributes:
        FAIL: Raise MissingAttributeError.
        DEFAULT_EMPTY: Return an empty string.
    """

    FAIL = "fail"
    DEFAULT_EMPTY = "default-empty"


@dataclass(frozen=True, slots=True)
class AttributePath:
    """A parsed attribute path: a group and an optional key within it.

    Attributes:
        group: Top-level entry of the session state (e.g., "Attributes").
        key: Entry inside the group, or None to use the group value itself.
    """

    group: str
    key: str | None = None

    def __str__(self) -> str:
        if self.key is None:
            return self.group
        return f"{self.group}{_PATH_SEPARATOR}{self.key}"

    def lookup(self, bag: Mapping[str, Any]) -> Any:
        """Return the raw value at this path, or None if absent."""
        data = bag.get(self.group)
        if self.key is None:
            return data
        if isinstance(data, Mapping):
            return data.get(self.key)
        return None


def parse_attribute_path(raw: str) -> AttributePath:
    """Parse "group" or "group/key" into an AttributePath.

    Args:
        raw: Path string from configuration.

    Returns:
        Parsed AttributePath.

    Raises:
        ConfigurationError: If the path is empty, has an empty segment,
            or nests deeper than two segments.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigurationError(f"Attribute path must be a non-empty string, got {raw!r}")

    segments = raw.split(_PATH_SEPARATOR)
    if len(segments) > 2:
        raise ConfigurationError(
            f"Attribute path {raw!r} is nested too deeply. Use 'group' or 'group/key'."
        )
    if any(not segment for segment in segments):
        raise ConfigurationError(f"Attribute path {raw!r} has an empty segment")

    if len(segments) == 1:
        return AttributePath(group=segments[0])
    return AttributePath(group=segments[0], key=segments[1])


def parse_attribute_paths(raw: str | Iterable[str] | None) -> tuple[AttributePath, ...]:
    """Parse a single path or a list of alternatives.

    Args:
        raw: A path, a list of paths (preference order), or None.

    Returns:
        Tuple of AttributePath. Empty when raw is None, "" or [].
    """
    if not raw:
        return ()
    if isinstance(raw, str):
        return (parse_attribute_path(raw),)
    return tuple(parse_attribute_path(item) for item in raw)


def _first_value(data: Any) -> str:
    """Reduce a looked-up value to a single string.

    Lists and tuples contribute their first element. None and empty
    containers become "".
    """
    if data is None:
        return ""
    if isinstance(data, (list, tuple)):
        if not data:
            return ""
        data = data[0]
        if data is None:
            return ""
    if isinstance(data, Mapping):
        # A bare group holding a mapping has no single value
        return ""
    return str(data)


def resolve_value(
    bag: Mapping[str, Any],
    paths: Iterable[AttributePath],
    on_missing: OnMissing = OnMissing.DEFAULT_EMPTY,
    error_message: str = "Attribute not found",
) -> str:
    """Resolve the first non-empty value among path alternatives.

    Alternatives are tried in order. The first one that yields a non-empty
    string wins and the rest are not looked at. The bag is never modified.

    Args:
        bag: Session state (attribute bag).
        paths: Alternatives in preference order.
        on_missing: Policy when no alternative yields a value.
        error_message: Message for MissingAttributeError.

    Returns:
        The resolved string, or "" under OnMissing.DEFAULT_EMPTY.

    Raises:
        MissingAttributeError: If nothing was found and on_missing is FAIL.
    """
    for path in paths:
        value = _first_value(path.lookup(bag))
        if value:
            return value

    if on_missing is OnMissing.FAIL:
        raise MissingAttributeError(error_message)
    return ""
