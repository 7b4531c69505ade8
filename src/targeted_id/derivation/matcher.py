"""Pattern matching and target rewriting for value derivation.

This module provides:
- RegexPatternEngine: default PatternEngine backed by Python's `re`
- matches_any: OR logic over a list of filter patterns
- apply_transforms: ordered pattern -> replacement rewrites

Patterns are Python regular expressions used as written: matching uses
`re.search`, so a pattern only matches the whole value if the operator
anchors it with ^ and $.
"""

from __future__ import annotations

__all__ = [
    "RegexPatternEngine",
    "apply_transforms",
    "default_pattern_engine",
    "matches_any",
]

import functools
import re
from collections.abc import Iterable, Sequence

from targeted_id.derivation.protocol import PatternEngine

# Compiled patterns are shared process-wide; patterns come from config only
_PATTERN_CACHE_SIZE = 256


@functools.lru_cache(maxsize=_PATTERN_CACHE_SIZE)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


class RegexPatternEngine:
    """PatternEngine using Python's `re` module.

    Replacement strings use `re.sub` syntax: `\\1` or `\\g<name>` refer to
    captured groups.
    """

    def validate(self, pattern: str, replacement: str | None = None) -> None:
        """Compile pattern (and replacement template), raising ValueError if invalid."""
        try:
            compiled = _compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {pattern!r}: {e}") from e
        if replacement is None:
            return
        try:
            # The template is parsed even when nothing matches
            compiled.sub(replacement, "")
        except (re.error, IndexError) as e:
            raise ValueError(f"Invalid replacement {replacement!r} for {pattern!r}: {e}") from e

    def matches(self, pattern: str, value: str) -> bool:
        return _compile(pattern).search(value) is not None

    def replace(self, pattern: str, replacement: str, value: str) -> str:
        return _compile(pattern).sub(replacement, value)


_default_engine = RegexPatternEngine()


def default_pattern_engine() -> PatternEngine:
    """Return the shared RegexPatternEngine instance."""
    return _default_engine


def matches_any(
    value: str,
    patterns: Iterable[str],
    engine: PatternEngine | None = None,
) -> bool:
    """Check that a string matches at least one of a list of patterns.

    Callers decide whether a filter applies at all; this function is only
    called with a non-empty pattern list.

    Args:
        value: String to check (userID or transformed targetID).
        patterns: Alternative patterns (OR logic).
        engine: Pattern engine to use. Defaults to RegexPatternEngine.

    Returns:
        True if any pattern matches, False otherwise.
    """
    engine = engine or _default_engine
    return any(engine.matches(pattern, value) for pattern in patterns)


def apply_transforms(
    value: str,
    rewrites: Sequence[tuple[str, str]] | None,
    engine: PatternEngine | None = None,
) -> str:
    """Apply ordered rewrites, each to the result of the previous one.

    Example:
        >>> apply_transforms(
        ...     "https://sp.example.org/shibboleth",
        ...     [(r"^https?://", ""), (r"/.*$", "")],
        ... )
        'sp.example.org'

    Args:
        value: String to rewrite (targetID).
        rewrites: (pattern, replacement) pairs in application order.
        engine: Pattern engine to use. Defaults to RegexPatternEngine.

    Returns:
        Rewritten string. Unchanged when rewrites is empty or None.
    """
    if not rewrites:
        return value

    engine = engine or _default_engine
    for pattern, replacement in rewrites:
        value = engine.replace(pattern, replacement, value)
    return value
