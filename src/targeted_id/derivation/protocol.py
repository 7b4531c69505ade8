"""Protocol definitions for pluggable derivation capabilities.

Defines the interfaces the derivation engine depends on without knowing
the concrete implementation:

- PatternEngine: regular-expression matching and replacement used by
  ifUser/ifTarget filters and targetTransform rewrites.
- NameIdEncoder: turns a derived identifier into a serialized
  name-identifier element.

This follows the same structural-subtyping approach as the rest of the
package: implementations do not inherit from anything here.

Example alternative pattern engine:

    class Re2PatternEngine:
        def validate(self, pattern: str, replacement: str | None = None) -> None:
            re2.compile(pattern)

        def matches(self, pattern: str, value: str) -> bool:
            return re2.search(pattern, value) is not None

        def replace(self, pattern: str, replacement: str, value: str) -> str:
            return re2.sub(pattern, replacement, value)
"""

from __future__ import annotations

__all__ = [
    "NameIdEncoder",
    "PatternEngine",
]

from typing import Protocol, runtime_checkable


@runtime_checkable
class PatternEngine(Protocol):
    """Protocol for regular-expression engines.

    Patterns are used as written by the operator. Engines must not add
    implicit anchoring.

    Thread-safety:
    - All methods must be safe for concurrent calls
    """

    def validate(self, pattern: str, replacement: str | None = None) -> None:
        """Check that a pattern (and its replacement template) compiles.

        Called once per pattern at configuration load time.

        Raises:
            ValueError: If the pattern is invalid.
        """
        ...

    def matches(self, pattern: str, value: str) -> bool:
        """Return True if pattern matches anywhere in value."""
        ...

    def replace(self, pattern: str, replacement: str, value: str) -> str:
        """Replace every match of pattern in value.

        The replacement may reference groups captured by its own pattern.
        """
        ...


@runtime_checkable
class NameIdEncoder(Protocol):
    """Protocol for name-identifier encoders.

    The default implementation is Saml2NameIdEncoder, which produces a
    SAML 2.0 persistent NameID element.
    """

    def encode(
        self,
        value: str,
        name_qualifier: str | None = None,
        sp_name_qualifier: str | None = None,
    ) -> str:
        """Encode an identifier as a serialized name-identifier element.

        Args:
            value: The derived identifier.
            name_qualifier: Identifier of the source (IdP), or None to omit.
            sp_name_qualifier: Identifier of the target (SP), or None to omit.

        Returns:
            Serialized element.
        """
        ...
