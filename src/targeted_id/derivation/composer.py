"""Hash input composition and digest computation."""

from __future__ import annotations

__all__ = [
    "ResolvedInputs",
    "compose_fields",
    "hash_digest",
    "is_supported_hash",
]

import hashlib
from collections.abc import Iterable, Mapping
from typing import TypedDict

from targeted_id.constants import SUPPORTED_HASH_ALGORITHMS


class ResolvedInputs(TypedDict):
    """Values available to the composer for one derived value.

    targetID holds the value after targetTransform was applied.
    """

    salt: str
    userID: str
    targetID: str
    sourceID: str


def compose_fields(inputs: Mapping[str, str], field_order: Iterable[str], separator: str) -> str:
    """Join the non-empty inputs named by field_order with separator.

    Empty fields are dropped entirely, so they produce neither a segment
    nor an extra separator. A field listed twice produces two segments.

    Example:
        >>> compose_fields({"salt": "", "userID": "jdoe", "targetID": "sp"},
        ...                ["salt", "userID", "targetID"], "@@")
        'jdoe@@sp'
    """
    return separator.join(value for value in (inputs.get(name, "") for name in field_order) if value)


def is_supported_hash(name: str) -> bool:
    """Return True if `name` is a usable fixed-length hash algorithm."""
    if name not in SUPPORTED_HASH_ALGORITHMS:
        return False
    try:
        hashlib.new(name)
    except ValueError:
        # Listed by OpenSSL but disabled in this build (e.g., md4 on OpenSSL 3)
        return False
    return True


def hash_digest(hash_function: str, raw: str) -> str:
    """Return the lowercase hex digest of raw (UTF-8 encoded).

    Lone surrogates (possible in JSON input) are encoded as-is rather than
    rejected, so every resolved string has a digest.
    """
    return hashlib.new(hash_function, raw.encode("utf-8", errors="surrogatepass")).hexdigest()
