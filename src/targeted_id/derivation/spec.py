"""Resolved value specifications.

A ValueSpec is the fully merged, validated and frozen description of how one
named value is derived. Specs are built once, when the filter is configured,
from three layers (lowest precedence first):

    HARD_DEFAULTS  <  filter-wide options  <  per-value options

A layer overrides the one below for every option it explicitly sets, even
when the setting is empty. Empty settings disable the option:

    userID: []            -> no user lookup, userID is ""
    salt: null            -> no salt
    targetTransform: {}   -> no rewrites

All validation happens here so that derivation only deals with
well-formed specs:
- hashFunction must be a supported algorithm
- attribute paths must be "group" or "group/key"
- fields must name salt, userID, targetID or sourceID
- every pattern (and replacement template) must compile
"""

from __future__ import annotations

__all__ = [
    "HARD_DEFAULTS",
    "ValueSpec",
    "build_value_spec",
    "resolve_value_specs",
]

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from targeted_id.config import FilterConfig, ValueOptions
from targeted_id.constants import (
    DEFAULT_FIELD_SEPARATOR,
    DEFAULT_FIELDS,
    DEFAULT_HASH_FUNCTION,
    DEFAULT_SOURCE_ID,
    DEFAULT_TARGET_ID,
    DEFAULT_USER_ID,
    DEFAULT_VALUE_NAME,
    FIELD_NAMES,
)
from targeted_id.context.paths import AttributePath, parse_attribute_paths
from targeted_id.derivation.composer import is_supported_hash
from targeted_id.derivation.matcher import default_pattern_engine
from targeted_id.derivation.protocol import PatternEngine
from targeted_id.exceptions import ConfigurationError

# Lowest configuration layer, keyed by ValueOptions field name (read-only)
HARD_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "user_id": DEFAULT_USER_ID,
        "if_user": None,
        "target_id": DEFAULT_TARGET_ID,
        "target_transform": None,
        "if_target": None,
        "source_id": DEFAULT_SOURCE_ID,
        "salt": None,
        "hash_function": DEFAULT_HASH_FUNCTION,
        "hash_fields": DEFAULT_FIELDS,
        "field_separator": DEFAULT_FIELD_SEPARATOR,
        "prefix": None,
        "name_id": False,
    }
)


@dataclass(frozen=True, slots=True)
class ValueSpec:
    """Fully resolved derivation parameters for one named value.

    Attributes:
        name: Value name (key in the "values" section, or "default").
        user_id: User identifier alternatives. Empty disables the lookup.
        if_user: User filter patterns. Empty disables the filter.
        target_id: Target identifier alternatives.
        target_transform: (pattern, replacement) rewrites, in order.
        if_target: Target filter patterns, checked after the rewrites.
        source_id: Source identifier alternatives.
        salt: Fixed salt, "" when disabled.
        hash_function: Hash algorithm name (lowercase).
        fields: Hash input composition order.
        field_separator: Separator between composed fields.
        prefix: Prepended to the digest, "" when disabled.
        name_id: Encode the result as a name-identifier element.
    """

    name: str
    user_id: tuple[AttributePath, ...]
    if_user: tuple[str, ...]
    target_id: tuple[AttributePath, ...]
    target_transform: tuple[tuple[str, str], ...]
    if_target: tuple[str, ...]
    source_id: tuple[AttributePath, ...]
    salt: str
    hash_function: str
    fields: tuple[str, ...]
    field_separator: str
    prefix: str
    name_id: bool


def _as_tuple(raw: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalize a scalar-or-list option to a tuple (empty when disabled)."""
    if not raw:
        return ()
    if isinstance(raw, str):
        return (raw,)
    return tuple(raw)


def _checked_patterns(name: str, option: str, raw: str | Iterable[str] | None, engine: PatternEngine) -> tuple[str, ...]:
    patterns = _as_tuple(raw)
    for pattern in patterns:
        try:
            engine.validate(pattern)
        except ValueError as e:
            raise ConfigurationError(f"Value '{name}': invalid {option} pattern: {e}") from e
    return patterns


def _checked_rewrites(
    name: str, raw: Mapping[str, str] | None, engine: PatternEngine
) -> tuple[tuple[str, str], ...]:
    rewrites = tuple((raw or {}).items())
    for pattern, replacement in rewrites:
        try:
            engine.validate(pattern, replacement)
        except ValueError as e:
            raise ConfigurationError(f"Value '{name}': invalid targetTransform rule: {e}") from e
    return rewrites


def _checked_paths(name: str, option: str, raw: str | Iterable[str] | None) -> tuple[AttributePath, ...]:
    try:
        return parse_attribute_paths(raw)
    except ConfigurationError as e:
        raise ConfigurationError(f"Value '{name}': invalid {option}: {e}") from e


def build_value_spec(
    name: str,
    options: Mapping[str, Any],
    engine: PatternEngine | None = None,
) -> ValueSpec:
    """Validate merged options and freeze them into a ValueSpec.

    Args:
        name: Value name, used in error messages.
        options: Complete option mapping (every HARD_DEFAULTS key present).
        engine: Pattern engine used to validate patterns.

    Returns:
        The resolved ValueSpec.

    Raises:
        ConfigurationError: If any option is invalid.
    """
    engine = engine or default_pattern_engine()

    hash_function = (options["hash_function"] or "").lower()
    if not is_supported_hash(hash_function):
        raise ConfigurationError(
            f"Value '{name}': unsupported hash algorithm ({options['hash_function']!r}). "
            "Run 'targeted-id algorithms' to list supported algorithms."
        )

    fields = _as_tuple(options["hash_fields"])
    unknown = [field for field in fields if field not in FIELD_NAMES]
    if unknown:
        raise ConfigurationError(
            f"Value '{name}': unknown field(s) {unknown}. Valid fields: {', '.join(FIELD_NAMES)}"
        )

    return ValueSpec(
        name=name,
        user_id=_checked_paths(name, "userID", options["user_id"]),
        if_user=_checked_patterns(name, "ifUser", options["if_user"], engine),
        target_id=_checked_paths(name, "targetID", options["target_id"]),
        target_transform=_checked_rewrites(name, options["target_transform"], engine),
        if_target=_checked_patterns(name, "ifTarget", options["if_target"], engine),
        source_id=_checked_paths(name, "sourceID", options["source_id"]),
        salt=options["salt"] or "",
        hash_function=hash_function,
        fields=fields,
        field_separator=options["field_separator"] or "",
        prefix=options["prefix"] or "",
        name_id=bool(options["name_id"]),
    )


def resolve_value_specs(
    config: FilterConfig,
    defaults: Mapping[str, Any] = HARD_DEFAULTS,
    engine: PatternEngine | None = None,
) -> dict[str, ValueSpec]:
    """Merge configuration layers into one ValueSpec per configured value.

    Every value is validated before this function returns, so a bad value
    anywhere in the configuration prevents the filter from being used.

    Args:
        config: Validated filter configuration.
        defaults: Lowest configuration layer.
        engine: Pattern engine used to validate patterns.

    Returns:
        Value name -> ValueSpec, in declaration order.

    Raises:
        ConfigurationError: If any value has an invalid option.
    """
    values: Mapping[str, ValueOptions] = (
        config.values if config.values is not None else {DEFAULT_VALUE_NAME: ValueOptions()}
    )
    filter_wide = config.explicit_options()

    specs: dict[str, ValueSpec] = {}
    for name, overrides in values.items():
        merged = {**defaults, **filter_wide, **overrides.explicit_options()}
        specs[name] = build_value_spec(name, merged, engine)
    return specs
