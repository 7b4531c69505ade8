"""Filter configuration for targeted-id.

Defines the declarative configuration surface of the filter. The same option
keys appear at two levels:

    {
        "salt": "s3cr3t",                      <- filter-wide options
        "ifTarget": "^https://.*\\\\.example\\\\.com$",
        "values": {                            <- per-value overrides
            "new": {"hashFunction": "sha256"},
            "old": {"hashFunction": "sha1", "prefix": "{old}"}
        }
    }

Without "values", a single value named "default" is derived with the
filter-wide options only.

Layering depends on key presence, not on truthiness: a key given with an
empty value (null, "", [], {}) disables that option for the layer and
everything below it. Options that are left out fall through to the next
layer. ValueOptions.explicit_options() exposes exactly the keys that were
given.

Example usage:
    config = FilterConfig.load_from_file(config_path)
    config = parse_filter_config({"salt": "s3cr3t"})
"""

from __future__ import annotations

__all__ = [
    "FilterConfig",
    "OPTION_FIELDS",
    "ValueOptions",
    "parse_filter_config",
]

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from targeted_id.constants import DEFAULT_ATTRIBUTE_NAME
from targeted_id.exceptions import ConfigurationError
from targeted_id.utils.file_helpers import (
    format_validation_errors,
    load_validated_json,
    require_file_exists,
)

# Single value or list of alternatives (scalars are normalized later)
StringOrList = str | list[str] | None


class ValueOptions(BaseModel):
    """Options describing how one value is derived.

    Every option is optional. Which options were given is tracked by
    pydantic (model_fields_set) and drives the layering.

    Attributes:
        user_id: Attribute path(s) identifying the user, in preference order.
        if_user: Pattern(s) the userID must match for the value to be produced.
        target_id: Attribute path(s) identifying the relying party.
        target_transform: Ordered pattern -> replacement rewrites of targetID.
        if_target: Pattern(s) the transformed targetID must match.
        source_id: Attribute path(s) identifying the identity source.
        salt: Fixed secret mixed into the hash input.
        hash_function: Name of the hash algorithm (e.g., "sha256").
        hash_fields: Field names composing the hash input, in order.
        field_separator: String joining the composed fields.
        prefix: String prepended to the digest.
        name_id: Wrap the result in a SAML 2.0 NameID element.
    """

    user_id: StringOrList = Field(default=None, alias="userID")
    if_user: StringOrList = Field(default=None, alias="ifUser")
    target_id: StringOrList = Field(default=None, alias="targetID")
    target_transform: dict[str, str] | None = Field(default=None, alias="targetTransform")
    if_target: StringOrList = Field(default=None, alias="ifTarget")
    source_id: StringOrList = Field(default=None, alias="sourceID")
    salt: str | None = None
    hash_function: str | None = Field(default=None, alias="hashFunction")
    hash_fields: StringOrList = Field(default=None, alias="fields")
    field_separator: str | None = Field(default=None, alias="fieldSeparator")
    prefix: str | None = None
    name_id: bool | None = Field(default=None, alias="nameId")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def explicit_options(self) -> dict[str, Any]:
        """Return the derivation options that were explicitly given.

        Keys are python field names. Values may be empty (disable).
        """
        return {name: getattr(self, name) for name in OPTION_FIELDS if name in self.model_fields_set}


# Derivation options shared by both configuration levels
OPTION_FIELDS: tuple[str, ...] = tuple(ValueOptions.model_fields)


class FilterConfig(ValueOptions):
    """Complete filter configuration.

    Top-level options apply to every value; entries of `values` override
    them for one value only.

    Attributes:
        attribute_name: Output attribute written into state["Attributes"].
        values: Value name -> per-value options, in declaration order.
            None means a single implicit value named "default".
    """

    attribute_name: str = Field(default=DEFAULT_ATTRIBUTE_NAME, alias="attributeName", min_length=1)
    values: dict[str, ValueOptions] | None = None

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file using the documented key names.

        Only options that were explicitly given are written, so the saved
        file layers exactly like this one.

        Args:
            config_path: Path where the config JSON file should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(by_alias=True, exclude_unset=True), f, indent=2)
            f.write("\n")

    @classmethod
    def load_from_file(cls, config_path: Path) -> "FilterConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config JSON file.

        Returns:
            FilterConfig instance with loaded configuration.

        Raises:
            ConfigurationError: If the file is missing, invalid JSON, or
                fails validation.
        """
        try:
            require_file_exists(config_path, file_type="configuration")
        except FileNotFoundError as e:
            raise ConfigurationError(str(e)) from e
        return load_validated_json(config_path, cls, file_type="config")


def parse_filter_config(data: Mapping[str, Any] | FilterConfig) -> FilterConfig:
    """Validate an in-memory configuration mapping.

    Args:
        data: Raw configuration (as loaded from the protocol engine's
            config) or an already validated FilterConfig.

    Returns:
        Validated FilterConfig.

    Raises:
        ConfigurationError: If validation fails.
    """
    if isinstance(data, FilterConfig):
        return data
    try:
        return FilterConfig.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid filter configuration:\n{format_validation_errors(e)}") from e
