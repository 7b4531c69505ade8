"""Session state accessors.

The session state is owned by the protocol engine. It holds an "Attributes"
mapping (attribute name -> list of strings) plus optional top-level entries
such as "UserID", "saml:RequesterID", "core:SP" and "core:IdP".

The derivation core only reads it. The filter writes exactly one entry:
the output attribute inside "Attributes".
"""

from __future__ import annotations

__all__ = [
    "AttributeBag",
    "SessionState",
    "get_attributes",
    "set_output_attribute",
]

from collections.abc import Mapping, MutableMapping
from typing import Any

from targeted_id.constants import ATTRIBUTES_GROUP
from targeted_id.exceptions import MissingAttributeError

# Read-only view used by the derivation core
AttributeBag = Mapping[str, Any]

# Mutable state handed to the filter by the protocol engine
SessionState = MutableMapping[str, Any]


def get_attributes(state: AttributeBag) -> Mapping[str, Any]:
    """Return the "Attributes" mapping of a session state.

    Raises:
        MissingAttributeError: If the state has no "Attributes" mapping.
    """
    attributes = state.get(ATTRIBUTES_GROUP)
    if not isinstance(attributes, Mapping):
        raise MissingAttributeError(f"Session state has no '{ATTRIBUTES_GROUP}' mapping")
    return attributes


def set_output_attribute(state: SessionState, name: str, values: list[str]) -> None:
    """Replace attribute `name` in state["Attributes"] with `values`."""
    attributes = get_attributes(state)
    if not isinstance(attributes, MutableMapping):
        raise MissingAttributeError(f"Session state '{ATTRIBUTES_GROUP}' mapping is read-only")
    attributes[name] = list(values)
