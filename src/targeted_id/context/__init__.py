"""Session state access for identifier derivation.

Structure:
    paths.py     - AttributePath parsing + first-non-empty value resolution
    state.py     - Session state accessors (read Attributes, write output)
"""

from targeted_id.context.paths import (
    AttributePath,
    OnMissing,
    parse_attribute_path,
    parse_attribute_paths,
    resolve_value,
)
from targeted_id.context.state import (
    AttributeBag,
    SessionState,
    get_attributes,
    set_output_attribute,
)

__all__ = [
    # Paths
    "AttributePath",
    "OnMissing",
    "parse_attribute_path",
    "parse_attribute_paths",
    "resolve_value",
    # State
    "AttributeBag",
    "SessionState",
    "get_attributes",
    "set_output_attribute",
]
