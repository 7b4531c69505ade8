"""Application-wide constants for targeted-id.

Constants that define derivation behavior.
For per-deployment settings, see config.py.
"""

import hashlib

__all__ = [
    # Application identity
    "APP_NAME",
    # Output attribute
    "DEFAULT_ATTRIBUTE_NAME",
    # Hard defaults for every value
    "DEFAULT_USER_ID",
    "DEFAULT_TARGET_ID",
    "DEFAULT_SOURCE_ID",
    "DEFAULT_HASH_FUNCTION",
    "DEFAULT_FIELDS",
    "DEFAULT_FIELD_SEPARATOR",
    "DEFAULT_VALUE_NAME",
    # Fields
    "FIELD_NAMES",
    # Hashing
    "SUPPORTED_HASH_ALGORITHMS",
    # SAML
    "SAML2_ASSERTION_NS",
    "NAMEID_FORMAT_PERSISTENT",
    # Session state
    "ATTRIBUTES_GROUP",
]

APP_NAME = "targeted-id"

# Attribute the filter writes its output collection to
DEFAULT_ATTRIBUTE_NAME = "eduPersonTargetedID"

# ============================================================================
# Hard defaults (lowest configuration layer)
# ============================================================================

DEFAULT_USER_ID: tuple[str, ...] = ("UserID",)

# Requesting SP: proxied request first, then the SP talking to us
DEFAULT_TARGET_ID: tuple[str, ...] = ("saml:RequesterID", "core:SP")

# Home organization of the user, then the IdP that authenticated them
DEFAULT_SOURCE_ID: tuple[str, ...] = ("Attributes/schacHomeOrganization", "core:IdP")

DEFAULT_HASH_FUNCTION = "sha256"

# Salt at both ends of the hash input
DEFAULT_FIELDS: tuple[str, ...] = ("salt", "userID", "targetID", "sourceID", "salt")

DEFAULT_FIELD_SEPARATOR = "@@"

# Name of the implicit value when the config has no "values" section
DEFAULT_VALUE_NAME = "default"

# ============================================================================
# Fields available to the composer
# ============================================================================

FIELD_NAMES: tuple[str, ...] = ("salt", "userID", "targetID", "sourceID")

# ============================================================================
# Hashing
# ============================================================================

# Variable-length digests (shake_*) need an explicit length and are excluded
SUPPORTED_HASH_ALGORITHMS: frozenset[str] = frozenset(
    name.lower() for name in hashlib.algorithms_available if not name.lower().startswith("shake")
)

# ============================================================================
# SAML 2.0
# ============================================================================

SAML2_ASSERTION_NS = "urn:oasis:names:tc:SAML:2.0:assertion"
NAMEID_FORMAT_PERSISTENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"

# ============================================================================
# Session state
# ============================================================================

# Group holding user attributes; also where the output is written
ATTRIBUTES_GROUP = "Attributes"
