"""SAML 2.0 encoding of derived identifiers."""

from targeted_id.saml.nameid import Saml2NameIdEncoder

__all__ = ["Saml2NameIdEncoder"]
