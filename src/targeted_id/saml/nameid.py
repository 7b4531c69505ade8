"""SAML 2.0 persistent NameID encoding.

eduPersonTargetedID values are released either as plain strings or as a
SAML 2.0 NameID element with persistent format:

    <saml:NameID xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion"
                 NameQualifier="https://idp.example.org"
                 SPNameQualifier="https://sp.example.org"
                 Format="urn:oasis:names:tc:SAML:2.0:nameid-format:persistent">
        5f4dcc3b...
    </saml:NameID>

NameQualifier (the source) and SPNameQualifier (the target) are only present
when known. Characters XML 1.0 cannot represent are dropped.
"""

from __future__ import annotations

__all__ = ["Saml2NameIdEncoder"]

import re
from xml.etree import ElementTree as ET

from targeted_id.constants import NAMEID_FORMAT_PERSISTENT, SAML2_ASSERTION_NS

ET.register_namespace("saml", SAML2_ASSERTION_NS)

# Characters outside the XML 1.0 Char production (controls, lone surrogates,
# U+FFFE/U+FFFF) cannot be serialized
_XML_INVALID_CHARS = re.compile("[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def _xml_safe(text: str) -> str:
    return _XML_INVALID_CHARS.sub("", text)


class Saml2NameIdEncoder:
    """NameIdEncoder producing a serialized saml:NameID element.

    Attributes:
        name_format: NameID Format attribute (persistent by default).
    """

    def __init__(self, name_format: str = NAMEID_FORMAT_PERSISTENT) -> None:
        self.name_format = name_format

    def build(
        self,
        value: str,
        name_qualifier: str | None = None,
        sp_name_qualifier: str | None = None,
    ) -> ET.Element:
        """Build the NameID element without serializing it."""
        element = ET.Element(f"{{{SAML2_ASSERTION_NS}}}NameID")
        if name_qualifier:
            element.set("NameQualifier", _xml_safe(name_qualifier))
        if sp_name_qualifier:
            element.set("SPNameQualifier", _xml_safe(sp_name_qualifier))
        element.set("Format", self.name_format)
        element.text = _xml_safe(value)
        return element

    def encode(
        self,
        value: str,
        name_qualifier: str | None = None,
        sp_name_qualifier: str | None = None,
    ) -> str:
        """Encode an identifier as a serialized NameID element.

        Args:
            value: The derived identifier.
            name_qualifier: Source (IdP) identifier, omitted when empty.
            sp_name_qualifier: Target (SP) identifier, omitted when empty.

        Returns:
            The element as a unicode XML string.
        """
        return ET.tostring(self.build(value, name_qualifier, sp_name_qualifier), encoding="unicode")
