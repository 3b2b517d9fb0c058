"""
Principal and attribute extraction from successful SAML responses.
"""

from typing import Dict, List, Union

from shared.errors import AuthenticationFailure
from .response_parser import ATTRIBUTE_STATEMENT_PATH, SAMLResponseDocument

AttributeValue = Union[str, List[str]]
AttributeMap = Dict[str, AttributeValue]


def extract_principal(document: SAMLResponseDocument) -> str:
    """Return the NameIdentifier of the authentication statement."""
    principal = document.principal()
    if not principal:
        raise AuthenticationFailure(
            "SAML response carries no NameIdentifier",
            details={"path": "Subject/NameIdentifier"}
        )
    return principal


def extract_attributes(document: SAMLResponseDocument) -> AttributeMap:
    """Collect the AttributeStatement into a name -> value(s) mapping.

    A single AttributeValue is returned as a plain string, anything else as
    a list in document order. When an attribute name repeats, the last
    occurrence wins. A response without an AttributeStatement yields an
    empty mapping.
    """
    attributes: AttributeMap = {}

    statement = document.node_at(ATTRIBUTE_STATEMENT_PATH)
    if statement is None:
        return attributes

    for node in statement:
        if not isinstance(node.tag, str):
            continue

        name = node.get("AttributeName")
        if name is None:
            continue

        values = ["".join(value.itertext()) for value in node.findall("AttributeValue")]
        attributes[name] = values[0] if len(values) == 1 else values

    return attributes
