"""
SAML 1.1 response parsing.

Responses are parsed with lxml and every namespace is stripped from element
and attribute names, so lookups use plain local names such as
``//Response/Status/StatusCode/@Value``. Text content and attribute values
are left untouched: a StatusCode value of ``samlp:Success`` keeps its prefix.
"""

import re
from typing import Optional, Union

from lxml import etree
from pydantic import BaseModel, ConfigDict

from shared.errors import AuthenticationFailure
from .transport import RawResponse

STATUS_CODE_PATH = "//Response/Status/StatusCode/@Value"
STATUS_MESSAGE_PATH = "//Response/Status/StatusMessage"
NAME_IDENTIFIER_PATH = "//Response/Assertion/AuthenticationStatement/Subject/NameIdentifier"
ATTRIBUTE_STATEMENT_PATH = "//Response/Assertion/AttributeStatement"

# "samlp:Success" and "saml1p:Success" both count; "saml:Success" does not.
SUCCESS_PATTERN = re.compile(r"saml1?p:Success")


class ValidationOutcome(BaseModel):
    """Result of interpreting the Status block of a response."""

    model_config = ConfigDict(frozen=True)

    success: bool
    status_code: Optional[str] = None
    status_message: Optional[str] = None


def is_success_status(value: Optional[str]) -> bool:
    """True when a StatusCode Value denotes success."""
    if value is None:
        return False
    return SUCCESS_PATTERN.search(value) is not None


def strip_namespaces(root: etree._Element) -> etree._Element:
    """Rename elements and attributes to their local names, in place."""
    for element in root.iter():
        # Comments and processing instructions have no string tag
        if not isinstance(element.tag, str):
            continue

        element.tag = etree.QName(element).localname
        for name in list(element.attrib):
            if name.startswith("{"):
                value = element.attrib.pop(name)
                element.attrib[etree.QName(name).localname] = value

    etree.cleanup_namespaces(root)
    return root


class SAMLResponseDocument:
    """A namespace-free view of a samlValidate response."""

    def __init__(self, root: etree._Element):
        self.root = root

    def node_at(self, path: str) -> Optional[Union[etree._Element, str]]:
        """First node matching ``path``, or None."""
        results = self.root.xpath(path)
        if not results:
            return None
        return results[0]

    def text_at(self, path: str) -> Optional[str]:
        """Text of the first node matching ``path``, or None."""
        node = self.node_at(path)
        if node is None:
            return None
        if isinstance(node, str):
            return str(node)
        return "".join(node.itertext())

    def status_code(self) -> Optional[str]:
        return self.text_at(STATUS_CODE_PATH)

    def status_message(self) -> Optional[str]:
        message = self.text_at(STATUS_MESSAGE_PATH)
        if message is None:
            return None
        return message.strip()

    def principal(self) -> Optional[str]:
        return self.text_at(NAME_IDENTIFIER_PATH)

    def outcome(self) -> ValidationOutcome:
        status_code = self.status_code()
        if is_success_status(status_code):
            return ValidationOutcome(success=True, status_code=status_code)

        return ValidationOutcome(
            success=False,
            status_code=status_code,
            status_message=self.status_message()
        )


def parse_response(raw: RawResponse) -> SAMLResponseDocument:
    """Parse a raw response body into a namespace-free document."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True)

    try:
        root = etree.fromstring(raw.content, parser=parser)
    except etree.XMLSyntaxError as e:
        raise AuthenticationFailure(
            "Unparseable SAML validation response",
            details={"status_code": raw.status_code, "parse_error": str(e)}
        )

    if root is None:
        raise AuthenticationFailure(
            "Empty SAML validation response",
            details={"status_code": raw.status_code}
        )

    return SAMLResponseDocument(strip_namespaces(root))
