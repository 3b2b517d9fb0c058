"""
SAML 1.1 protocol package.

Building blocks of a samlValidate round trip, leaf to root:

- request_builder: SOAP envelope and headers for a ticket.
- transport: one HTTP(S) POST per request, TLS policy applied.
- response_parser: namespace-free XML view and success detection.
- attributes: principal and attribute map of a successful response.
"""

from .request_builder import ValidationRequest, build_validation_request, local_ip_address
from .transport import RawResponse, SAMLTransport
from .response_parser import (
    SAMLResponseDocument,
    ValidationOutcome,
    is_success_status,
    parse_response,
)
from .attributes import AttributeMap, extract_attributes, extract_principal

__all__ = [
    "AttributeMap",
    "RawResponse",
    "SAMLResponseDocument",
    "SAMLTransport",
    "ValidationOutcome",
    "ValidationRequest",
    "build_validation_request",
    "extract_attributes",
    "extract_principal",
    "is_success_status",
    "local_ip_address",
    "parse_response",
]
