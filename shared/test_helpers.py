"""
Test helper functions and factory methods for the CAS validation service.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr

import httpx

AttributeEntry = Tuple[str, Sequence[str]]

SUCCESS_RESPONSE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
  <SOAP-ENV:Header/>
  <SOAP-ENV:Body>
    <saml1p:Response xmlns:saml1p="urn:oasis:names:tc:SAML:1.0:protocol" IssueInstant="2024-01-01T00:00:00.000Z" MajorVersion="1" MinorVersion="1" Recipient="https://app.example.com/" ResponseID="_e1b3c1b4a0b0c0d0e0f0">
      <saml1p:Status>
        <saml1p:StatusCode Value=%(status_code)s/>
      </saml1p:Status>
      <saml1:Assertion xmlns:saml1="urn:oasis:names:tc:SAML:1.0:assertion" AssertionID="_a2b4c6d8" IssueInstant="2024-01-01T00:00:00.000Z" Issuer="localhost" MajorVersion="1" MinorVersion="1">
        <saml1:Conditions NotBefore="2024-01-01T00:00:00.000Z" NotOnOrAfter="2024-01-01T00:00:30.000Z">
          <saml1:AudienceRestrictionCondition>
            <saml1:Audience>https://app.example.com/</saml1:Audience>
          </saml1:AudienceRestrictionCondition>
        </saml1:Conditions>
%(attribute_statement)s        <saml1:AuthenticationStatement AuthenticationInstant="2024-01-01T00:00:00.000Z" AuthenticationMethod="urn:oasis:names:tc:SAML:1.0:am:password">
          <saml1:Subject>
            <saml1:NameIdentifier>%(principal)s</saml1:NameIdentifier>
            <saml1:SubjectConfirmation>
              <saml1:ConfirmationMethod>urn:oasis:names:tc:SAML:1.0:cm:artifact</saml1:ConfirmationMethod>
            </saml1:SubjectConfirmation>
          </saml1:Subject>
        </saml1:AuthenticationStatement>
      </saml1:Assertion>
    </saml1p:Response>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""

ATTRIBUTE_STATEMENT_TEMPLATE = """        <saml1:AttributeStatement>
          <saml1:Subject>
            <saml1:NameIdentifier>%(principal)s</saml1:NameIdentifier>
          </saml1:Subject>
%(attributes)s        </saml1:AttributeStatement>
"""

FAILURE_RESPONSE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
  <SOAP-ENV:Header/>
  <SOAP-ENV:Body>
    <Response xmlns="urn:oasis:names:tc:SAML:1.0:protocol" xmlns:samlp="urn:oasis:names:tc:SAML:1.0:protocol" IssueInstant="2024-01-01T00:00:00.000Z" MajorVersion="1" MinorVersion="1" ResponseID="_f0e0d0c0">
      <Status>
        <StatusCode Value=%(status_code)s/>
%(status_message)s      </Status>
    </Response>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""


def _render_attribute(name: str, values: Sequence[str]) -> str:
    rendered = "".join(
        f"              <saml1:AttributeValue>{escape(value)}</saml1:AttributeValue>\n"
        for value in values
    )
    return (
        f"            <saml1:Attribute AttributeName={quoteattr(name)} "
        f"AttributeNamespace=\"http://www.ja-sig.org/products/cas/\">\n"
        f"{rendered}"
        f"            </saml1:Attribute>\n"
    )


def build_success_response(
    principal: str = "alice",
    attributes: Optional[List[AttributeEntry]] = None,
    status_code: str = "samlp:Success",
) -> bytes:
    """Build a samlValidate success body.

    ``attributes`` is a list of (name, values) pairs so duplicate names can
    be expressed; None leaves out the AttributeStatement altogether.
    """
    attribute_statement = ""
    if attributes is not None:
        attribute_statement = ATTRIBUTE_STATEMENT_TEMPLATE % {
            "principal": escape(principal),
            "attributes": "".join(_render_attribute(name, values) for name, values in attributes),
        }

    return (SUCCESS_RESPONSE_TEMPLATE % {
        "status_code": quoteattr(status_code),
        "principal": escape(principal),
        "attribute_statement": attribute_statement,
    }).encode("utf-8")


def build_failure_response(
    status_code: str = "samlp:RequestDenied",
    status_message: Optional[str] = None,
) -> bytes:
    """Build a samlValidate failure body."""
    message = ""
    if status_message is not None:
        message = f"        <StatusMessage>{escape(status_message)}</StatusMessage>\n"

    return (FAILURE_RESPONSE_TEMPLATE % {
        "status_code": quoteattr(status_code),
        "status_message": message,
    }).encode("utf-8")


class MockCASServer:
    """Canned samlValidate endpoint backed by ``httpx.MockTransport``.

    Every request is recorded so tests can assert on call counts and on the
    exact body that went over the wire.
    """

    def __init__(self, body: bytes = b"", status_code: int = 200,
                 error: Optional[Callable[[httpx.Request], Exception]] = None,
                 headers: Optional[Dict[str, str]] = None):
        self.body = body
        self.status_code = status_code
        self.headers = {"Content-Type": "text/xml; charset=utf-8", **(headers or {})}
        self.error = error
        self.requests: List[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers=self.headers
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def call_count(self) -> int:
        return len(self.requests)


def read_timeout(request: httpx.Request) -> Exception:
    return httpx.ReadTimeout("timed out", request=request)


def connect_error(request: httpx.Request) -> Exception:
    return httpx.ConnectError("connection refused", request=request)
