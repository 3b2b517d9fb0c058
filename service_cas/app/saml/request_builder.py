"""
SAML 1.1 ticket validation request construction.
"""

import ipaddress
import socket
from datetime import datetime, timezone
from typing import Dict, Optional

import psutil
from pydantic import BaseModel, ConfigDict

FALLBACK_IP_ADDRESS = "127.0.0.1"

REQUEST_HEADERS = {
    "Accept": "*/*",
    "Content-Type": "application/soap+xml; charset=utf-8",
}

# The ticket is substituted as-is. It is not XML-escaped, so a ticket
# carrying markup characters changes the document sent to the server.
ENVELOPE_TEMPLATE = """<?xml version='1.0'?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
  <SOAP-ENV:Header/>
  <SOAP-ENV:Body>
    <samlp:Request xmlns:samlp="urn:oasis:names:tc:SAML:1.0:protocol" MajorVersion="1" MinorVersion="1" RequestID="%(request_id)s" IssueInstant="%(issue_instant)s">
      <samlp:AssertionArtifact>%(ticket)s</samlp:AssertionArtifact>
    </samlp:Request>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""


class ValidationRequest(BaseModel):
    """A fully built samlValidate request, ready to be posted."""

    model_config = ConfigDict(frozen=True)

    server_url: str
    ticket: str
    request_id: str
    issue_instant: str

    @property
    def body(self) -> str:
        return ENVELOPE_TEMPLATE % {
            "request_id": self.request_id,
            "issue_instant": self.issue_instant,
            "ticket": self.ticket,
        }

    @property
    def headers(self) -> Dict[str, str]:
        return dict(REQUEST_HEADERS)


def local_ip_address() -> str:
    """Return the first public IPv4 address bound to a local interface.

    Loopback, multicast and private addresses are skipped. Falls back to
    127.0.0.1 when no interface carries one.
    """
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error):
        return FALLBACK_IP_ADDRESS

    for addresses in interfaces.values():
        for entry in addresses:
            if entry.family != socket.AF_INET:
                continue
            address = ipaddress.IPv4Address(entry.address)
            if address.is_loopback or address.is_multicast or address.is_private:
                continue
            return str(address)

    return FALLBACK_IP_ADDRESS


def format_issue_instant(now: datetime) -> str:
    """ISO-8601 UTC timestamp with a literal Z suffix."""
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")


def build_validation_request(
    server_url: str,
    ticket: str,
    now: Optional[datetime] = None,
    ip_address: Optional[str] = None,
) -> ValidationRequest:
    """Build the samlValidate request for ``ticket``."""
    now = now or datetime.now(timezone.utc)
    ip_address = ip_address or local_ip_address()

    return ValidationRequest(
        server_url=server_url,
        ticket=ticket,
        request_id=f"_{ip_address}.{int(now.timestamp())}",
        issue_instant=format_issue_instant(now),
    )
