"""
HTTP transport for SAML validation requests.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional

import httpx

from shared.logging import get_logger
from shared.errors import AuthenticationFailure
from .request_builder import ValidationRequest


@dataclass(frozen=True)
class RawResponse:
    """Body and metadata of a samlValidate response."""
    content: bytes
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)


class SAMLTransport:
    """Posts validation requests to the CAS server.

    A transport performs exactly one POST per ``send`` call; it never
    retries. ``transport`` lets tests plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        verify_ssl_cert: bool = True,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.verify_ssl_cert = verify_ssl_cert
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("cas.saml.transport")

    def client_options(self, url: httpx.URL) -> Dict[str, Any]:
        """Keyword arguments for the ``httpx.Client`` talking to ``url``."""
        options: Dict[str, Any] = {"timeout": self.timeout}

        if url.scheme == "https":
            options["verify"] = self.verify_ssl_cert
            if not self.verify_ssl_cert:
                self.logger.warning(
                    "TLS certificate verification disabled",
                    host=url.host
                )

        if self.transport is not None:
            options["transport"] = self.transport

        return options

    def send(self, request: ValidationRequest) -> RawResponse:
        """POST the request and return the raw response body."""
        url = httpx.URL(request.server_url)

        try:
            with httpx.Client(**self.client_options(url)) as client:
                response = client.post(
                    url,
                    content=request.body.encode("utf-8"),
                    headers=request.headers
                )
        except httpx.TimeoutException as e:
            self.logger.error(
                "SAML validation request timed out",
                host=url.host,
                error=type(e).__name__
            )
            raise AuthenticationFailure(
                f"{type(e).__name__}: ticket '{request.ticket}' not recognized",
                details={"timeout": self.timeout}
            )
        except httpx.HTTPError as e:
            self.logger.error("CAS server unavailable", host=url.host, error=str(e))
            raise AuthenticationFailure(
                "CAS server unavailable",
                details={"http_error": str(e)}
            )

        self.logger.debug(
            "SAML validation response received",
            status_code=response.status_code,
            content_length=len(response.content)
        )

        return RawResponse(
            content=response.content,
            status_code=response.status_code,
            headers=dict(response.headers)
        )
