"""
SAML 1.1 ticket validator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from shared.config import CASConfig
from shared.errors import AuthenticationFailure
from shared.logging import configure_logging, get_logger, set_ticket_context
from shared.metrics import MetricsCollector
from ..saml.attributes import AttributeMap, extract_attributes, extract_principal
from ..saml.request_builder import build_validation_request
from ..saml.response_parser import SAMLResponseDocument, ValidationOutcome, parse_response
from ..saml.transport import SAMLTransport


class ResolutionState(str, Enum):
    """Progress of a validator's single round trip."""
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolution:
    """Memoized result of the round trip."""
    state: ResolutionState = ResolutionState.UNRESOLVED
    document: Optional[SAMLResponseDocument] = None
    outcome: Optional[ValidationOutcome] = None
    error: Optional[AuthenticationFailure] = None


class SAMLValidator:
    """Validates one ticket against a CAS samlValidate endpoint.

    Nothing happens on construction. The first call to ``success``,
    ``failure_message``, ``outcome``, ``principal`` or ``attributes`` sends
    the request and parses the response; every later call reuses that
    result. A transport or parse failure is remembered too and raised again
    without contacting the server a second time.

    Instances are not thread-safe: first access must not race. Create one
    validator per validation attempt.
    """

    def __init__(
        self,
        server_url: str,
        ticket: str,
        *,
        verify_ssl_cert: bool = True,
        timeout: float = 10.0,
        transport: Optional[SAMLTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.server_url = server_url
        self.ticket = ticket
        self.transport = transport or SAMLTransport(
            verify_ssl_cert=verify_ssl_cert,
            timeout=timeout
        )
        self.metrics = metrics
        self.logger = get_logger("cas.saml.validator")

        self._resolution = Resolution()
        self._attributes: Optional[AttributeMap] = None

    @property
    def state(self) -> ResolutionState:
        return self._resolution.state

    def _ensure_resolved(self) -> Resolution:
        """Run the round trip once and memoize its result."""
        if self._resolution.state is ResolutionState.RESOLVED:
            return self._resolution
        if self._resolution.state is ResolutionState.FAILED:
            error = self._resolution.error
            raise AuthenticationFailure(error.message, details=error.details)

        set_ticket_context(self.ticket)
        try:
            document = self._fetch_document()
        except AuthenticationFailure as e:
            self._resolution = Resolution(state=ResolutionState.FAILED, error=e)
            self._record("error")
            raise

        outcome = document.outcome()
        self._resolution = Resolution(
            state=ResolutionState.RESOLVED,
            document=document,
            outcome=outcome
        )

        if outcome.success:
            self.logger.info(
                "SAML ticket validated",
                status_code=outcome.status_code,
                principal=document.principal()
            )
            self._record("success")
        else:
            self.logger.warning(
                "SAML ticket validation failed",
                status_code=outcome.status_code,
                status_message=outcome.status_message
            )
            self._record("failure")

        return self._resolution

    def _fetch_document(self) -> SAMLResponseDocument:
        request = build_validation_request(self.server_url, self.ticket)
        self.logger.info(
            "Sending SAML validation request",
            request_id=request.request_id,
            host=httpx.URL(self.server_url).host
        )

        if self.metrics is None:
            raw = self.transport.send(request)
        else:
            with self.metrics.time_validation():
                raw = self.transport.send(request)

        return parse_response(raw)

    def _record(self, outcome: str):
        if self.metrics is not None:
            self.metrics.record_validation(outcome)

    def _require_success(self) -> Resolution:
        resolution = self._ensure_resolved()
        if not resolution.outcome.success:
            raise AuthenticationFailure(
                self.failure_message(),
                details={"status_code": resolution.outcome.status_code}
            )
        return resolution

    def outcome(self) -> ValidationOutcome:
        return self._ensure_resolved().outcome

    def success(self) -> bool:
        return self.outcome().success

    def failure_message(self) -> Optional[str]:
        """Server supplied reason for a failed validation.

        The trimmed StatusMessage, falling back to the StatusCode value.
        None when validation succeeded.
        """
        outcome = self.outcome()
        if outcome.success:
            return None
        return outcome.status_message or outcome.status_code

    def principal(self) -> str:
        """Authenticated user identifier (the NameIdentifier)."""
        return extract_principal(self._require_success().document)

    def attributes(self) -> AttributeMap:
        """Extra attributes asserted by the server; empty when none."""
        resolution = self._require_success()
        if self._attributes is None:
            self._attributes = extract_attributes(resolution.document)
        return self._attributes


def validate(
    ticket: str,
    config: CASConfig,
    server_url: Optional[str] = None,
    transport: Optional[SAMLTransport] = None,
    metrics: Optional[MetricsCollector] = None,
) -> SAMLValidator:
    """Build a validator for ``ticket`` from an explicit configuration.

    ``server_url`` overrides ``config.cas_server_url``.
    """
    return SAMLValidator(
        server_url or config.cas_server_url,
        ticket,
        verify_ssl_cert=config.verify_ssl_cert,
        timeout=config.http_timeout_seconds,
        transport=transport,
        metrics=metrics if config.enable_metrics else None,
    )


def configure_observability(config: CASConfig) -> Optional[MetricsCollector]:
    """Set up structured logging at ``config.log_level``.

    Returns a fresh metrics collector when ``config.enable_metrics`` is set,
    otherwise None.
    """
    configure_logging("cas", config.log_level)
    return MetricsCollector() if config.enable_metrics else None
