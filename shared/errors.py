"""
Shared error handling for the CAS ticket validation service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for CAS validation services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class AuthenticationFailure(AccessLayerException):
    """Ticket validation failed.

    Raised when the CAS server reports a non-success status, when the
    response carries no principal, or when the server cannot be reached
    in time.
    """

    code = "AUTHENTICATION_FAILURE"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(self.code, message or "Authentication failed", details)


class TicketInvalidError(AuthenticationFailure):
    """The server explicitly rejected the ticket.

    Never raised by the validation path itself; available to callers that
    want to signal ticket rejection separately.
    """

    code = "TICKET_INVALID"
