"""
Ticket validation package.

Ties the SAML building blocks together behind a lazily evaluated,
memoizing validator: one network round trip and one parse per instance.
"""

from .saml_validator import (
    Resolution,
    ResolutionState,
    SAMLValidator,
    configure_observability,
    validate,
)

__all__ = ["Resolution", "ResolutionState", "SAMLValidator", "configure_observability", "validate"]
