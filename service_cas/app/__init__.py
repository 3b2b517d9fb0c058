"""
CAS ticket validation service package.

Validates single-sign-on tickets against a CAS server using SAML 1.1
(samlValidate over SOAP/HTTP):

- app.saml: Request building, transport, response parsing, attributes.
- app.validation: The memoizing validator that callers use.

Design notes:
- Importing this package performs no network calls; the first read of a
  validator's principal or attributes does.
- Configuration (TLS policy, timeouts) is passed in explicitly; nothing in
  this package reads environment variables.
- Use the shared/ utilities for logging, metrics and errors.
"""
