"""
Shared configuration management for the CAS ticket validation service.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CAS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=True)


class CASConfig(BaseConfig):
    """Settings consumed by the SAML ticket validator.

    The validator never reads these itself; callers build a config and hand
    it to ``validate()``.
    """

    cas_server_url: str = Field(
        default="https://localhost:8443/cas/samlValidate",
        min_length=1,
    )
    # Accepting any certificate is a legacy escape hatch for self-signed
    # CAS deployments.
    verify_ssl_cert: bool = Field(default=True)
    http_timeout_seconds: float = Field(default=10.0, gt=0)


def get_config(**overrides) -> CASConfig:
    """Get configuration for the validation service."""
    return CASConfig(**overrides)
