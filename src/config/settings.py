"""
Configuration settings for the workload identity token exchange.

Azure Workload Identity injects the client ID, tenant ID and the path of the
projected service account token into the pod environment. This module reads
them with pydantic-settings.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.scope_utils import build_authority_url

DEFAULT_AUTHORITY_HOST = "https://login.microsoftonline.com"


class WorkloadIdentityConfig(BaseSettings):
    """Workload identity configuration.

    Every instantiation reads the environment again, so a fresh instance
    picks up values injected after process start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables
        populate_by_name=True,
    )

    client_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AZURE_CLIENT_ID", "CLIENT_ID"),
        description="Application (client) ID set in the service account annotation",
    )
    tenant_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AZURE_TENANT_ID", "TENANT_ID"),
        description="Azure AD tenant ID, used when the caller does not pass one",
    )
    token_file_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TOKEN_FILE_PATH", "AZURE_FEDERATED_TOKEN_FILE"),
        description="Path of the projected service account token",
    )
    authority_host: str = Field(
        default=DEFAULT_AUTHORITY_HOST,
        validation_alias=AliasChoices("AZURE_AUTHORITY_HOST", "AUTHORITY_HOST"),
        description="Azure AD authority host",
    )
    http_timeout: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("HTTP_TIMEOUT", "http_timeout"),
        description="Timeout in seconds for requests made by the identity library",
    )
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("DEBUG", "debug"),
        description="Enable debug logging",
    )


# Global configuration instance - lazy initialized
_config: WorkloadIdentityConfig | None = None


def get_config(config: WorkloadIdentityConfig | None = None) -> WorkloadIdentityConfig:
    """Get the global configuration with optional injection.

    The exchanger does not use this; it reads the environment on every call.
    The command line uses it so that overrides apply process-wide.

    Args:
        config: Optional config instance to inject (useful for testing).
                If provided, sets this as the global config.

    Returns:
        The global WorkloadIdentityConfig instance.
    """
    global _config
    if config is not None:
        _config = config
    if _config is None:
        _config = WorkloadIdentityConfig()
    return _config


def reset_config() -> None:
    """Reset the config singleton for testing."""
    global _config
    _config = None


def get_authority_url(
    tenant_id: str, config: WorkloadIdentityConfig | None = None
) -> str:
    """Get the tenant-scoped authority URL.

    Args:
        tenant_id: Azure AD tenant ID.
        config: Optional config supplying the authority host.

    Returns:
        The authority URL, e.g.
        https://login.microsoftonline.com/<tenant>/oauth2/token
    """
    authority_host = config.authority_host if config else DEFAULT_AUTHORITY_HOST
    return build_authority_url(tenant_id, authority_host)
