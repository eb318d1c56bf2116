"""
Configuration module for the workload identity token exchange.
"""

from .settings import (
    DEFAULT_AUTHORITY_HOST,
    WorkloadIdentityConfig,
    get_authority_url,
    get_config,
    reset_config,
)

__all__ = [
    "DEFAULT_AUTHORITY_HOST",
    "WorkloadIdentityConfig",
    "get_config",
    "reset_config",
    "get_authority_url",
]
