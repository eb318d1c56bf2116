"""
Core module for the exception hierarchy and the identity provider seam.
"""

from .exceptions import (
    ClientConstructionError,
    ConfigurationError,
    CredentialConstructionError,
    FileReadError,
    TokenAcquisitionError,
    WorkloadIdentityError,
)
from .provider import TokenProvider

__all__ = [
    "TokenProvider",
    "WorkloadIdentityError",
    "ConfigurationError",
    "FileReadError",
    "CredentialConstructionError",
    "ClientConstructionError",
    "TokenAcquisitionError",
]
