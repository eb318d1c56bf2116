"""
Authentication module for the workload identity token exchange.
"""

from .authorizer import BearerAuthorizer
from .exchanger import acquire_bearer_authorizer, read_signed_assertion
from .models import AuthResult
from .msal_provider import MsalTokenProvider

__all__ = [
    "AuthResult",
    "BearerAuthorizer",
    "MsalTokenProvider",
    "acquire_bearer_authorizer",
    "read_signed_assertion",
]
