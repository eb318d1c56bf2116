"""
Utilities module for the workload identity token exchange.
"""

from .http_utils import authorized_session, probe
from .scope_utils import build_authority_url, normalize_scope

__all__ = [
    "normalize_scope",
    "build_authority_url",
    "authorized_session",
    "probe",
]
