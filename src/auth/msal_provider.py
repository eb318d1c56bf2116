"""
MSAL implementation of the identity provider seam.

Uses msal.ConfidentialClientApplication with the projected service account
token as the client assertion (OAuth 2.0 client credentials flow with a
JWT bearer client assertion).
See: https://learn.microsoft.com/en-us/entra/workload-id/workload-identity-federation
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence
from urllib.parse import urlsplit

import msal

from auth.models import AuthResult
from core.exceptions import TokenAcquisitionError
from core.provider import TokenProvider

logger = logging.getLogger(__name__)


def msal_authority(authority: str) -> str:
    """Reduce an authority URL to the `https://<host>/<tenant>` form msal expects.

    msal appends `/v2.0/.well-known/openid-configuration` to the whole path
    for tenant discovery, so endpoint paths such as `/oauth2/token` must go.
    """
    parts = urlsplit(authority)
    tenant = parts.path.strip("/").split("/")[0]
    return f"{parts.scheme}://{parts.netloc}/{tenant}"


class MsalTokenProvider(TokenProvider):
    """TokenProvider backed by msal.

    Args:
        timeout: Seconds before requests made by msal time out. None uses
                 msal's default.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def credential_from_assertion(self, assertion: str) -> dict[str, str]:
        if not isinstance(assertion, str):
            raise ValueError(
                f"Client assertion must be a string, got {type(assertion).__name__}"
            )
        if not assertion.strip():
            raise ValueError("Client assertion can't be blank")
        return {"client_assertion": assertion}

    def create_client(
        self,
        client_id: Optional[str],
        credential: Any,
        authority: str,
    ) -> msal.ConfidentialClientApplication:
        if not client_id:
            raise ValueError("AZURE_CLIENT_ID is not set")

        # A new, empty cache per client keeps every acquisition a network call
        return msal.ConfidentialClientApplication(
            client_id,
            client_credential=credential,
            authority=msal_authority(authority),
            token_cache=msal.TokenCache(),
            timeout=self.timeout,
        )

    def acquire_token(
        self, client: msal.ConfidentialClientApplication, scopes: Sequence[str]
    ) -> AuthResult:
        requested = list(scopes)
        result = client.acquire_token_for_client(scopes=requested)

        if not result or "error" in result:
            result = result or {}
            error = result.get("error", "unknown")
            error_desc = result.get("error_description", "No description")
            logger.error(f"Token request failed: {error} - {error_desc}")
            raise TokenAcquisitionError(
                f"failed to get token: {error}",
                error=error,
                error_description=error_desc,
                correlation_id=result.get("correlation_id"),
            )

        access_token = result.get("access_token")
        if not access_token:
            raise TokenAcquisitionError("Token response missing access_token")

        expires_in = int(result.get("expires_in", 0))
        expires_on = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

        granted = result.get("scope")
        granted_scopes = tuple(granted.split()) if granted else tuple(requested)
        declined_scopes = tuple(s for s in requested if s not in granted_scopes)

        return AuthResult(
            access_token=access_token,
            expires_on=expires_on,
            granted_scopes=granted_scopes,
            declined_scopes=declined_scopes,
        )
