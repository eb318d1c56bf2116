"""
Bearer authorizer that decorates outbound requests with an access token.
"""

import logging
from typing import Any, Mapping, Protocol

from azure.core.credentials import AccessToken
from azure.core.exceptions import ClientAuthenticationError

from auth.models import AuthResult
from utils.scope_utils import normalize_scope

logger = logging.getLogger(__name__)


class OAuthTokenProvider(Protocol):
    """Supplies the current access token string."""

    def oauth_token(self) -> str: ...


class BearerAuthorizer:
    """Attaches `Authorization: Bearer <token>` to outbound requests.

    The token comes from the wrapped provider on every call, so a provider
    that refreshes behind the scenes is picked up without rebuilding the
    authorizer.

    Also implements the azure-core TokenCredential protocol (`get_token`),
    so it can be passed as `credential=` to Azure SDK clients.
    """

    def __init__(self, token_provider: OAuthTokenProvider) -> None:
        self._token_provider = token_provider

    @property
    def token_provider(self) -> OAuthTokenProvider:
        return self._token_provider

    @property
    def token(self) -> str:
        """The current access token."""
        return self._token_provider.oauth_token()

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def with_authorization(self, headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return a copy of `headers` with the Authorization header set."""
        decorated = dict(headers or {})
        decorated.update(self.authorization_header())
        return decorated

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        """Return the token as an azure-core AccessToken.

        The token was issued for a fixed set of scopes, so requesting any
        scope outside that set fails instead of silently sending a token
        the resource will reject.

        Keyword arguments such as `claims` and `tenant_id` are ignored; the
        token was fixed at exchange time.

        Raises:
            ClientAuthenticationError: If a requested scope was not granted,
                or the provider carries no expiry.
        """
        result = self._token_provider
        if not isinstance(result, AuthResult):
            raise ClientAuthenticationError(
                message="Token provider does not expose an expiry; cannot build AccessToken"
            )

        missing = [
            scope
            for scope in (normalize_scope(s) for s in scopes)
            if scope not in result.granted_scopes
        ]
        if missing:
            logger.warning(
                f"Requested scopes {missing} not in granted scopes {list(result.granted_scopes)}"
            )
            raise ClientAuthenticationError(
                message=f"Token was not issued for scopes: {', '.join(missing)}"
            )

        return AccessToken(result.access_token, int(result.expires_on.timestamp()))
