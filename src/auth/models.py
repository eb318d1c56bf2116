"""
Result of a token exchange.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuthResult(BaseModel):
    """Subset of the identity provider's token response.

    Immutable once constructed. The access token is excluded from repr so
    that logging a result does not leak it.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    expires_on: datetime
    granted_scopes: tuple[str, ...] = ()
    declined_scopes: tuple[str, ...] = ()

    def oauth_token(self) -> str:
        """Return the current access token."""
        return self.access_token
