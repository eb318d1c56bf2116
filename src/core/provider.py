"""
Identity provider seam.

The exchanger talks to the identity library only through TokenProvider so
that tests can substitute a double and other libraries can be plugged in.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from auth.models import AuthResult


class TokenProvider(ABC):
    """Exchanges a signed assertion plus scopes for an access token.

    The three operations map onto the three failure steps of the exchange.
    Implementations raise whatever the underlying library raises; the
    exchanger translates those into the exception hierarchy.
    """

    @abstractmethod
    def credential_from_assertion(self, assertion: str) -> Any:
        """Build a client credential from a signed assertion.

        Args:
            assertion: Raw contents of the token file.

        Returns:
            An opaque credential accepted by create_client.
        """
        pass

    @abstractmethod
    def create_client(
        self,
        client_id: Optional[str],
        credential: Any,
        authority: str,
    ) -> Any:
        """Create a confidential client application.

        Args:
            client_id: Application (client) ID.
            credential: Credential returned by credential_from_assertion.
            authority: Tenant-scoped authority URL.

        Returns:
            An opaque client accepted by acquire_token.
        """
        pass

    @abstractmethod
    def acquire_token(self, client: Any, scopes: Sequence[str]) -> "AuthResult":
        """Request a new access token for the given scopes.

        Must not serve the token from a cache.
        """
        pass
