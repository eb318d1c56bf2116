"""
Workload identity credential exchange.

Exchanges the projected Kubernetes service account token for an Azure AD
access token using the OAuth 2.0 client credentials flow with a client
assertion, and wraps the result in a BearerAuthorizer.

Azure Workload Identity injects the following into the pod:
- AZURE_CLIENT_ID with the client ID set in the service account annotation
- AZURE_TENANT_ID with the tenant ID set in the service account annotation
- the path of the service account token (TOKEN_FILE_PATH, or
  AZURE_FEDERATED_TOKEN_FILE)

Every call re-reads the token file and requests a new token. The file is
rotated by the kubelet, so nothing is cached here.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from auth.authorizer import BearerAuthorizer
from auth.msal_provider import MsalTokenProvider
from config.settings import WorkloadIdentityConfig, get_authority_url
from core.exceptions import (
    ClientConstructionError,
    ConfigurationError,
    CredentialConstructionError,
    FileReadError,
    TokenAcquisitionError,
    WorkloadIdentityError,
)
from core.provider import TokenProvider
from utils.scope_utils import normalize_scope

logger = logging.getLogger(__name__)


def read_signed_assertion(token_file_path: Optional[str]) -> str:
    """Read the service account token from the file system.

    The full contents are returned untouched.

    Args:
        token_file_path: Path of the projected service account token.

    Returns:
        The signed assertion.

    Raises:
        FileReadError: If the path is unset, the file cannot be read, or
                       the file is empty.
    """
    if not token_file_path:
        raise FileReadError(
            "failed to read service account token: token file path is not set "
            "(set TOKEN_FILE_PATH or AZURE_FEDERATED_TOKEN_FILE)"
        )

    try:
        with open(token_file_path, encoding="utf-8") as f:
            assertion = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"failed to read service account token: {e}") from e

    if not assertion:
        raise FileReadError(
            f"failed to read service account token: {token_file_path} is empty"
        )

    return assertion


def acquire_bearer_authorizer(
    tenant_id: str,
    resource: str,
    config: Optional[WorkloadIdentityConfig] = None,
    provider: Optional[TokenProvider] = None,
) -> BearerAuthorizer:
    """Exchange the workload identity token for a bearer authorizer.

    Args:
        tenant_id: Azure AD tenant ID.
        resource: Target resource, e.g. https://vault.azure.net. A `.default`
                  scope is derived from it.
        config: Explicit configuration. If None, a fresh config is read from
                the environment.
        provider: Identity provider. Defaults to MsalTokenProvider.

    Returns:
        A BearerAuthorizer wrapping the AuthResult.

    Raises:
        ConfigurationError: If tenant_id or resource is empty.
        FileReadError: If the service account token cannot be read.
        CredentialConstructionError: If the credential cannot be built.
        ClientConstructionError: If the confidential client cannot be built.
        TokenAcquisitionError: If the token request fails.
    """
    if not tenant_id:
        raise ConfigurationError("tenant_id must not be empty")
    if not resource:
        raise ConfigurationError("resource must not be empty")

    config = config or WorkloadIdentityConfig()
    provider = provider or MsalTokenProvider(timeout=config.http_timeout)

    signed_assertion = read_signed_assertion(config.token_file_path)

    try:
        credential = provider.credential_from_assertion(signed_assertion)
    except Exception as e:
        raise CredentialConstructionError(
            f"failed to create confidential creds: {e}"
        ) from e

    authority = get_authority_url(tenant_id, config)
    try:
        client = provider.create_client(config.client_id, credential, authority)
    except Exception as e:
        raise ClientConstructionError(
            f"failed to create confidential client app: {e}"
        ) from e

    scope = normalize_scope(resource)
    logger.info(f"Requesting token for scope: {scope} (authority: {authority})")

    start_time = datetime.now(timezone.utc)

    try:
        result = provider.acquire_token(client, [scope])
    except WorkloadIdentityError as e:
        latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        logger.error(f"Token request failed (latency: {latency_ms:.0f}ms): {e}")
        raise
    except Exception as e:
        latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        logger.error(f"Token request failed (latency: {latency_ms:.0f}ms): {e}")
        raise TokenAcquisitionError(f"failed to get token: {e}") from e

    latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    logger.info(
        f"Token acquired for scope: {scope}, expires {result.expires_on.isoformat()} "
        f"(latency: {latency_ms:.0f}ms)"
    )
    if result.declined_scopes:
        logger.warning(f"Scopes declined by Azure AD: {list(result.declined_scopes)}")

    return BearerAuthorizer(result)
