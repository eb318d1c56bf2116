"""
Test configuration for the workload identity token exchange tests.

Provides shared fixtures for:
- RSA key pairs for signing test assertions
- Projected service account token files
- Workload identity environment variables
- A recording TokenProvider double and a mocked MSAL application
"""

import os
import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Sequence
from unittest.mock import MagicMock, patch

import jwt
import pytest
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

# Add the src directory to path
src_path = Path(__file__).parent.parent
sys.path.insert(0, str(src_path))


# =============================================================================
# Test Constants
# =============================================================================

TEST_TENANT_ID = "test-tenant-12345"
TEST_CLIENT_ID = "test-client-67890"
TEST_RESOURCE = "https://vault.azure.net"
TEST_SCOPE = "https://vault.azure.net/.default"
TEST_ACCESS_TOKEN = "mock-aad-access-token-xyz"
TEST_KID = "test-key-id-001"


# =============================================================================
# Auto-use fixtures for environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def prevent_dotenv_loading(monkeypatch, tmp_path):
    """Prevent Pydantic settings from reading a .env file during tests.

    Also resets the config singleton so each test starts clean.
    """
    from config.settings import reset_config

    original_cwd = os.getcwd()

    empty_env = tmp_path / ".env"
    empty_env.write_text("")

    os.chdir(tmp_path)
    reset_config()

    yield

    reset_config()
    os.chdir(original_cwd)


@pytest.fixture(autouse=True)
def clear_identity_env(monkeypatch):
    """Remove workload identity variables inherited from the host."""
    for var in [
        "AZURE_CLIENT_ID",
        "CLIENT_ID",
        "AZURE_TENANT_ID",
        "TENANT_ID",
        "TOKEN_FILE_PATH",
        "AZURE_FEDERATED_TOKEN_FILE",
        "AZURE_AUTHORITY_HOST",
        "AUTHORITY_HOST",
        "HTTP_TIMEOUT",
        "DEBUG",
    ]:
        monkeypatch.delenv(var, raising=False)


# =============================================================================
# RSA Key Pair Fixtures (for assertion signing)
# =============================================================================


@pytest.fixture(scope="session")
def rsa_key_pair():
    """Generate RSA key pair for test assertion signing.

    Session-scoped for performance - same keys used across all tests.
    """
    private_key = rsa.generate_private_key(
        public_exponent=65537, key_size=2048, backend=default_backend()
    )
    return private_key, private_key.public_key()


@pytest.fixture(scope="session")
def private_key_pem(rsa_key_pair) -> bytes:
    """Get PEM-encoded private key for JWT signing."""
    private_key, _ = rsa_key_pair
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


# =============================================================================
# Assertion Fixtures
# =============================================================================


@pytest.fixture
def create_assertion(private_key_pem):
    """Factory fixture to create signed service account tokens.

    Usage:
        assertion = create_assertion({"sub": "system:serviceaccount:ns:sa"})
    """

    def _create_assertion(claims: Dict[str, Any] | None = None, expires_in: int = 3600) -> str:
        now = int(time.time())
        default_claims = {
            "iss": "https://oidc.prod-aks.azure.com/test-issuer/",
            "aud": ["api://AzureADTokenExchange"],
            "sub": "system:serviceaccount:default:workload-identity-sa",
            "iat": now,
            "nbf": now,
            "exp": now + expires_in,
        }
        default_claims.update(claims or {})
        return jwt.encode(
            default_claims, private_key_pem, algorithm="RS256", headers={"kid": TEST_KID}
        )

    return _create_assertion


@pytest.fixture
def signed_assertion(create_assertion) -> str:
    return create_assertion()


@pytest.fixture
def token_file(tmp_path, signed_assertion) -> Path:
    """Write the signed assertion where the kubelet would project it."""
    path = tmp_path / "tokens" / "azure-identity-token"
    path.parent.mkdir()
    path.write_text(signed_assertion)
    return path


# =============================================================================
# Environment Variable Fixtures
# =============================================================================


@pytest.fixture
def mock_env_workload_identity(monkeypatch, token_file):
    """Set the variables the workload identity webhook injects."""
    monkeypatch.setenv("AZURE_CLIENT_ID", TEST_CLIENT_ID)
    monkeypatch.setenv("AZURE_TENANT_ID", TEST_TENANT_ID)
    monkeypatch.setenv("TOKEN_FILE_PATH", str(token_file))


@pytest.fixture
def mock_env_missing_token_file(monkeypatch):
    """Set client and tenant but leave the token file path unset."""
    monkeypatch.setenv("AZURE_CLIENT_ID", TEST_CLIENT_ID)
    monkeypatch.setenv("AZURE_TENANT_ID", TEST_TENANT_ID)


# =============================================================================
# Identity Provider Doubles
# =============================================================================


class FakeTokenProvider:
    """Recording TokenProvider double returning a fixed AuthResult."""

    def __init__(self, result=None, fail_at: str | None = None, error: Exception | None = None):
        from auth.models import AuthResult

        self.result = result or AuthResult(
            access_token=TEST_ACCESS_TOKEN,
            expires_on=datetime.now(timezone.utc) + timedelta(hours=1),
            granted_scopes=(TEST_SCOPE,),
            declined_scopes=(),
        )
        self.fail_at = fail_at
        self.error = error or RuntimeError(f"{fail_at} failed")
        self.calls: list[tuple[str, tuple]] = []

    def _maybe_fail(self, step: str) -> None:
        if self.fail_at == step:
            raise self.error

    def credential_from_assertion(self, assertion: str) -> Dict[str, str]:
        self.calls.append(("credential_from_assertion", (assertion,)))
        self._maybe_fail("credential_from_assertion")
        return {"client_assertion": assertion}

    def create_client(self, client_id, credential, authority) -> Any:
        self.calls.append(("create_client", (client_id, credential, authority)))
        self._maybe_fail("create_client")
        return MagicMock(name="confidential_client")

    def acquire_token(self, client: Any, scopes: Sequence[str]):
        self.calls.append(("acquire_token", (client, list(scopes))))
        self._maybe_fail("acquire_token")
        return self.result

    def step_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def fake_provider() -> FakeTokenProvider:
    return FakeTokenProvider()


@pytest.fixture
def fake_provider_factory():
    """Factory for providers that fail at a given step."""
    return FakeTokenProvider


@pytest.fixture
def mock_token_response() -> Dict[str, Any]:
    """A successful client credentials response as returned by msal."""
    return {
        "token_type": "Bearer",
        "access_token": TEST_ACCESS_TOKEN,
        "expires_in": 3599,
        "token_source": "identity_provider",
    }


@pytest.fixture
def mock_token_error_response() -> Dict[str, Any]:
    """An error response as returned by msal."""
    return {
        "error": "invalid_client",
        "error_description": "AADSTS700213: No matching federated identity record found "
        "for presented assertion subject.",
        "error_codes": [700213],
        "correlation_id": "test-correlation-id",
    }


@pytest.fixture
def mock_msal_app(mock_token_response):
    """A mocked msal.ConfidentialClientApplication instance."""
    app = MagicMock()
    app.acquire_token_for_client.return_value = mock_token_response
    return app


@pytest.fixture
def mock_tenant_discovery():
    """Patch msal's OIDC discovery so a real ConfidentialClientApplication can be built.

    Records every discovery endpoint msal asks for in `.endpoints`.
    """
    endpoints: list[str] = []

    def _tenant_discovery(tenant_discovery_endpoint, http_client=None, **kwargs):
        endpoints.append(tenant_discovery_endpoint)
        base = f"https://login.microsoftonline.com/{TEST_TENANT_ID}"
        return {
            "authorization_endpoint": f"{base}/oauth2/v2.0/authorize",
            "token_endpoint": f"{base}/oauth2/v2.0/token",
            "issuer": f"{base}/v2.0",
        }

    with patch("msal.authority.tenant_discovery", side_effect=_tenant_discovery) as mock:
        mock.endpoints = endpoints
        yield mock
