"""
Command line entry point for the workload identity token exchange.

Run it from a pod (or any environment) configured for Azure Workload
Identity.

Usage:
    export AZURE_CLIENT_ID=<federated workload app client id>
    export AZURE_TENANT_ID=<tenant guid>
    export TOKEN_FILE_PATH=/var/run/secrets/azure/tokens/azure-identity-token

    # Acquire a token for Key Vault
    python cli.py --resource https://vault.azure.net

    # Acquire a token and call a protected endpoint with it
    python cli.py --resource https://vault.azure.net \\
        --probe "https://myvault.vault.azure.net/secrets?api-version=7.4"

    # Run with debug logging
    python cli.py --resource https://vault.azure.net --debug
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Optional

import aiohttp

from auth.authorizer import BearerAuthorizer
from auth.exchanger import acquire_bearer_authorizer
from auth.models import AuthResult
from config.settings import get_config
from core.exceptions import WorkloadIdentityError
from utils.http_utils import probe

# Setup logging - will be reconfigured based on config
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def truncate_token(token: str) -> str:
    """Shorten a token for display."""
    if len(token) <= 50:
        return token[:10] + "..."
    return token[:40] + "..." + token[-10:]


def print_result(authorizer: BearerAuthorizer) -> None:
    """Print token details without revealing the full token."""
    print("Successfully obtained access token via workload identity.")
    result = authorizer.token_provider
    if isinstance(result, AuthResult):
        print(f"Token expires on: {result.expires_on.isoformat()}")
        print(f"Granted scopes: {' '.join(result.granted_scopes)}")
        if result.declined_scopes:
            print(f"Declined scopes: {' '.join(result.declined_scopes)}")
    print("Access token (truncated):")
    print(truncate_token(authorizer.token))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exchange a workload identity token for an Azure AD access token"
    )
    parser.add_argument(
        "--resource",
        "-r",
        required=True,
        help="Target resource, e.g. https://vault.azure.net",
    )
    parser.add_argument(
        "--tenant-id",
        "-t",
        default=None,
        help="Azure AD tenant ID (default: AZURE_TENANT_ID)",
    )
    parser.add_argument(
        "--probe",
        default=None,
        metavar="URL",
        help="Send an authorized GET to URL and report the status",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    # Build config overrides from CLI
    overrides: dict[str, Any] = {}
    if args.debug:
        overrides["debug"] = True

    base_config = get_config()
    config = base_config.model_copy(update=overrides) if overrides else base_config

    # Configure logging based on debug setting
    log_level = logging.DEBUG if config.debug else logging.INFO
    logging.getLogger().setLevel(log_level)

    tenant_id = args.tenant_id or config.tenant_id
    if not tenant_id:
        print("Tenant ID is required: pass --tenant-id or set AZURE_TENANT_ID.", file=sys.stderr)
        return 1

    try:
        authorizer = acquire_bearer_authorizer(tenant_id, args.resource, config=config)
    except WorkloadIdentityError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_result(authorizer)

    if args.probe:
        try:
            status = asyncio.run(probe(args.probe, authorizer))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Probe failed: {e}", file=sys.stderr)
            return 1
        print(f"Probe {args.probe}: HTTP {status}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
