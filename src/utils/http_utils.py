"""
HTTP helpers for calling protected resources with a bearer authorizer.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

import aiohttp

logger = logging.getLogger(__name__)


class SupportsAuthorizationHeader(Protocol):
    """Anything that can produce an Authorization header."""

    def authorization_header(self) -> dict[str, str]: ...


def authorized_session(
    authorizer: SupportsAuthorizationHeader, **kwargs: Any
) -> aiohttp.ClientSession:
    """Create an aiohttp session that sends the bearer token on every request.

    Must be called from within a running event loop.

    Args:
        authorizer: Source of the Authorization header.
        **kwargs: Passed to aiohttp.ClientSession. Any `headers` given are
                  merged, with the Authorization header taking precedence.

    Returns:
        A new aiohttp.ClientSession. The caller owns it and must close it.
    """
    headers = dict(kwargs.pop("headers", None) or {})
    headers.update(authorizer.authorization_header())
    return aiohttp.ClientSession(headers=headers, **kwargs)


async def probe(
    url: str, authorizer: SupportsAuthorizationHeader, timeout: float = 10
) -> int:
    """Issue an authorized GET against a URL and return the HTTP status.

    Args:
        url: Protected resource URL.
        authorizer: Source of the Authorization header.
        timeout: Total request timeout in seconds.

    Returns:
        The HTTP status code.

    Raises:
        aiohttp.ClientError: On network failure.
        asyncio.TimeoutError: If the request exceeds `timeout`.
    """
    async with authorized_session(authorizer) as session:
        start_time = datetime.now(timezone.utc)

        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as resp:
            latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
            logger.info(f"Probe of {url} returned {resp.status} (latency: {latency_ms:.0f}ms)")
            return resp.status
