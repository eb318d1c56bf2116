"""
Scope and authority helpers for Azure AD token requests.
"""

DEFAULT_SCOPE_SUFFIX = ".default"


def normalize_scope(resource: str) -> str:
    """Turn a resource identifier into a `.default` scope.

    A single trailing slash is removed first. `/.default` is appended unless
    the resource already ends in `.default`, so applying this twice returns
    the same string.

    Examples:
        >>> normalize_scope("https://vault.azure.net")
        'https://vault.azure.net/.default'
        >>> normalize_scope("https://vault.azure.net/")
        'https://vault.azure.net/.default'

    Args:
        resource: Resource or audience, e.g. https://vault.azure.net

    Returns:
        The scope to send to the token endpoint.
    """
    scope = resource.removesuffix("/")
    if not scope.endswith(DEFAULT_SCOPE_SUFFIX):
        scope += "/" + DEFAULT_SCOPE_SUFFIX
    return scope


def build_authority_url(tenant_id: str, authority_host: str) -> str:
    """Build the tenant-scoped authority URL used by the confidential client."""
    return f"{authority_host.rstrip('/')}/{tenant_id}/oauth2/token"
