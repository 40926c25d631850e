"""Pooled httpx client for the auth provider.

Every auth call in the process shares one AsyncClient. The application
lifespan closes it on shutdown.
"""

import httpx

# Sign-up and sign-in wait on the provider, so reads get the longest budget.
AUTH_CLIENT_TIMEOUT = httpx.Timeout(10.0, connect=5.0, pool=5.0)
AUTH_CLIENT_LIMITS = httpx.Limits(max_connections=100, max_keepalive_connections=20)
USER_AGENT = "ecohouse/0.1"

_auth_client: httpx.AsyncClient | None = None


def create_http_client(
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout = AUTH_CLIENT_TIMEOUT,
    limits: httpx.Limits = AUTH_CLIENT_LIMITS,
) -> httpx.AsyncClient:
    """Build an AsyncClient with JSON defaults.

    ``headers`` are merged over the defaults. Callers pass absolute URLs, so
    no base URL is bound here.
    """
    return httpx.AsyncClient(
        headers={"Accept": "application/json", "User-Agent": USER_AGENT, **(headers or {})},
        timeout=timeout,
        limits=limits,
    )


def get_auth_client() -> httpx.AsyncClient:
    """Return the shared client, creating it on first use."""
    global _auth_client
    if _auth_client is None or _auth_client.is_closed:
        _auth_client = create_http_client()
    return _auth_client


async def close_auth_client() -> None:
    global _auth_client
    if _auth_client is not None:
        await _auth_client.aclose()
        _auth_client = None
