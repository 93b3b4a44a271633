"""httpx wrapper.

Why a wrapper:
- Standardises base URL, timeouts and headers for every API call.
- Eases testing: respx (or a stub client) can be dropped in.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralises timeouts/headers so every endpoint behaves the same.
    - Per-call timeouts (auth, dashboard) are passed at request time.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url.rstrip("/") + "/",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def bearer_headers(access_token: str | None) -> dict[str, str]:
    """Authorization header for a token, or nothing when signed out."""

    if not access_token:
        return {}
    return {"Authorization": f"Bearer {access_token}"}
