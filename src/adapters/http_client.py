"""httpx wrapper.

Standardizes timeouts and headers for every Bugzilla request, and gives tests
a single seam to swap in an `httpx.MockTransport`.
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

    The timeout applies per request (connect, read, write, pool).
    """

    timeout = settings.http_timeout_seconds if settings else 20.0
    user_agent = settings.user_agent if settings else "buggle/0.1"
    headers: dict[str, str] = {
        "User-Agent": user_agent,
        "Accept": "text/csv,text/plain;q=0.9,*/*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
