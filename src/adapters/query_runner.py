"""Bugzilla query runner.

Executes one built URL and reduces the CSV response to a row count.

Notes:
- 200 => count = number of lines minus the CSV header (never negative)
- any other status => no count
- transport errors (connect, timeout, body read) => no count; never raised,
  so one failing query does not abort the batch
"""

from __future__ import annotations

import logging

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import QueryResult, RunFlags
from core.interfaces.query_runner import QueryRunner

logger = logging.getLogger(__name__)


def count_csv_rows(body: bytes) -> int:
    """Number of data rows in a CSV body with one header line.

    Lines are newline-separated; a final newline does not start another line.
    An empty or header-only body yields 0.
    """

    segments = body.split(b"\n")
    if segments and segments[-1] == b"":
        segments.pop()
    return max(0, len(segments) - 1)


class BugzillaQueryRunner(QueryRunner):
    """Runs queries against Bugzilla's CSV export.

    A shared `client` may be injected (tests, or to reuse connections); when
    absent a short-lived client is built per request.
    """

    def __init__(
        self,
        flags: RunFlags,
        *,
        client: httpx.AsyncClient | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._flags = flags
        self._client = client
        self._settings = settings

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url)
        async with build_async_client(self._settings) as client:
            return await client.get(url)

    async def run(self, name: str, url: str) -> QueryResult:
        if self._flags.verbose:
            logger.info("Query for %s = %s", name, url)
        if self._flags.dry_run:
            return QueryResult(name=name, url=url)

        try:
            response = await self._get(url)
        except httpx.HTTPError as exc:
            logger.warning("Query %s failed: %s", name, exc)
            return QueryResult(name=name, url=url, error=f"transport: {exc.__class__.__name__}")

        if response.status_code != 200:
            logger.warning("Query %s returned HTTP %s", name, response.status_code)
            return QueryResult(name=name, url=url, error=f"http_{response.status_code}")

        return QueryResult(name=name, url=url, count=count_csv_rows(response.content))
