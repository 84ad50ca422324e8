"""Query runner contract.

A structural Protocol, so the aggregator can be driven by the real Bugzilla
runner or by a stub in tests without inheriting from anything.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import QueryResult


@runtime_checkable
class QueryRunner(Protocol):
    """Minimal contract for executing one built query.

    Rules:
    - `run` is asynchronous because it normally performs HTTP I/O.
    - It returns a `QueryResult` for every call; failures become an absent count.
    """

    async def run(self, name: str, url: str) -> QueryResult:
        """Execute `url` and reduce the response to a `QueryResult` tagged `name`."""

        ...
