"""Buggle run orchestration.

Turns configured query specs into ordered results and the summary line. The
CLI delegates all aggregation here, which keeps printing and publishing out of
the core logic and makes the pipeline easy to drive from tests with a stub
runner.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from adapters.bugzilla_query import BugzillaQueryBuilder
from adapters.query_runner import BugzillaQueryRunner
from core.config import AppSettings
from core.domain.models import QueryResult, QuerySpec, RunFlags
from core.interfaces.query_runner import QueryRunner
from core.services.summary import summarize_buggle

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Output of one run."""

    results: list[QueryResult]
    summary: str
    warnings: list[str] = field(default_factory=list)


async def _safe_run(runner: QueryRunner, name: str, url: str) -> QueryResult:
    try:
        return await runner.run(name, url)
    except Exception as exc:  # noqa: BLE001 - one query must not abort the batch
        logger.warning("Query %s raised %s: %s", name, exc.__class__.__name__, exc)
        return QueryResult(name=name, url=url, error=str(exc) or exc.__class__.__name__)


async def collect_results(
    specs: Sequence[QuerySpec],
    *,
    builder: BugzillaQueryBuilder,
    runner: QueryRunner,
    flags: RunFlags,
    warnings: list[str] | None = None,
) -> list[QueryResult]:
    """Run every recognized spec and return results in spec order.

    Specs with an unknown kind are logged, appended to `warnings` and left out
    of the results.
    """

    planned: list[tuple[str, str]] = []
    for spec in specs:
        url = builder.build(spec)
        if url is None:
            message = f"Unknown query name={spec.name} kind={spec.kind}"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
            continue
        planned.append((spec.name, url))

    if flags.concurrent:
        # gather() returns results in argument order.
        return list(await asyncio.gather(*(_safe_run(runner, name, url) for name, url in planned)))

    results: list[QueryResult] = []
    for name, url in planned:
        results.append(await _safe_run(runner, name, url))
    return results


async def run_buggle(
    settings: AppSettings,
    *,
    runner: QueryRunner | None = None,
) -> PipelineResult:
    flags = settings.run_flags()
    builder = BugzillaQueryBuilder(settings.bugzilla_url)
    runner = runner or BugzillaQueryRunner(flags, settings=settings)
    warnings: list[str] = []

    results = await collect_results(
        settings.queries,
        builder=builder,
        runner=runner,
        flags=flags,
        warnings=warnings,
    )
    return PipelineResult(results=results, summary=summarize_buggle(results), warnings=warnings)
