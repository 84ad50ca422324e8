"""Summary formatting.

Turns results into a short, social-media friendly line naming the bug counts:

    Daily buggle: 3 (ports) / ? (me)
"""

from __future__ import annotations

from typing import Iterable

from core.domain.models import QueryResult

SUMMARY_PREFIX = "Daily buggle: "
SEPARATOR = " / "
UNKNOWN_COUNT = "?"


def format_entry(result: QueryResult) -> str:
    count = UNKNOWN_COUNT if result.count is None else str(result.count)
    return f"{count} ({result.name})"


def summarize_buggle(results: Iterable[QueryResult]) -> str:
    """Render results in order; an empty list yields just the prefix."""

    return SUMMARY_PREFIX + SEPARATOR.join(format_entry(r) for r in results)
