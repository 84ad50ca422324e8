"""CLI UI components (Rich).

Keeps visual details out of the command functions. Everything here renders to
the console it is given; the summary line itself is printed plainly elsewhere.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import QueryResult


def print_banner(console: Console) -> None:
    title = Text("BUGGLE", style="bold cyan")
    subtitle = Text("Bugzilla counts • Daily summary", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_results_table(results: Iterable[QueryResult]) -> Table:
    """Table of per-query results, shown in verbose mode."""

    table = Table(title="Query results")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Count", style="green", justify="right")
    table.add_column("URL", style="magenta", overflow="fold")
    table.add_column("Error", style="red")
    for result in results:
        table.add_row(
            escape(result.name),
            "?" if result.count is None else str(result.count),
            result.url or "",
            escape(result.error or ""),
        )
    return table
