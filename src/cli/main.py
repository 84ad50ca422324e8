"""Buggle command line.

`buggle` with no command runs the configured queries, prints the summary line
on stdout and, when enabled, posts it. Diagnostics (logs, tables) go to stderr
so stdout carries only the summary.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.publisher import publish_summary
from cli.doctor import app as doctor_app
from cli.ui_components import build_results_table, print_banner
from core.config import AppSettings, ConfigurationError, load_settings
from core.services.buggle_pipeline import run_buggle

app = typer.Typer(
    help="Count open Bugzilla issues and post a daily summary.",
    add_completion=False,
)
app.add_typer(doctor_app, name="doctor")

_err_console = Console(stderr=True)


@dataclass
class CliOptions:
    """Global options, shared with subcommands through `ctx.obj`."""

    config_file: Path | None = None
    auth_file: Path | None = None
    overrides: dict[str, bool | None] = field(default_factory=dict)

    def load(self) -> AppSettings:
        return load_settings(self.config_file, self.auth_file, **self.overrides)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Main configuration file (default: ./buggle.toml)."
    ),
    auth_file: Optional[Path] = typer.Option(
        None, "--auth", help="Credentials file (default: ./buggle-auth.toml, optional)."
    ),
    verbose: Optional[bool] = typer.Option(
        None, "--verbose/--quiet", "-V/-q", help="Show queries and results on stderr."
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--live", "-n", help="Build queries but do not send requests."
    ),
    twitter: Optional[bool] = typer.Option(
        None, "--twitter/--no-twitter", help="Post the summary to X/Twitter."
    ),
    parallel: Optional[bool] = typer.Option(
        None, "--parallel/--sequential", help="Run queries concurrently."
    ),
) -> None:
    """Run the configured queries and print the daily summary."""

    options = CliOptions(
        config_file=config_file,
        auth_file=auth_file,
        overrides={
            "verbose": verbose,
            "dry_run": dry_run,
            "twitter": twitter,
            "concurrent": parallel,
        },
    )
    ctx.obj = options
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings = options.load()
    except ConfigurationError as exc:
        _err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    flags = settings.run_flags()
    configure_logging(flags.verbose)
    if flags.verbose:
        print_banner(_err_console)

    result = asyncio.run(run_buggle(settings))
    typer.echo(result.summary)

    if flags.verbose:
        _err_console.print(build_results_table(result.results))

    if flags.publish:
        # load_settings rejects twitter=true without both credentials
        assert settings.twitter_app is not None and settings.twitter_user is not None
        publish_summary(result.summary, app=settings.twitter_app, user=settings.twitter_user)


def run() -> None:
    app()
