"""Doctor command for configuration and connectivity diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.bugzilla_query import BugzillaQueryBuilder
from adapters.http_client import build_async_client
from core.config import AppSettings, ConfigurationError, load_settings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Configuration checks and credential setup.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


def _load(ctx: typer.Context) -> AppSettings:
    options = ctx.find_root().obj
    if options is None:
        return load_settings()
    return options.load()


@app.command()
def run(ctx: typer.Context) -> None:
    """Check configuration, publish credentials and Bugzilla reachability."""

    table = Table(title="Buggle Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        settings = _load(ctx)
    except ConfigurationError as exc:
        table.add_row("Configuration", "FAIL", escape(str(exc)))
        _console.print(table)
        raise typer.Exit(code=2) from exc

    table.add_row("Configuration", "OK", f"{len(settings.queries)} queries")

    builder = BugzillaQueryBuilder(settings.bugzilla_url)
    unknown = [spec.name for spec in settings.queries if builder.build(spec) is None]
    if unknown:
        table.add_row("Query kinds", "WARN", "Skipped at run time: " + ", ".join(unknown))
    else:
        table.add_row("Query kinds", "OK", "owner/product")

    dry_detail = ""
    if settings.dry_run:
        dry_detail = "No Bugzilla requests are sent"
        if settings.twitter:
            dry_detail += "; the summary is still posted"
    table.add_row("Dry run", "ON" if settings.dry_run else "OFF", dry_detail)

    if settings.twitter:
        table.add_row("Publishing", "OK", "X/Twitter credentials present")
    elif settings.twitter_app and settings.twitter_user:
        table.add_row("Publishing", "OFF", "Credentials present; enable with --twitter")
    else:
        table.add_row("Publishing", "OFF", "No credentials (run `buggle doctor setup-twitter`)")

    ok_http, detail_http = asyncio.run(_check_http(settings.bugzilla_url, settings))
    table.add_row("Bugzilla", "OK" if ok_http else "FAIL", escape(detail_http))

    _console.print(table)


@app.command(name="setup-twitter")
def setup_twitter() -> None:
    """Interactive X/Twitter credential setup (stored in the user config .env)."""

    app_key = typer.prompt("App (consumer) key").strip()
    app_secret = typer.prompt("App (consumer) secret", hide_input=True).strip()
    user_key = typer.prompt("User access token").strip()
    user_secret = typer.prompt("User access token secret", hide_input=True).strip()

    if not all((app_key, app_secret, user_key, user_secret)):
        raise typer.BadParameter("all four credentials are required")

    env_path = write_user_env_vars(
        {
            "BUGGLE_TWITTER_APP__KEY": app_key,
            "BUGGLE_TWITTER_APP__SECRET": app_secret,
            "BUGGLE_TWITTER_USER__KEY": user_key,
            "BUGGLE_TWITTER_USER__SECRET": user_secret,
        }
    )

    _console.print(f"[green]Saved X/Twitter credentials to:[/green] {env_path}")
