"""dailyrecap CLI commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dailyrecap.errors import DailyError
from dailyrecap.orchestrator import Orchestrator
from dailyrecap.report import ReportFormat
from dailyrecap.review import InteractiveReviewer
from dailyrecap.settings import CONFIG_PATH, DailySettings, get_settings
from dailyrecap.sources.base import ActivitySource
from dailyrecap.sources.github import GitHubSource
from dailyrecap.sources.linear import LinearSource

app = typer.Typer(help="dailyrecap: review Linear + GitHub activity into a daily summary", no_args_is_help=True)


# ---------------------------------------------------------------------------
# Source registry
# ---------------------------------------------------------------------------


def get_sources(settings: DailySettings) -> list[ActivitySource]:
    """Sources in fetch order. GitHub is best-effort; Linear must succeed."""
    return [
        GitHubSource(settings, required=False),
        LinearSource(settings, required=True),
    ]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("daily")
def daily(
    hours: Annotated[
        int,
        typer.Option("--hours", "-H", min=1, help="Lookback window in hours"),
    ] = 24,
    fmt: Annotated[
        ReportFormat,
        typer.Option("--format", "-f", help="Report layout"),
    ] = ReportFormat.simplified,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the summary file (default: config or cwd)"),
    ] = None,
) -> None:
    """Review recent activity interactively and write daily-summary-<date>.md."""
    settings = get_settings()
    console = Console()
    orchestrator = Orchestrator(
        get_sources(settings),
        InteractiveReviewer(console=console),
        console=console,
        comment_limit=settings.comment_limit,
    )

    try:
        path = orchestrator.run(hours=hours, output_dir=output_dir or settings.report_output_dir, fmt=fmt)
    except DailyError as exc:
        rprint(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc

    if path is None:
        return
    rprint(f"[green]✓[/green] Summary written to {path}")


@app.command("config-show")
def config_show() -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings()

    def mask(val: str | None, prefix: str = "") -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"{prefix}...{val[-5:]}"

    table = Table(title=f"dailyrecap configuration ({CONFIG_PATH})")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row(
        "linear_api_token",
        mask(
            settings.linear_api_token.get_secret_value() if settings.linear_api_token else None,
            prefix="lin_api_",
        ),
    )
    table.add_row("linear_base_url", settings.linear_base_url or "[dim](not set)[/dim]")
    table.add_row(
        "github_api_token",
        mask(
            settings.github_api_token.get_secret_value() if settings.github_api_token else None,
            prefix="ghp_",
        ),
    )
    table.add_row("github_auth", settings.github_auth)
    table.add_row("report_output_dir", str(settings.report_output_dir))
    table.add_row("comment_limit", str(settings.comment_limit))

    rprint(table)
