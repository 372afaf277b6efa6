"""Shared CLI app objects and helpers."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from scanrelay.modules.jobqueue import JobQueryService, JobView

from .deps import cli_module

app = typer.Typer(
    name="scanrelay",
    help="Queue and run SQL injection scans against a sqlmap API server",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    "waiting": "cyan",
    "active": "blue",
    "completed": "green",
    "failed": "red",
    "cancelled": "yellow",
    "not_found": "red",
}


def parse_value(raw: str) -> Any:
    """Interpret a CLI value as JSON when possible, else keep the string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_key_values(pairs: list[str]) -> dict[str, Any]:
    """Parse repeated ``KEY=VALUE`` options."""
    parsed: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {pair!r}")
        parsed[key] = parse_value(value.strip())
    return parsed


@contextmanager
def query_service() -> Iterator[JobQueryService]:
    """Open the configured job store for the duration of a command."""
    cli = cli_module()
    settings = cli.load_settings()
    store = cli.JobStore(settings.db_path)
    try:
        yield JobQueryService(store)
    finally:
        store.close()


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


def require_found(view: JobView) -> JobView:
    if not view.found:
        console.print(f"[red]Job {view.job_id} not found[/red]")
        raise typer.Exit(1)
    return view


def styled_status(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def render_view(view: JobView) -> None:
    """Print a job view as aligned key/value lines."""
    console.print(f"[bold]Job:[/bold]      {view.job_id}")
    console.print(f"[bold]Status:[/bold]   {styled_status(view.status)}")
    console.print(f"[bold]Progress:[/bold] {view.progress:.1f}%")
    if view.task_id:
        console.print(f"[bold]Task:[/bold]     {view.task_id}")
    if view.message:
        console.print(f"[dim]{view.message}[/dim]")
    if isinstance(view.error, dict):
        retry = " (retryable)" if view.error.get("retryable") else ""
        console.print(
            f"[red]Error[{view.error.get('kind')}]{retry}: {view.error.get('message')}[/red]"
        )


def jobs_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(title="Scan Jobs")
    table.add_column("Job", style="cyan", no_wrap=True)
    table.add_column("Target")
    table.add_column("State")
    table.add_column("Progress", justify="right")
    table.add_column("Attempt", justify="right")
    table.add_column("Created", style="dim")
    for row in rows:
        table.add_row(
            row["id"],
            row["target"],
            styled_status(row["state"]),
            f"{row['progress']:.1f}%",
            str(row["attempt"]),
            row["created_at"] or "",
        )
    return table
