"""Job queue CLI commands: submit, status, result, cancel, jobs, stats."""

from dataclasses import fields

import typer
from rich.table import Table

from scanrelay.errors import ScanRelayError
from scanrelay.modules.jobqueue import QUEUE_STATE_NAMES
from scanrelay.modules.options import CAMEL_ALIASES, ScanConfiguration

from .deps import cli_module
from .shared import (
    app,
    console,
    fail,
    jobs_table,
    parse_key_values,
    query_service,
    render_view,
    require_found,
    styled_status,
)

_CONFIG_FIELDS = {f.name for f in fields(ScanConfiguration)} - {"custom_options", "target"}


def build_configuration(
    target: str,
    method: str | None,
    data: str | None,
    cookie: str | None,
    user_agent: str | None,
    referer: str | None,
    headers: list[str],
    options: list[str],
) -> ScanConfiguration:
    """Assemble a configuration; ``--option`` keys naming known fields set them directly."""
    payload = {
        "target": target,
        "method": method,
        "data": data,
        "cookie": cookie,
        "user_agent": user_agent,
        "referer": referer,
        "headers": headers or None,
    }
    custom = {}
    for key, value in parse_key_values(options).items():
        name = CAMEL_ALIASES.get(key, key)
        if name in _CONFIG_FIELDS:
            payload[name] = value
        else:
            custom[key] = value
    payload["custom_options"] = custom
    return ScanConfiguration.from_dict({k: v for k, v in payload.items() if v is not None})


@app.command()
def submit(
    target: str = typer.Argument(..., help="Target URL to test"),
    method: str = typer.Option("GET", "--method", "-m", help="HTTP method"),
    data: str | None = typer.Option(None, "--data", "-d", help="Request body"),
    cookie: str | None = typer.Option(None, "--cookie", help="Cookie header value"),
    user_agent: str | None = typer.Option(None, "--user-agent", help="User-Agent value"),
    referer: str | None = typer.Option(None, "--referer", help="Referer value"),
    header: list[str] | None = typer.Option(
        None, "--header", "-H", help="Extra header 'Name: value' (repeatable)"
    ),
    option: list[str] | None = typer.Option(
        None, "--option", "-o", help="Scan option KEY=VALUE (repeatable)"
    ),
    priority: int = typer.Option(1, "--priority", help="Lower numbers run first"),
    max_attempts: int | None = typer.Option(
        None, "--max-attempts", help="Attempts allowed for retryable failures"
    ),
) -> None:
    """Queue a new scan job."""
    try:
        config = build_configuration(
            target, method, data, cookie, user_agent, referer, header or [], option or []
        )
    except ValueError as exc:
        fail(str(exc))

    attempts = max_attempts or cli_module().load_settings().max_attempts
    with query_service() as service:
        try:
            view = service.submit(
                config,
                metadata={"source": "cli"},
                priority=priority,
                max_attempts=max(1, attempts),
            )
        except ScanRelayError as exc:
            fail(str(exc))

    console.print(f"[green]{view.message}[/green]")
    console.print(f"[bold]Job:[/bold] {view.job_id}")
    console.print("[dim]Run 'scanrelay worker' to process queued jobs.[/dim]")


@app.command()
def status(job_id: str = typer.Argument(..., help="Job id")) -> None:
    """Show the state and progress of a job."""
    with query_service() as service:
        view = require_found(service.get_status(job_id))
    render_view(view)


@app.command()
def result(
    job_id: str = typer.Argument(..., help="Job id"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Show the findings of a completed job."""
    with query_service() as service:
        view = require_found(service.get_result(job_id))

    if as_json:
        console.print_json(data=view.to_dict())
        return

    render_view(view)
    if view.data is None:
        return
    findings = view.data.get("data") or []
    errors = view.data.get("errors") or []
    log = view.data.get("log") or []
    if findings:
        console.print(f"[bold red]Findings: {len(findings)}[/bold red]")
        for entry in findings:
            console.print(entry)
    else:
        console.print("[green]No injection points reported[/green]")
    for error in errors:
        console.print(f"[yellow]Scanner error:[/yellow] {error}")
    if log:
        console.print(f"[dim]{len(log)} log line(s); use --json to see them[/dim]")


@app.command()
def cancel(job_id: str = typer.Argument(..., help="Job id")) -> None:
    """Cancel a queued job or ask a running one to stop."""
    with query_service() as service:
        view = require_found(service.cancel(job_id))
    console.print(f"{styled_status(view.status)} {view.message}")


@app.command()
def jobs(
    state: str | None = typer.Option(
        None, "--status", "-s", help=f"Filter by state: {', '.join(QUEUE_STATE_NAMES)}"
    ),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum jobs to list"),
) -> None:
    """List recent jobs, newest first."""
    with query_service() as service:
        try:
            rows = service.list_jobs(state=state, limit=limit)
        except ValueError as exc:
            fail(str(exc))

    if not rows:
        console.print("[dim]No jobs found.[/dim]")
        return
    console.print(jobs_table(rows))


@app.command()
def stats() -> None:
    """Show queue counts per state."""
    with query_service() as service:
        counts = service.stats()

    table = Table(title="Queue")
    table.add_column("State")
    table.add_column("Jobs", justify="right")
    for name, count in counts.items():
        label = "total" if name == "total" else styled_status(name)
        table.add_row(label, str(count))
    console.print(table)
