"""Worker CLI command: process queued scan jobs."""

import asyncio

import typer

from scanrelay.config import Settings
from scanrelay.modules.jobqueue import ScanWorkerPool
from scanrelay.modules.orchestrator import ScanOrchestrator
from scanrelay.utils.debug import configure_logging, event_printer

from .deps import cli_module
from .shared import app, console


async def run_worker(settings: Settings, once: bool) -> ScanWorkerPool:
    """Build client, orchestrator and pool from settings and run them."""
    cli = cli_module()
    store = cli.JobStore(settings.db_path)
    try:
        async with cli.SqlmapApiClient(
            settings.api_url, timeout=settings.request_timeout
        ) as client:
            orchestrator = ScanOrchestrator(
                client,
                poll_interval=settings.poll_interval,
                max_polls=settings.max_polls,
            )
            orchestrator.add_listener(event_printer(console))
            pool = ScanWorkerPool(
                store,
                orchestrator,
                concurrency=settings.concurrency,
                idle_interval=settings.idle_interval,
            )
            if once:
                await pool.drain()
            else:
                await pool.run()
            return pool
    finally:
        store.close()


@app.command()
def worker(
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-c", help="Jobs processed at once"
    ),
    once: bool = typer.Option(False, "--once", help="Exit when the queue is empty"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run scan workers against the configured sqlmap API server."""
    cli = cli_module()
    settings = cli.load_settings()
    if concurrency is not None:
        settings.concurrency = max(1, concurrency)
    verbose = verbose or settings.verbose
    configure_logging(verbose)

    console.print(
        f"[bold]Workers:[/bold] {settings.concurrency}  "
        f"[bold]API:[/bold] {settings.api_url}  "
        f"[bold]DB:[/bold] {settings.db_path}"
    )
    try:
        pool = asyncio.run(run_worker(settings, once))
    except KeyboardInterrupt:
        console.print("[yellow]Worker stopped; running jobs resume on next start.[/yellow]")
        raise typer.Exit(130)

    console.print(
        f"[green]Done:[/green] {pool.completed} finished, "
        f"{pool.failed} failed, {pool.retried} retried"
    )
