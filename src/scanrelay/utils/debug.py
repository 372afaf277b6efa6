"""Debug utilities for worker visibility.

Thread-safe debug switch plus Rich-formatted printing of scan events.
"""

import json
import logging
import threading
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from scanrelay.modules.orchestrator import ScanEvent

# Thread-local storage for debug state
_debug_state = threading.local()

_EVENT_STYLES = {
    "task_created": "cyan",
    "status_changed": "blue",
    "progress": "dim",
    "completed": "green",
    "cancelled": "yellow",
    "failed": "red",
    "cleanup_failed": "red",
}


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread/session."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled for the current thread/session."""
    return getattr(_debug_state, "enabled", False)


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route library logging through Rich; DEBUG when verbose, else WARNING."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    set_debug_enabled(verbose)


def debug_print(category: str, message: str, console: Console | None = None, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (job, remote, worker, config)
        message: Main message to display
        console: Console to print to (default: a fresh stdout console)
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    console = console or Console()
    console.print(f"[DEBUG:{category}] {message}", style="bold cyan")
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            try:
                json_str = json.dumps(value, indent=2)
                syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)
                console.print(f"  {key}:", style="dim")
                console.print(syntax)
            except (TypeError, ValueError):
                console.print(f"  {key}: {value}", style="dim")
        elif isinstance(value, list):
            console.print(f"  {key}: {', '.join(str(v) for v in value)}", style="dim")
        elif isinstance(value, str) and len(value) > 100:
            console.print(f"  {key}: {value[:100]}... ({len(value)} chars)", style="dim")
        else:
            console.print(f"  {key}: {value}", style="dim")


def event_printer(console: Console | None = None):
    """Build an orchestrator listener that prints events to ``console``."""
    target = console or Console()

    def _print(event: ScanEvent) -> None:
        if event.kind == "progress" and not is_debug_enabled():
            return
        style = _EVENT_STYLES.get(event.kind, "white")
        short_id = event.job_id[:8]
        line = (
            f"[{style}]{event.kind:<15}[/{style}] {short_id} "
            f"{event.status.value:<11} {event.progress:5.1f}%"
        )
        if event.message:
            line += f" [dim]{event.message}[/dim]"
        target.print(line)
        debug_print("job", f"event {event.kind}", console=target, Task=event.task_id)

    return _print
