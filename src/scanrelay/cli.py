"""ScanRelay CLI - queue and run SQL injection scans through the sqlmap API."""

from scanrelay.cli_commands.shared import app, console
from scanrelay.config import (
    create_global_config,
    create_local_env_template,
    get_config_source,
    load_settings,
)
from scanrelay.modules.jobqueue import JobStore
from scanrelay.modules.sqlmapapi import SqlmapApiClient

# Import command modules for side-effect registration.
from scanrelay.cli_commands import config_command as _config_command  # noqa: F401
from scanrelay.cli_commands import job_commands as _job_commands  # noqa: F401
from scanrelay.cli_commands import worker_command as _worker_command  # noqa: F401

__all__ = [
    "JobStore",
    "SqlmapApiClient",
    "app",
    "console",
    "create_global_config",
    "create_local_env_template",
    "get_config_source",
    "load_settings",
    "main",
    "version",
]


@app.command()
def version() -> None:
    """Show the installed ScanRelay version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("scanrelay")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"ScanRelay {current_version}")


def main():
    """Entry point for the CLI."""
    app()
