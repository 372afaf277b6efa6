"""Configuration CLI command."""

import typer
from rich.table import Table

from .deps import cli_module
from .shared import app, console


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show, init"),
    global_config: bool = typer.Option(
        False,
        "--global",
        help="Create the global YAML config instead of the local .env",
    ),
) -> None:
    """Show effective settings or create a config template."""
    cli = cli_module()

    if action == "init":
        if global_config:
            config_path = cli.create_global_config()
            console.print(f"[green]Global config:[/green] {config_path}")
            return
        env_path = cli.create_local_env_template()
        console.print(f"[green]Local config:[/green] {env_path}")
        console.print("[dim]Edit the file and uncomment the settings you want to change.[/dim]")
        return

    if action == "show":
        settings = cli.load_settings()
        table = Table(title="ScanRelay Settings")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        table.add_column("Source", style="dim")
        for name, value in settings.to_dict().items():
            key = f"SCANRELAY_{name.upper()}"
            table.add_row(key, str(value), cli.get_config_source(key))
        console.print(table)
        return

    console.print(f"[red]Unknown action: {action}. Use 'show' or 'init'.[/red]")
    raise typer.Exit(1)
