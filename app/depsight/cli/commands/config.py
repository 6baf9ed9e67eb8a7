"""Config command implementation.

Shows and initializes the depsight settings file.
"""

from typing import Annotated

import typer
from rich.table import Table

from depsight.cli.types import require_config
from depsight.core.config import ConfigError, DepsightConfig, config_to_dict, save_config
from depsight.core.paths import get_config_path
from depsight.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Show or initialize depsight settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    config = require_config()
    config_path = get_config_path()

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")

    for key, value in config_to_dict(config, include_defaults=True).items():
        text = ", ".join(value) if isinstance(value, list) else str(value)
        table.add_row(key, f"[text]{text}[/]")

    console.print(table)
    source = str(config_path) if config_path.exists() else "defaults (no config file)"
    console.print(f"\n[dim]Source: {source}[/]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_warning(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        save_config(DepsightConfig(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Config written to {config_path}")


@app.command()
def path() -> None:
    """Print the config file path."""
    console.print(str(get_config_path()))
