"""Info command implementation.

Shows registry details for one declared dependency.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from depsight.cli.types import OutputFormat, create_engine, require_config, require_package
from depsight.core.config import DepsightConfig
from depsight.core.version import is_outdated
from depsight.models.package import RegistryMetadata
from depsight.utils.formatting import console


async def _lookup(config: DepsightConfig, name: str) -> RegistryMetadata | None:
    async with create_engine(config) as engine:
        return await engine.get_metadata(name)


def show_info(
    name: Annotated[str, typer.Argument(help="Package name as declared in package.json.")],
    path: Annotated[
        Path,
        typer.Argument(help="Project directory containing package.json."),
    ] = Path("."),
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show description, homepage, and latest version of a dependency."""
    config = require_config()
    package = require_package(path.resolve(), name)
    metadata = asyncio.run(_lookup(config, package.name))

    if output_format == OutputFormat.JSON:
        data: dict[str, object] = {
            "name": package.name,
            "version": package.version_spec,
            "scope": package.scope.value,
            **(metadata or RegistryMetadata()).to_dict(),
        }
        console.print_json(json.dumps(data))
        return

    latest = metadata.latest_version if metadata else None
    console.print(f"[bold_header]Name:[/] {escape(package.name)}")
    console.print(f"[bold_header]Version:[/] {escape(package.version_spec)}")
    console.print(f"[bold_header]Scope:[/] {package.scope.value}")
    if latest:
        style = "outdated" if is_outdated(package.version_spec, latest) else "latest"
        console.print(f"[bold_header]Latest:[/] [{style}]{escape(latest)}[/]")

    console.print("\n[bold_header]Description[/]")
    if metadata and metadata.description:
        console.print(escape(metadata.description))
    else:
        console.print("[muted]Not available.[/]")

    if metadata and metadata.homepage:
        console.print(f"\n[bold_header]Homepage:[/] {escape(metadata.homepage)}")
