"""Update command implementation.

Installs the latest published version of a declared dependency.
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from depsight.cli.display import create_results_table, print_results_summary
from depsight.cli.types import create_engine, require_config, require_package
from depsight.core.config import DepsightConfig
from depsight.core.version import is_outdated, normalize_version
from depsight.models.action import create_update_action
from depsight.models.package import RegistryMetadata
from depsight.operators.npm import NpmOperator
from depsight.utils.formatting import console, print_error, print_info


async def _lookup(config: DepsightConfig, name: str) -> RegistryMetadata | None:
    async with create_engine(config) as engine:
        return await engine.get_metadata(name)


def update_dependency(
    name: Annotated[str, typer.Argument(help="Package name as declared in package.json.")],
    path: Annotated[
        Path,
        typer.Argument(help="Project directory containing package.json."),
    ] = Path("."),
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show the command without running it."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", help="Install the latest version even if already current."),
    ] = False,
) -> None:
    """Install the latest version of a dependency with the package manager."""
    config = require_config()
    project_dir = path.resolve()
    package = require_package(project_dir, name)

    metadata = asyncio.run(_lookup(config, package.name))
    latest = normalize_version(metadata.latest_version if metadata else None)
    if latest is None:
        print_error(f"Latest version of {package.name} is unavailable; cannot update.")
        raise typer.Exit(code=1)

    if not force and not is_outdated(package.version_spec, latest):
        print_info(f"{package.name} is already up to date ({package.version_spec}).")
        return

    operator = NpmOperator(project_dir, config.package_manager, dry_run=dry_run)
    action = create_update_action(package.name, latest, reason=f"declared {package.version_spec}")

    try:
        results = operator.execute([action])
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(create_results_table(results))
    print_results_summary(results)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)
