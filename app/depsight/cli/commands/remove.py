"""Remove command implementation.

Deletes a dependency from package.json and uninstalls it.
"""

from pathlib import Path
from typing import Annotated

import typer

from depsight.cli.display import create_results_table, print_results_summary
from depsight.cli.types import require_config, require_package
from depsight.core.manifest import ManifestError, remove_dependency
from depsight.models.action import create_remove_action
from depsight.models.package import DependencyScope
from depsight.operators.npm import NpmOperator
from depsight.utils.formatting import console, print_error, print_info, print_success
from depsight.utils.shell import format_command


def remove_package(
    name: Annotated[str, typer.Argument(help="Package name as declared in package.json.")],
    path: Annotated[
        Path,
        typer.Argument(help="Project directory containing package.json."),
    ] = Path("."),
    dev: Annotated[
        bool,
        typer.Option("--dev", "-D", help="Remove the devDependencies entry."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt."),
    ] = False,
    uninstall: Annotated[
        bool,
        typer.Option("--uninstall/--no-uninstall", help="Also run the package manager."),
    ] = True,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would change without writing."),
    ] = False,
) -> None:
    """Remove a dependency from package.json and uninstall it."""
    config = require_config()
    project_dir = path.resolve()
    scope = DependencyScope.DEVELOPMENT if dev else None
    package = require_package(project_dir, name, scope)

    operator = NpmOperator(project_dir, config.package_manager, dry_run=dry_run)
    action = create_remove_action(package.name, reason=f"declared in {package.scope.value}")

    if dry_run:
        print_info(
            f"Would remove {package.name} from {package.scope.value} in {package.manifest_path}"
        )
        if uninstall:
            print_info(f"Would run: {format_command(operator.build_command([action]))}")
        return

    if not yes:
        confirmed = typer.confirm(f"Remove {package.name} from {package.scope.value}?")
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        manifest_path = remove_dependency(package)
    except ManifestError as e:
        print_error(f"Failed to update manifest: {e}")
        raise typer.Exit(code=1) from e
    print_success(f"Removed {package.name} from {manifest_path}")

    if not uninstall:
        return

    try:
        results = operator.execute([action])
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(create_results_table(results))
    print_results_summary(results)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)
