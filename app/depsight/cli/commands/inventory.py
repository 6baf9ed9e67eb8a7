"""List command implementation.

Shows the declared dependencies of one or more projects with usage and
freshness information.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from depsight.cli.types import OutputFormat, create_engine, require_config
from depsight.core.config import DepsightConfig
from depsight.models.inventory import MSG_NO_DEPENDENCIES, InventoryReport
from depsight.models.package import DependencyScope, PackageReport
from depsight.utils.formatting import (
    console,
    create_dependency_table,
    err_console,
    format_dependency_row,
    print_error,
    print_info,
    print_warning,
)


async def _refresh_all(config: DepsightConfig, project_dirs: list[Path]) -> list[InventoryReport]:
    # One engine so projects sharing a package hit the registry once
    async with create_engine(config) as engine:
        return [await engine.refresh(project_dir) for project_dir in project_dirs]


def _filter_packages(
    packages: list[PackageReport],
    *,
    outdated_only: bool,
    unused_only: bool,
    include_dev: bool,
) -> list[PackageReport]:
    """Apply the command-line filters to a report's packages."""
    selected = packages
    if not include_dev:
        selected = [p for p in selected if p.scope == DependencyScope.RUNTIME]
    if outdated_only:
        selected = [p for p in selected if p.is_outdated]
    if unused_only:
        selected = [p for p in selected if not p.is_used]
    return selected


def _single_or_list(documents: list[dict[str, Any]]) -> dict[str, Any] | list[dict[str, Any]]:
    return documents[0] if len(documents) == 1 else documents


def _export(reports: list[InventoryReport], export_path: Path) -> None:
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)
    data = _single_or_list([report.to_dict() for report in reports])
    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(data, indent=2) + "\n")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e
    # stderr, so JSON on stdout stays parseable
    err_console.print(f"[info]Inventory exported to {export_path}[/]")


def _print_placeholder(report: InventoryReport) -> None:
    if report.message == MSG_NO_DEPENDENCIES:
        print_info(report.message)
    else:
        print_warning(f"{report.message} ({report.manifest_path})")


def _print_table(report: InventoryReport, packages: list[PackageReport]) -> None:
    project_dir = Path(report.project_dir)
    table = create_dependency_table(f"Dependencies ({project_dir.name or project_dir})")
    for pkg in packages:
        table.add_row(*format_dependency_row(pkg))
    console.print(table)

    summary = report.summary
    console.print(
        f"\n[dim]Showing {len(packages)} of {summary['total']} packages "
        f"({summary['runtime']} runtime, {summary['development']} dev) "
        f"- {summary['outdated']} outdated, {summary['unused']} unused[/]"
    )


def list_dependencies(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(
            help="Project directories containing package.json (default: current directory)."
        ),
    ] = None,
    outdated_only: Annotated[
        bool,
        typer.Option("--outdated", "-o", help="Only show packages with a newer release."),
    ] = False,
    unused_only: Annotated[
        bool,
        typer.Option("--unused", "-u", help="Only show packages not imported in source."),
    ] = False,
    include_dev: Annotated[
        bool,
        typer.Option("--dev/--no-dev", help="Include devDependencies."),
    ] = True,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    export_path: Annotated[
        Path | None,
        typer.Option("--export", "-e", help="Export the full inventory to a JSON file."),
    ] = None,
) -> None:
    """List declared dependencies with usage and latest versions.

    Several project directories give one report each. JSON output is an
    object for a single project and an array for several.

    Examples:
        depsight list                      # Inventory the current directory
        depsight list ./web --outdated     # Only outdated packages
        depsight list ./web ./api          # One report per project
        depsight list --unused --no-dev    # Unused runtime dependencies
        depsight list --format json        # Output as JSON
    """
    config = require_config()
    project_dirs = [p.resolve() for p in (paths or [Path(".")])]
    reports = asyncio.run(_refresh_all(config, project_dirs))

    if export_path is not None:
        _export(reports, export_path)

    failed = False
    documents: list[dict[str, Any]] = []
    for report in reports:
        if report.is_placeholder and report.message != MSG_NO_DEPENDENCIES:
            failed = True

        packages = _filter_packages(
            report.packages,
            outdated_only=outdated_only,
            unused_only=unused_only,
            include_dev=include_dev,
        )

        if output_format == OutputFormat.JSON:
            data = report.to_dict()
            data["packages"] = [p.to_dict() for p in packages]
            documents.append(data)
        elif report.is_placeholder:
            _print_placeholder(report)
        else:
            _print_table(report, packages)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(_single_or_list(documents)))

    if failed:
        raise typer.Exit(code=1)
