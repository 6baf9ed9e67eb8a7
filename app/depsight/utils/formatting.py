"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from depsight.core.theme import get_theme
from depsight.models.package import DependencyScope, PackageReport


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_dependency_table(title: str = "Dependencies") -> Table:
    """Create a pre-configured table for displaying dependency reports.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for dependency display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    # Status column: icon only, no header text
    table.add_column("", width=2, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Scope", style="muted")
    table.add_column("Version", no_wrap=True)
    table.add_column("Description", style="text", overflow="ellipsis")
    return table


def format_version_text(report: PackageReport) -> str:
    """Format the version cell of a dependency row.

    Outdated packages show ``current → latest``; unused packages are
    suffixed with ``(unused)``.

    Args:
        report: The package report to format.

    Returns:
        Plain text for the version column.
    """
    if report.is_outdated and report.normalized_latest:
        return f"{report.normalized_current} → {report.normalized_latest}"
    if not report.is_used:
        return f"{report.display_version} (unused)"
    return report.display_version


def format_dependency_row(report: PackageReport) -> tuple[str, str, str, str, str]:
    """Format a package report as a table row with proper styling.

    Outdated packages get an up-arrow icon, unused packages a slashed
    circle, and the rest a filled (runtime) or empty (dev) circle.

    Args:
        report: The package report to format.

    Returns:
        Tuple of (icon, name, scope, version, description) with Rich markup.
    """
    is_dev = report.scope == DependencyScope.DEVELOPMENT
    name_style = "package_dev" if is_dev else "package_runtime"

    if report.is_outdated:
        icon = "[outdated]↑[/]"
        version_style = "outdated"
    elif not report.is_used:
        icon = "[unused]⊘[/]"
        version_style = "unused"
    else:
        icon = f"[{name_style}]{'○' if is_dev else '●'}[/]"
        version_style = "muted"

    name = f"[{name_style}]{escape(report.name)}[/]"
    scope = f"[muted]{report.scope.label}[/]"
    version = f"[{version_style}]{escape(format_version_text(report))}[/]"
    desc = f"[text]{escape(report.description or '-')}[/]"

    return (icon, name, scope, version, desc)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
