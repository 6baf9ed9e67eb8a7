"""Rendering of package manager results for update and remove."""

from rich.markup import escape
from rich.table import Table

from depsight.models.action import ActionResult
from depsight.utils.formatting import console, print_error, print_success


def create_results_table(results: list[ActionResult]) -> Table:
    """Build a table with one row per executed action.

    Args:
        results: Outcomes returned by an operator.

    Returns:
        Rich Table with status, action, package spec, and message columns.
    """
    table = Table(title="Results", header_style="bold_header", border_style="border")
    table.add_column("", width=2, justify="center")
    table.add_column("Action")
    table.add_column("Package", no_wrap=True)
    table.add_column("Output")

    for result in results:
        icon = "[success]✓[/]" if result.success else "[error]✗[/]"
        detail = (result.message if result.success else result.error) or ""
        table.add_row(
            icon,
            result.action.action_type.value,
            escape(result.action.spec),
            f"[muted]{escape(detail)}[/]",
        )
    return table


def print_results_summary(results: list[ActionResult]) -> None:
    """Print one line summarizing how many actions failed."""
    failed = [r for r in results if r.failed]
    if failed:
        names = ", ".join(r.action.package for r in failed)
        print_error(f"{len(failed)} of {len(results)} action(s) failed: {names}")
    else:
        print_success(f"{len(results)} action(s) completed.")
