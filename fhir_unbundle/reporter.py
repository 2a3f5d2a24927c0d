from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from fhir_unbundle.domain.models import UnbundleReport


def build_table(report: UnbundleReport) -> Table:
    """
    Build a rich table listing every bundle entry in index order.

    Written, skipped and failed entries share one table so the index column
    reads top to bottom like the source bundle.
    """
    table = Table(
        title=f"Unbundled {report.source.name}",
        box=box.ROUNDED,
        caption=(
            f"{len(report.written)} written │ {len(report.skipped)} skipped │ "
            f"{len(report.failed)} failed │ {report.total_entries} entries"
        ),
    )
    table.add_column("Index", justify="right", style="magenta")
    table.add_column("Status", no_wrap=True)
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Id", style="blue")
    table.add_column("Output / Reason")

    rows = []
    for written in report.written:
        rows.append(
            (
                written.index,
                "[green]written[/green]",
                written.resource_type,
                written.resource_id,
                str(written.path),
            )
        )
    for skipped in report.skipped:
        rows.append((skipped.index, "[yellow]skipped[/yellow]", "", "", skipped.reason))
    for failed in report.failed:
        rows.append(
            (failed.index, "[red]failed[/red]", failed.resource_type, "", failed.error)
        )

    for index, status, resource_type, resource_id, detail in sorted(rows, key=lambda r: r[0]):
        table.add_row(str(index), status, resource_type, resource_id, detail)
    return table


def print_report(report: UnbundleReport, console: Optional[Console] = None) -> None:
    """
    Render an unbundle report on the console.

    Non-bundle documents get a one-line notice instead of a table.
    """
    console = console or Console()

    if not report.is_bundle:
        console.print(
            f"[yellow]{report.source.name} is a {report.resource_type}, not a Bundle; "
            "no files written.[/yellow]"
        )
        return

    if not report.total_entries:
        console.print(f"[yellow]{report.source.name} has no entries.[/yellow]")
        return

    console.print(build_table(report))
