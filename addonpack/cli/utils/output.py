# addonpack/cli/utils/output.py
"""Output formatting utilities"""

from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
from rich.markup import escape

from ...models import BuildFailure, PackReport, ReleaseResult
from ...utils.file_utils import format_size, get_file_size

console = Console()


def format_failures(failures: List[BuildFailure], title: str = "Failures") -> Optional[Table]:
    """Create a table of per-addon failures, or None if there are none"""
    if not failures:
        return None

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Addon", style="cyan")
    table.add_column("Location")
    table.add_column("Stage", style="yellow")
    table.add_column("Code", style="dim")
    table.add_column("Error", style="red")

    for failure in failures:
        table.add_row(
            failure.addon,
            failure.location.folder,
            failure.stage.value,
            failure.code or "",
            escape(failure.message),
        )

    return table


def format_release_result(result: ReleaseResult) -> None:
    """Format and display a release build result"""
    total_size = sum(get_file_size(p) for p in result.outputs)
    lines = [
        f"[bold]Version:[/bold] {result.version}",
        f"[bold]Release:[/bold] {result.release_root}",
        f"[bold]Signed:[/bold] {result.signed_count}",
        f"[bold]Size:[/bold] {format_size(total_size)}",
    ]

    if result.copied_files:
        lines.append(f"[bold]Files:[/bold] {len(result.copied_files)} copied")

    if result.skipped:
        lines.append(f"[bold]Skipped:[/bold] {len(result.skipped)} non-file entries")

    if result.duration is not None:
        lines.append(f"[bold]Duration:[/bold] {result.duration:.2f}s")

    if result.is_success:
        lines.insert(0, "[green]✓[/green] Release built successfully!\n")
        console.print(Panel("\n".join(lines), title="Release Result", border_style="green"))
    else:
        lines.insert(0, f"[red]✗[/red] {len(result.failures)} addon(s) failed\n")
        console.print(Panel("\n".join(lines), title="Release Result", border_style="red"))
        console.print(format_failures(result.failures))


def format_pack_report(report: PackReport) -> None:
    """Format and display a packing report"""
    if report.is_success:
        console.print(f"[green]✓[/green] Packed {report.packed_count} addon(s)")
        return

    console.print(
        f"[red]✗[/red] Packed {report.packed_count} addon(s), "
        f"{len(report.failures)} failed"
    )
    console.print(format_failures(report.failures, title="Packing Failures"))


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {escape(message)}: {escape(str(error))}")
    else:
        console.print(f"[red]Error:[/red] {escape(message)}")

