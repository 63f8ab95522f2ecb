"""Progress display utilities"""

from contextlib import contextmanager
from typing import Callable, Generator, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    MofNCompleteColumn,
    TimeElapsedColumn,
)

from ...models import BuildResult, BuildStatus


@contextmanager
def unit_progress(description: str,
                  total: Optional[int] = None,
                  console: Optional[Console] = None,
                  enabled: bool = True) -> Generator[Optional[Callable[[BuildResult, int], None]], None, None]:
    """Progress bar advanced once per unit result

    Yields a callback suitable for the ``progress`` argument of
    ``build_release`` and ``pack_addons``, or None when disabled. The
    total is taken from the callback once the units are known.
    """
    if not enabled:
        yield None
        return

    with Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
    ) as progress:
        task = progress.add_task(description, total=total)

        def advance(result: BuildResult, units: int) -> None:
            label = result.addon or result.source.name
            if result.status == BuildStatus.FAILED:
                progress.console.print(f"[red]✗[/red] {escape(result.location.folder)}/{escape(label)}")
            progress.update(task, total=units, advance=1, description=f"{description} {escape(label)}")

        yield advance
