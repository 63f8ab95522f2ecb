# addonpack/cli/main.py
"""Main CLI entry point for addonpack"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler
from rich.markup import escape

from ..constants import APP_NAME, LOG_FORMAT
from ..core import PathResolver
from ..api.exceptions import AddonPackError, ProjectNotFoundError
from .utils.output import console

from .commands import build, clean, locate


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )


class Context:
    """CLI context object with lazy project discovery

    The project root is only searched for when a command asks for it,
    so commands that do not need a project never fail on discovery.
    """

    def __init__(self):
        self._project_root: Optional[Path] = None
        self._path_resolver: Optional[PathResolver] = None
        self._project_checked: bool = False
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self.project = None

    @property
    def project_root(self) -> Optional[Path]:
        """Project root, or None if not in a project"""
        if not self._project_checked:
            self._check_project()
        return self._project_root

    @property
    def path_resolver(self) -> Optional[PathResolver]:
        if not self._project_checked:
            self._check_project()
        return self._path_resolver

    def _check_project(self) -> None:
        self._project_checked = True

        try:
            project_root = PathResolver.find_project_root()
        except ProjectNotFoundError as e:
            if self.debug:
                console.print(f"[dim]{e}[/dim]")
            return

        self._project_root = project_root
        self._path_resolver = PathResolver(project_root)
        if self.debug:
            console.print(f"[dim]Project root: {project_root}[/dim]")


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """addonpack - Pack, sign and release game-content addons

    Addons live in addons/, optionals/, compats/ and any custom folder
    declared in addonpack.yaml. Releases are laid out under
    releases/{version}/@{mod_name}/ and signed with the project key.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context()
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.obj.quiet = quiet


# Register commands
cli.add_command(build.build)
cli.add_command(clean.clean)
cli.add_command(locate.locate)


def main():
    """Main entry point for the CLI application

    Keyboard interrupts exit with 130, any other escaped error with 1.
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except AddonPackError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
