"""Clean command implementation"""

import click

from ..decorators import project_required
from ..utils.output import console, print_error
from ...api import clean_archives, clean_release
from ...api.exceptions import AddonPackError


@click.command()
@click.option(
    '--force', '-f',
    is_flag=True,
    help='Also remove every release (the project key is kept)'
)
@click.pass_context
@project_required
def clean(ctx, force):
    """Remove packed archives, and releases with --force"""
    cli_ctx = ctx.obj

    try:
        removed = clean_archives(cli_ctx.project, cli_ctx.project_root)
        if force:
            removed.extend(clean_release(cli_ctx.project_root))
    except AddonPackError as e:
        print_error("Clean failed", e)
        ctx.exit(1)

    for path in removed:
        console.print(f"  [dim]removed[/dim] {cli_ctx.path_resolver.make_relative(path)}")
    console.print(f"[green]✓[/green] Removed {len(removed)} item(s)")
