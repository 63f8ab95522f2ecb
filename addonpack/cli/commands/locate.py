"""Locate command implementation"""

import click

from ..utils.output import console, print_error
from ...api.exceptions import InvalidNameError
from ...models import Addon


@click.command()
@click.argument('name')
@click.pass_context
def locate(ctx, name):
    """Print the source folder of an addon

    Searches addons/, optionals/ and compats/ in that order.
    """
    resolver = ctx.obj.path_resolver
    if resolver is None:
        print_error("Not in an addonpack project directory")
        ctx.exit(1)

    try:
        addon = Addon.locate(name, resolver.project_root)
    except InvalidNameError as e:
        print_error("Invalid addon name", e)
        ctx.exit(1)

    if addon is None:
        print_error(f"Addon not found: {name}")
        ctx.exit(1)

    console.print(addon.source().as_posix())
