"""Build command implementation"""

from typing import List, Optional, Union

import click

from ..decorators import project_required
from ..utils.output import (
    console,
    format_pack_report,
    format_release_result,
    print_error,
)
from ..utils.progress import unit_progress
from ...api import build_release, clean_release, pack_addons, prepare_release
from ...api.exceptions import AddonPackError
from ...constants import ALL_OPTIONALS, EMOJI_PACKAGE, MSG_FINISHED


def split_names(value: Optional[str], allow_all: bool = False) -> Optional[Union[List[str], str]]:
    """Parse a comma separated addon list

    With ``allow_all`` the literal ``all`` is passed through unchanged.
    """
    if not value:
        return None
    if allow_all and value.strip() == ALL_OPTIONALS:
        return ALL_OPTIONALS
    return [name.strip() for name in value.split(",") if name.strip()]


@click.command()
@click.option(
    '--release', '-r', 'make_release',
    is_flag=True,
    help='Sign the packed addons and lay out a release'
)
@click.option(
    '--version',
    help='Release version (default: version from addonpack.yaml)'
)
@click.option(
    '--jobs', '-j',
    type=click.IntRange(min=0),
    default=None,
    help='Worker threads (default: ADDONPACK_JOBS or CPU count)'
)
@click.option(
    '--opts', '-o',
    help='Optionals to pack, comma separated, or "all"'
)
@click.option(
    '--skip', '-s',
    help='Addons to leave out, comma separated'
)
@click.option(
    '--force', '-f',
    is_flag=True,
    help='Replace an existing release of the same version'
)
@click.pass_context
@project_required
def build(ctx, make_release, version, jobs, opts, skip, force):
    """Pack addons and optionally build a signed release

    Examples:
        addonpack build
        addonpack build --opts all --skip debug_tools
        addonpack build --release --version 1.2.0 -j 4
    """
    cli_ctx = ctx.obj
    project = cli_ctx.project.with_overrides(
        optionals=split_names(opts, allow_all=True),
        skip=split_names(skip),
    )
    project_root = cli_ctx.project_root
    show_progress = not cli_ctx.quiet

    try:
        with unit_progress(f"{EMOJI_PACKAGE} Packing", console=console, enabled=show_progress) as progress:
            report = pack_addons(project, project_root, jobs=jobs, progress=progress)
    except AddonPackError as e:
        print_error("Packing failed", e)
        ctx.exit(1)

    format_pack_report(report)
    if not report.is_success:
        ctx.exit(1)

    if not make_release:
        return

    try:
        context = prepare_release(project, version, project_root)
    except AddonPackError as e:
        print_error("Cannot prepare release", e)
        ctx.exit(1)

    if context.release_root.exists():
        if not force:
            print_error(f"Release already exists: {context.release_root} (use --force to replace it)")
            ctx.exit(1)
        clean_release(project_root, context.version, context.mod_name)

    try:
        with unit_progress("Signing", console=console, enabled=show_progress) as progress:
            result = build_release(context, jobs=jobs, progress=progress)
    except AddonPackError as e:
        print_error("Release failed", e)
        ctx.exit(1)

    format_release_result(result)
    if not result.is_success:
        ctx.exit(1)

    console.print(MSG_FINISHED.format(name=project.name, version=context.version))
