"""Project context decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click
from rich.markup import escape

from ..utils.output import console
from ...api.exceptions import ConfigError
from ...core.project_manager import ProjectManager
from ...constants import PROJECT_CONFIG_FILE, EMOJI_ERROR


def project_required(func: Callable) -> Callable:
    """Decorator that ensures a command runs inside a loadable project

    Finds the project root, loads ``addonpack.yaml`` and stores the
    descriptor on the CLI context as ``ctx.obj.project``. Exits with 1
    when either step fails.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()

        resolver = ctx.obj.path_resolver
        if resolver is None:
            console.print(
                f"{EMOJI_ERROR} Not in an addonpack project directory.\n"
                f"No {PROJECT_CONFIG_FILE} found in this directory or its parents."
            )
            ctx.exit(1)

        try:
            ctx.obj.project = ProjectManager(resolver).load_project()
        except ConfigError as e:
            console.print(f"{EMOJI_ERROR} Failed to load project: {escape(str(e))}")
            ctx.exit(1)

        return func(*args, **kwargs)

    return wrapper
