"""CLI decorators"""

from .project import project_required

__all__ = [
    'project_required',
]
