"""
CLI Commands.

Organized by domain/feature area.
"""

from toggl_cli.cli.commands.projects import projects
from toggl_cli.cli.commands.timers import current, recent, set_timer, start, stop

__all__ = [
    "current",
    "projects",
    "recent",
    "set_timer",
    "start",
    "stop",
]
