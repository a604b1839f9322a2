"""
Console Formatting.

Plain-text renderings of timers and projects. Returned as strings so the
commands decide how to print them (always without Rich markup, because
tag lists use square brackets).
"""

from collections.abc import Iterable
from datetime import datetime, tzinfo

from toggl_cli.api.models import Project, Workspace
from toggl_cli.core.utils import format_hours_minutes, utc_now
from toggl_cli.services.timer import TimerView

DATETIME_FORMAT = "%Y-%m-%d %H:%M"
TIME_FORMAT = "%H:%M"

NO_PROJECT = "(none)"
RUNNING_ICON = "▶️"
STOPPED_ICON = "⏹️"


def format_timer(view: TimerView, now: datetime | None = None, tz: tzinfo | None = None) -> str:
    """
    One-line summary of a timer.

    Running:  2024-03-01 09:15-now   (01:05) - Website - Fix header [dev, ui]
    Stopped:  2024-03-01 09:15-10:20 (01:05) - Website - Fix header [dev, ui]

    Times are shown in tz, or local time when tz is None.
    """
    timer = view.timer
    now = now or utc_now()
    start = timer.start.astimezone(tz)
    elapsed = format_hours_minutes(timer.elapsed(now))

    if timer.is_running or timer.stop is None:
        time_range = f"{start.strftime(DATETIME_FORMAT)}-now   ({elapsed})"
    else:
        stop = timer.stop.astimezone(tz)
        time_range = f"{start.strftime(DATETIME_FORMAT)}-{stop.strftime(TIME_FORMAT)} ({elapsed})"

    project = view.project.name if view.project is not None else NO_PROJECT
    return f"{time_range} - {project} - {timer.description} [{', '.join(timer.tags)}]"


def format_current(view: TimerView | None, now: datetime | None = None, tz: tzinfo | None = None) -> str:
    if view is None:
        return f"{STOPPED_ICON} No timer running"
    return f"{RUNNING_ICON} {format_timer(view, now, tz)}"


def format_workspace_projects(listing: Iterable[tuple[Workspace, list[Project]]]) -> list[str]:
    """Bulleted workspace / project tree, one entry per line."""
    lines = []
    for workspace, projects in listing:
        lines.append(f"* {workspace.name} ({workspace.id})")
        lines.extend(f"  * {project.name} ({project.id})" for project in projects)
    return lines
