"""Toggl Track API v9: transport, entity cache, models and domain client."""

from toggl_cli.api.client import TogglClient
from toggl_cli.api.models import Project, TimeEntry, Workspace

__all__ = [
    "Project",
    "TimeEntry",
    "TogglClient",
    "Workspace",
]
