"""
Project Commands.

Listing of workspaces and their projects.
"""

import typer

from toggl_cli.cli.formatting import format_workspace_projects
from toggl_cli.cli.runner import echo, run_command
from toggl_cli.services.timer import TimerService


def projects(ctx: typer.Context) -> None:
    """
    List all available projects, grouped by workspace.

    Examples:
        toggl projects
    """

    async def _projects(service: TimerService) -> None:
        listing = await service.client.list_projects_by_workspace()
        for line in format_workspace_projects(listing):
            echo(line)

    run_command(ctx, _projects)
