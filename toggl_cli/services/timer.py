"""
Timer Service.

Operations the command line works in terms of: a project given by name or
id, tag lists where a lone "~" means "clear", and fields that are only
changed when the user supplied them.

Usage:
    from toggl_cli.services.timer import TimerService

    service = TimerService(client)
    await service.set_current_timer(project="website", tags=["~"])
"""

from collections.abc import Sequence
from dataclasses import dataclass

from toggl_cli.api.client import TogglClient
from toggl_cli.api.models import Project, TimeEntry
from toggl_cli.core.exceptions import NotFoundError
from toggl_cli.core.logging import get_logger

logger = get_logger(__name__)

CLEAR_TAGS = "~"
"""A tag list consisting of only this value clears the timer's tags."""


@dataclass(frozen=True)
class TimerView:
    """A timer paired with its resolved project, ready for display."""

    timer: TimeEntry
    project: Project | None


def resolve_tags(tags: Sequence[str]) -> list[str] | None:
    """
    Turn command-line tags into the tags to send.

    Returns:
        None when no tags were given (leave unchanged), [] for the clear
        sentinel, otherwise the tags as given.
    """
    if not tags:
        return None
    if len(tags) == 1 and tags[0] == CLEAR_TAGS:
        return []
    return list(tags)


class TimerService:
    """
    Timer operations at the command-line boundary.

    Wraps a TogglClient that the caller owns and closes.
    """

    def __init__(self, client: TogglClient) -> None:
        self.client = client

    async def get_matching_project(self, name_or_id: str) -> Project:
        """
        Find a project whose id or name (case-insensitive) equals the input.

        Raises:
            NotFoundError: No project matches
        """
        wanted = name_or_id.strip()
        for project in await self.client.list_projects():
            if str(project.id) == wanted or project.name.casefold() == wanted.casefold():
                return project
        raise NotFoundError(f"No project matching '{name_or_id}' was found", query=name_or_id)

    async def set_current_timer(
        self,
        project: str | None = None,
        description: str | None = None,
        tags: Sequence[str] = (),
    ) -> None:
        """
        Change the supplied fields of the running timer.

        An empty project or description and an empty tag list leave the
        field unchanged. Each field is its own fetch-then-update.
        """
        if project:
            await self.client.set_current_timer_project(await self.get_matching_project(project))
        if description:
            await self.client.set_current_timer_description(description)
        resolved_tags = resolve_tags(tags)
        if resolved_tags is not None:
            await self.client.set_current_timer_tags(resolved_tags)

    async def start_timer(
        self,
        project: str | None = None,
        description: str | None = None,
        tags: Sequence[str] = (),
    ) -> TimeEntry:
        """Start a timer with the supplied fields; a project is matched by name or id."""
        matched = await self.get_matching_project(project) if project else None
        return await self.client.start_timer(matched, description, resolve_tags(tags) or [])

    async def describe_timer(self, timer: TimeEntry) -> TimerView:
        project = await self.client.get_project(timer.workspace_id, timer.project_id)
        return TimerView(timer=timer, project=project)

    async def describe_current_timer(self) -> TimerView | None:
        timer = await self.client.get_current_timer()
        if timer is None:
            return None
        return await self.describe_timer(timer)

    async def describe_recent_timers(self) -> list[TimerView]:
        """Recent timers with their projects; repeated projects come from the cache."""
        return [await self.describe_timer(timer) for timer in await self.client.get_recent_timers()]
