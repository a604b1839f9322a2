"""
Timer Form Logic.

Everything the interactive form does that is not drawing: loading its
three lists concurrently, and writing the user's choices back.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from toggl_cli.api.models import Project
from toggl_cli.core.concurrency import gather_all
from toggl_cli.services.timer import TimerService, TimerView

T = TypeVar("T")


@dataclass
class FormData:
    """Current timer plus the choices offered in each pane."""

    current: TimerView | None
    projects: list[Project] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    @property
    def project_index(self) -> int | None:
        """Position of the current timer's project in projects, if present."""
        if self.current is None or self.current.project is None:
            return None
        try:
            return self.projects.index(self.current.project)
        except ValueError:
            return None

    @property
    def description_index(self) -> int | None:
        if self.current is None or not self.current.timer.description:
            return None
        return self.descriptions.index(self.current.timer.description)

    @property
    def selected_tags(self) -> set[str]:
        if self.current is None:
            return set()
        return set(self.current.timer.tags)


async def load_form_data(service: TimerService) -> FormData:
    """
    Read the current timer, recent timers and projects concurrently.

    Descriptions and tags offered are the distinct, sorted values seen in
    recent timers, plus those of the current timer.
    """
    current, recent, projects = await gather_all(
        service.describe_current_timer(),
        service.client.get_recent_timers(),
        service.client.list_projects(),
    )

    timers = list(recent)
    if current is not None:
        timers.append(current.timer)

    descriptions = sorted({timer.description for timer in timers if timer.description})
    tags = sorted({tag for timer in timers for tag in timer.tags})
    return FormData(current=current, projects=projects, descriptions=descriptions, tags=tags)


def choose(options: Sequence[T], index: int | None) -> T | None:
    """
    Map a list position to a choice, where position 0 is the "none" entry.

    Panes show a leading "(none)" row, so row n is options[n - 1].
    """
    if index is None or index <= 0 or index > len(options):
        return None
    return options[index - 1]


async def apply_selection(
    service: TimerService,
    project: Project | None,
    description: str | None,
    tags: Sequence[str],
) -> TimerView | None:
    """Write all three fields to the running timer, then re-read it."""
    await service.client.set_current_timer_project(project)
    await service.client.set_current_timer_description(description)
    await service.client.set_current_timer_tags(tags)
    return await service.describe_current_timer()
