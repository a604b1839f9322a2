"""
Toggl Domain Client.

The operations the CLI and the interactive form need, each composed from
the Transport (and the project cache where it applies). Targets the Toggl
Track API v9:

    GET   me/workspaces
    GET   me/projects
    GET   workspaces/{wid}/projects
    GET   workspaces/{wid}/projects/{pid}
    GET   me/time_entries
    GET   me/time_entries/current
    POST  workspaces/{wid}/time_entries
    PUT   workspaces/{wid}/time_entries/{id}
    PATCH workspaces/{wid}/time_entries/{id}/stop

Field updates on the running timer are fetch-then-update: the current timer
is re-read for its id and workspace, then a body naming only the changed
field is sent. The two calls are not atomic; if the timer changes in
between, the update lands on whichever entry was read.
"""

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from toggl_cli.api.cache import EntityCache
from toggl_cli.api.models import Project, TimeEntry, Workspace
from toggl_cli.api.transport import Transport
from toggl_cli.core.concurrency import gather_all, get_semaphore
from toggl_cli.core.config_schema import ApplicationSchema
from toggl_cli.core.exceptions import (
    MalformedResponseError,
    NoRunningTimerError,
    NoWorkspaceAvailableError,
)
from toggl_cli.core.logging import get_logger
from toggl_cli.core.utils import to_api_timestamp, utc_now

logger = get_logger(__name__)

RUNNING_DURATION = -1

M = TypeVar("M", bound=BaseModel)


def _parse_one(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(str(data)) from e


def _parse_many(model: type[M], data: Any) -> list[M]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise MalformedResponseError(str(data))
    return [_parse_one(model, item) for item in data]


class TogglClient:
    """
    Domain operations against the Toggl API.

    Owns its Transport and project cache; nothing is shared between
    instances. Use as an async context manager so the connection pool is
    closed when done.

    Usage:
        async with TogglClient.from_config(token, app_config.application) as client:
            timer = await client.get_current_timer()
    """

    def __init__(self, transport: Transport, workspace_fetch_limit: int = 4) -> None:
        self.transport = transport
        self.workspace_fetch_limit = workspace_fetch_limit
        self.projects: EntityCache[int, Project] = EntityCache("project")

    @classmethod
    def from_config(cls, token: str, application: ApplicationSchema, **transport_kwargs: Any) -> "TogglClient":
        """Build a client from application.yaml settings."""
        transport = Transport(
            token,
            api=application.api,
            retry=application.retry,
            **transport_kwargs,
        )
        return cls(
            transport,
            workspace_fetch_limit=application.concurrency.semaphores.workspace_fetch,
        )

    async def __aenter__(self) -> "TogglClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    # -------------------------------------------------------------------------
    # Workspaces and projects
    # -------------------------------------------------------------------------

    async def list_workspaces(self) -> list[Workspace]:
        return _parse_many(Workspace, await self.transport.send("GET", "me/workspaces"))

    async def list_projects(self, workspace: Workspace | None = None) -> list[Project]:
        """
        List projects, either all the user can see or those of one workspace.

        Every project returned is also stored in the project cache.
        """
        if workspace is None:
            path = "me/projects"
        else:
            path = f"workspaces/{workspace.id}/projects"
        projects = _parse_many(Project, await self.transport.send("GET", path))
        for project in projects:
            self.projects.put(project.id, project)
        return projects

    async def list_projects_by_workspace(self) -> list[tuple[Workspace, list[Project]]]:
        """
        List every workspace with its projects.

        One request per workspace, run concurrently (bounded by the
        workspace_fetch semaphore) and joined before returning. If any
        workspace fails, the whole call fails with that error.
        """
        workspaces = await self.list_workspaces()
        semaphore = get_semaphore("workspace_fetch", capacity=self.workspace_fetch_limit)

        async def fetch(workspace: Workspace) -> list[Project]:
            async with semaphore:
                return await self.list_projects(workspace)

        results = await gather_all(*(fetch(workspace) for workspace in workspaces))
        return list(zip(workspaces, results))

    async def get_project(self, workspace_id: int, project_id: int | None) -> Project | None:
        """
        Get a project by id, from the cache when possible.

        Returns None for a missing or zero project id without any request.
        """
        if not project_id:
            return None

        async def fetch() -> Project:
            data = await self.transport.send("GET", f"workspaces/{workspace_id}/projects/{project_id}")
            return _parse_one(Project, data)

        return await self.projects.get_or_fetch(project_id, fetch)

    # -------------------------------------------------------------------------
    # Time entries
    # -------------------------------------------------------------------------

    async def get_current_timer(self) -> TimeEntry | None:
        """The running timer, or None when nothing is running."""
        data = await self.transport.send("GET", "me/time_entries/current")
        if data is None:
            return None
        return _parse_one(TimeEntry, data)

    async def get_recent_timers(self) -> list[TimeEntry]:
        """Recent time entries, newest first."""
        timers = _parse_many(TimeEntry, await self.transport.send("GET", "me/time_entries"))
        return sorted(timers, key=lambda timer: timer.start, reverse=True)

    async def start_timer(
        self,
        project: Project | None = None,
        description: str | None = None,
        tags: Iterable[str] = (),
    ) -> TimeEntry:
        """
        Start a new running timer.

        The workspace is the project's, or the account's first workspace.
        The server rejects a second running timer itself; no pre-check here.

        Raises:
            NoWorkspaceAvailableError: No project given and the account has no workspace
        """
        if project is not None:
            workspace_id = project.workspace_id
        else:
            workspaces = await self.list_workspaces()
            if not workspaces:
                raise NoWorkspaceAvailableError()
            workspace_id = workspaces[0].id

        body = {
            "workspace_id": workspace_id,
            "project_id": project.id if project is not None else None,
            "start": to_api_timestamp(utc_now()),
            "duration": RUNNING_DURATION,
            "description": description or "",
            "tags": list(tags),
            "created_with": self.transport.user_agent,
        }
        data = await self.transport.send("POST", f"workspaces/{workspace_id}/time_entries", body)
        timer = _parse_one(TimeEntry, data)
        logger.info("Timer started", extra={"timer_id": timer.id, "workspace_id": workspace_id})
        return timer

    async def stop_timer(self) -> bool:
        """Stop the running timer. Returns False (and sends nothing) when idle."""
        timer = await self.get_current_timer()
        if timer is None:
            return False
        await self.transport.send(
            "PATCH",
            f"workspaces/{timer.workspace_id}/time_entries/{timer.id}/stop",
            {},
        )
        logger.info("Timer stopped", extra={"timer_id": timer.id})
        return True

    async def set_current_timer_project(self, project: Project | None) -> None:
        await self._update_current_timer({"project_id": project.id if project is not None else None})

    async def set_current_timer_description(self, description: str | None) -> None:
        await self._update_current_timer({"description": description or ""})

    async def set_current_timer_tags(self, tags: Sequence[str]) -> None:
        await self._update_current_timer({"tags": list(tags)})

    async def _update_current_timer(self, fields: dict[str, Any]) -> None:
        timer = await self.get_current_timer()
        if timer is None:
            raise NoRunningTimerError()
        await self.transport.send(
            "PUT",
            f"workspaces/{timer.workspace_id}/time_entries/{timer.id}",
            fields,
        )
        logger.info("Timer updated", extra={"timer_id": timer.id, "fields": sorted(fields)})
