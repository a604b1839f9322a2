"""
Toggl Entities.

Pydantic models for the Toggl Track API v9 payloads this client reads.
Unknown payload fields are ignored; the v9 short aliases (wid, pid) are
accepted alongside the long names.
"""

from datetime import datetime, timedelta

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Workspace(BaseModel):
    """A top-level grouping for projects and time entries."""

    id: int
    name: str

    model_config = ConfigDict(frozen=True, extra="ignore")


class Project(BaseModel):
    """A named bucket within a workspace. Two projects are equal when their ids are."""

    id: int
    workspace_id: int = Field(validation_alias=AliasChoices("workspace_id", "wid"))
    name: str

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Project):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name


class TimeEntry(BaseModel):
    """A recorded or currently running interval of tracked time."""

    id: int
    workspace_id: int = Field(validation_alias=AliasChoices("workspace_id", "wid"))
    project_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("project_id", "pid"),
    )
    start: datetime
    stop: datetime | None = None
    duration: int = Field(description="Seconds; negative while running")
    description: str = ""
    tags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, value: str | None) -> str:
        return value or ""

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: list[str] | None) -> list[str]:
        return value or []

    @property
    def is_running(self) -> bool:
        return self.stop is None or self.duration < 0

    def elapsed(self, now: datetime) -> timedelta:
        """Time tracked so far (running) or in total (stopped)."""
        if self.is_running or self.stop is None:
            return now - self.start
        return self.stop - self.start
