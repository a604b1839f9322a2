"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApiSchema(_StrictBase):
    base_url: str
    user_agent: str
    auth_password: str
    timeout_seconds: float = Field(gt=0)


class RetrySchema(_StrictBase):
    backoff_seconds: float = Field(ge=0)
    max_attempts: int = Field(ge=1)
    max_wait_seconds: float = Field(gt=0)


class SemaphoresSchema(_StrictBase):
    workspace_fetch: int = Field(ge=1)


class ConcurrencySchema(_StrictBase):
    semaphores: SemaphoresSchema


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    api: ApiSchema
    retry: RetrySchema
    concurrency: ConcurrencySchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema
