"""
Command Runner.

The single error boundary of the command line. Every command body runs
through run_command(), which builds the client from configuration, runs
the async body, and turns ApplicationError or httpx errors into one line
on stderr and exit code 1.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
import typer
from rich.console import Console

from toggl_cli.api.client import TogglClient
from toggl_cli.core.config import get_app_config, get_settings
from toggl_cli.core.exceptions import ApplicationError
from toggl_cli.core.logging import get_logger
from toggl_cli.services.timer import TimerService

logger = get_logger(__name__)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

GENERAL_ERROR = 1


def default_client_factory(state: "CliState") -> TogglClient:
    """Build a client from config/settings/application.yaml and the API token."""
    settings = get_settings(state.env_file)
    return TogglClient.from_config(settings.toggl_api_token, get_app_config().application)


@dataclass
class CliState:
    """Options shared by all commands, stored on the Typer context."""

    env_file: str | None = None
    client_factory: Callable[["CliState"], TogglClient] = default_client_factory


def echo(line: str) -> None:
    """Print a line of command output verbatim (no Rich markup)."""
    console.print(line, markup=False, soft_wrap=True)


def error_message(error: Exception) -> str:
    """Collapse an error into a single printable line."""
    if isinstance(error, httpx.HTTPError):
        text = f"{type(error).__name__}: {error}"
    else:
        text = str(error)
    return " ".join(text.split())


def run_command(ctx: typer.Context, body: Callable[[TimerService], Awaitable[None]]) -> None:
    """
    Run an async command body with a configured TimerService.

    Raises:
        typer.Exit: With code 1 after printing the error, on any handled failure
    """
    state: CliState = ctx.ensure_object(CliState)

    async def _run() -> None:
        async with state.client_factory(state) as client:
            await body(TimerService(client))

    try:
        asyncio.run(_run())
    except (ApplicationError, httpx.HTTPError) as e:
        logger.debug("Command failed", extra={"command": ctx.info_name, "error": str(e)})
        err_console.print(error_message(e), markup=False, soft_wrap=True)
        raise typer.Exit(GENERAL_ERROR) from e
