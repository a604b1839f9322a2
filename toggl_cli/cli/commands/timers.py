"""
Timer Commands.

Inspect, start, edit and stop the running timer. Commands that change the
timer finish by showing the current timer, as `current` does.
"""

import typer

from toggl_cli.cli.formatting import format_current, format_timer
from toggl_cli.cli.runner import CliState, echo, run_command
from toggl_cli.services.timer import TimerService


async def _show_current(service: TimerService) -> None:
    echo(format_current(await service.describe_current_timer()))


def recent(ctx: typer.Context) -> None:
    """
    Show details of recent timers, newest first.

    Examples:
        toggl recent
    """

    async def _recent(service: TimerService) -> None:
        for view in await service.describe_recent_timers():
            echo(format_timer(view))

    run_command(ctx, _recent)


def current(ctx: typer.Context) -> None:
    """
    Show details of the current timer.

    Examples:
        toggl current
    """
    run_command(ctx, _show_current)


def set_timer(
    ctx: typer.Context,
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Show an interactive form for filling in the timer.",
    ),
    project: str = typer.Option("", "--project", "-p", help="A project for the timer, either name or ID."),
    description: str = typer.Option("", "--description", "-d", help="A description for the timer."),
    tags: list[str] = typer.Option([], "--tags", "-t", help="Tags for the timer (repeatable; use '~' for none)."),
) -> None:
    """
    Set properties of the currently running timer.

    Only the options given are changed.

    Examples:
        toggl set -p Website -d "Fix header"
        toggl set -t dev -t ui
        toggl set -t "~"
        toggl set -i
    """
    if interactive:
        from toggl_cli.tui.app import run_form

        state = ctx.ensure_object(CliState)
        run_form(lambda: state.client_factory(state))
        return

    async def _set(service: TimerService) -> None:
        await service.set_current_timer(project, description, tags)
        await _show_current(service)

    run_command(ctx, _set)


def start(
    ctx: typer.Context,
    project: str = typer.Option("", "--project", "-p", help="A project for the timer, either name or ID."),
    description: str = typer.Option("", "--description", "-d", help="A description for the timer."),
    tags: list[str] = typer.Option([], "--tags", "-t", help="Tags for the timer (repeatable; use '~' for none)."),
) -> None:
    """
    Start a new timer running.

    Examples:
        toggl start
        toggl start -p Website -d "Fix header" -t dev
    """

    async def _start(service: TimerService) -> None:
        await service.start_timer(project, description, tags)
        await _show_current(service)

    run_command(ctx, _start)


def stop(ctx: typer.Context) -> None:
    """
    Stop the current timer.

    Does nothing if no timer is running.

    Examples:
        toggl stop
    """

    async def _stop(service: TimerService) -> None:
        await service.client.stop_timer()
        await _show_current(service)

    run_command(ctx, _stop)
