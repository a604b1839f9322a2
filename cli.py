#!/usr/bin/env python3
"""
Toggl CLI.

Command-line client for Toggl Track timers.
Built with Typer for type-safe commands and Rich for output.

Usage:
    toggl --help                              # Show help

    toggl projects                            # List workspaces and projects
    toggl recent                              # Show recent timers
    toggl current                             # Show the running timer
    toggl start -p Website -d "Fix header"    # Start a timer
    toggl set -t dev -t ui                    # Change tags of the running timer
    toggl set -t "~"                          # Clear tags of the running timer
    toggl set -i                              # Edit the running timer interactively
    toggl stop                                # Stop the running timer

Options:
    --config, -c      .env file holding TOGGL_API_TOKEN (default: config/.env)
    --verbose, -v     Enable verbose output (INFO level logging)
    --debug           Enable debug mode (DEBUG level logging)
    --help            Show help message
"""

import structlog
import typer

from toggl_cli.cli.commands import current, projects, recent, set_timer, start, stop
from toggl_cli.cli.runner import CliState
from toggl_cli.core.config import validate_project_root
from toggl_cli.core.logging import get_logger, setup_logging

app = typer.Typer(
    name="toggl",
    help="Toggl CLI - List projects, inspect, start, edit and stop timers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command()(projects)
app.command()(recent)
app.command()(current)
app.command("set")(set_timer)
app.command()(start)
app.command()(stop)


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the .env file holding TOGGL_API_TOKEN.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Toggl CLI.

    List projects, inspect recent and running timers, start, edit and stop
    timers. The API token is read from TOGGL_API_TOKEN or config/.env.
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")

    state = ctx.ensure_object(CliState)
    if config is not None:
        state.env_file = config

    get_logger(__name__).debug(
        "CLI invoked",
        extra={"command": ctx.invoked_subcommand, "log_level": log_level},
    )


if __name__ == "__main__":
    app()
