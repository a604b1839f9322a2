#!/usr/bin/env python3
"""
Toggl TUI.

Interactive form for editing the running Toggl timer. Same form as
`toggl set --interactive`.

Usage:
    toggl-tui
    toggl-tui --config path/to/.env
"""

import click

from toggl_cli.cli.runner import CliState
from toggl_cli.core.config import validate_project_root
from toggl_cli.tui.app import run_form


@click.command()
@click.option(
    "--config", "-c",
    default=None,
    help="Path to the .env file holding TOGGL_API_TOKEN.",
)
def main(config: str | None) -> None:
    """Edit the running Toggl timer interactively."""
    validate_project_root()
    state = CliState(env_file=config)
    run_form(lambda: state.client_factory(state))


if __name__ == "__main__":
    main()
