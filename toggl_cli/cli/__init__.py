"""
CLI Client Module.

Command-line client for Toggl Track built with Typer. Commands are a thin
presentation layer over toggl_cli.services.timer.TimerService; all errors
are turned into output in toggl_cli.cli.runner.

Usage:
    toggl --help
    toggl current
    toggl start -p Website -d "Fix header"
    toggl set -i
"""
