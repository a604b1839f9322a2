"""
Interactive Timer Form.

Textual form for editing the running timer: a summary of the timer on top,
then three panes (project, description, tags) pre-selected with the
timer's current values. Apply writes the choices and redisplays the timer.

Usage:
    from toggl_cli.tui.app import run_form

    run_form(lambda: TogglClient.from_config(token, application))
"""

from collections.abc import Callable

import httpx
import structlog
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Label, OptionList, SelectionList, Static

from toggl_cli.api.client import TogglClient
from toggl_cli.cli.formatting import NO_PROJECT, format_current
from toggl_cli.cli.runner import error_message
from toggl_cli.core.exceptions import ApplicationError
from toggl_cli.core.logging import get_logger, setup_logging
from toggl_cli.services.timer import TimerService, TimerView
from toggl_cli.tui.form import FormData, apply_selection, choose, load_form_data

logger = get_logger(__name__)

NO_DESCRIPTION = "(none)"


class TimerSummary(Static):
    """One-line view of the running timer."""

    def show(self, view: TimerView | None) -> None:
        self.update(format_current(view))


class TimerFormApp(App):
    """Form for setting project, description and tags of the running timer."""

    TITLE = "Toggl Timer"
    SUB_TITLE = "Edit the running timer"

    CSS = """
    Screen {
        layout: vertical;
    }

    TimerSummary {
        height: 3;
        border: solid $primary;
        padding: 0 1;
    }

    #inputs {
        height: 1fr;
    }

    #project-box {
        width: 25%;
    }

    #description-box {
        width: 45%;
    }

    #tags-box {
        width: 1fr;
    }

    .pane-title {
        text-style: bold;
        padding: 0 1;
    }

    OptionList, SelectionList {
        height: 1fr;
        border: solid $primary;
    }

    #actions {
        height: 3;
        dock: bottom;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "apply", "Apply"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, client_factory: Callable[[], TogglClient]) -> None:
        super().__init__()
        self._client_factory = client_factory
        self._client: TogglClient | None = None
        self._service: TimerService | None = None
        self._data: FormData | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield TimerSummary("Loading…", id="timer-summary")
        with Horizontal(id="inputs"):
            with Vertical(id="project-box"):
                yield Label("Project", classes="pane-title")
                yield OptionList(id="project-list")
            with Vertical(id="description-box"):
                yield Label("Description", classes="pane-title")
                yield OptionList(id="description-list")
            with Vertical(id="tags-box"):
                yield Label("Tags", classes="pane-title")
                yield SelectionList[str](id="tags-list")
        with Horizontal(id="actions"):
            yield Button("Apply", id="apply", variant="primary", disabled=True)
            yield Button("Exit", id="exit")
        yield Footer()

    def on_mount(self) -> None:
        try:
            self._client = self._client_factory()
        except ApplicationError as e:
            self.query_one(TimerSummary).update(error_message(e))
            return
        self._service = TimerService(self._client)
        self.load_form()

    async def on_unmount(self) -> None:
        if self._client is not None:
            await self._client.close()

    @work(exclusive=True, group="api")
    async def load_form(self) -> None:
        try:
            data = await load_form_data(self._service)
        except (ApplicationError, httpx.HTTPError) as e:
            logger.warning("Form load failed", extra={"error": str(e)})
            self.query_one(TimerSummary).update(error_message(e))
            return
        self._data = data
        self._populate(data)

    def _populate(self, data: FormData) -> None:
        self.query_one(TimerSummary).show(data.current)

        project_list = self.query_one("#project-list", OptionList)
        project_list.clear_options()
        project_list.add_options([NO_PROJECT, *(project.name for project in data.projects)])
        project_index = data.project_index
        project_list.highlighted = 0 if project_index is None else project_index + 1

        description_list = self.query_one("#description-list", OptionList)
        description_list.clear_options()
        description_list.add_options([NO_DESCRIPTION, *data.descriptions])
        description_index = data.description_index
        description_list.highlighted = 0 if description_index is None else description_index + 1

        tags_list = self.query_one("#tags-list", SelectionList)
        tags_list.clear_options()
        tags_list.add_options([(tag, tag, tag in data.selected_tags) for tag in data.tags])

        self.query_one("#apply", Button).disabled = data.current is None
        self.query_one("#project-list", OptionList).focus()

    @on(Button.Pressed, "#apply")
    def on_apply_pressed(self) -> None:
        self.action_apply()

    @on(Button.Pressed, "#exit")
    def on_exit_pressed(self) -> None:
        self.exit()

    def action_apply(self) -> None:
        if self._data is None or self._data.current is None:
            return
        self.apply_form()

    @work(exclusive=True, group="api")
    async def apply_form(self) -> None:
        data = self._data
        project = choose(data.projects, self.query_one("#project-list", OptionList).highlighted)
        description = choose(data.descriptions, self.query_one("#description-list", OptionList).highlighted)
        tags = list(self.query_one("#tags-list", SelectionList).selected)

        try:
            current = await apply_selection(self._service, project, description, tags)
        except (ApplicationError, httpx.HTTPError) as e:
            logger.warning("Form apply failed", extra={"error": str(e)})
            self.notify(error_message(e), severity="error")
            return

        data.current = current
        self.query_one(TimerSummary).show(current)
        self.query_one("#project-list", OptionList).focus()
        self.notify("Timer updated")


def run_form(client_factory: Callable[[], TogglClient]) -> None:
    """Run the form until the user exits. Console logging is off while it owns the terminal."""
    setup_logging(enable_console=False)
    structlog.contextvars.bind_contextvars(source="tui")
    TimerFormApp(client_factory).run()
