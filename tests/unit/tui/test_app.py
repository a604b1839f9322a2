"""Pilot tests for the interactive timer form."""

from collections.abc import Callable

import pytest
from textual.widgets import Button, OptionList, SelectionList

from tests.fakes import FakeTogglApi, project_payload, request_json, timer_payload
from toggl_cli.api.client import TogglClient
from toggl_cli.core.exceptions import ConfigurationError
from toggl_cli.tui.app import TimerFormApp


@pytest.fixture
def populated(api: FakeTogglApi) -> FakeTogglApi:
    api.respond("GET", "me/time_entries/current", json=timer_payload(description="Fix header", tags=["ui"]))
    api.respond(
        "GET",
        "me/time_entries",
        json=[timer_payload(1, description="Review", tags=["dev"], stop="2024-03-01T09:00:00+00:00", duration=60)],
    )
    api.respond("GET", "me/projects", json=[project_payload(10, 1, "Website"), project_payload(11, 1, "Infra")])
    api.respond("GET", "workspaces/1/projects/10", json=project_payload())
    api.respond("PUT", "workspaces/1/time_entries/100", json=timer_payload())
    return api


class TestTimerFormApp:
    """Tests for TimerFormApp."""

    @pytest.mark.asyncio
    async def test_panes_preselect_current_values(
        self, make_client: Callable[..., TogglClient], populated: FakeTogglApi
    ) -> None:
        app = TimerFormApp(make_client)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.query_one("#project-list", OptionList).highlighted == 1
            assert app.query_one("#description-list", OptionList).highlighted == 1
            assert app.query_one("#tags-list", SelectionList).selected == ["ui"]
            assert app.query_one("#apply", Button).disabled is False

    @pytest.mark.asyncio
    async def test_apply_writes_selection(
        self, make_client: Callable[..., TogglClient], populated: FakeTogglApi
    ) -> None:
        app = TimerFormApp(make_client)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()

            app.query_one("#project-list", OptionList).highlighted = 2
            app.action_apply()
            await app.workers.wait_for_complete()
            await pilot.pause()

        assert [request_json(r) for r in populated.calls("PUT")] == [
            {"project_id": 11},
            {"description": "Fix header"},
            {"tags": ["ui"]},
        ]

    @pytest.mark.asyncio
    async def test_apply_disabled_when_idle(
        self, make_client: Callable[..., TogglClient], api: FakeTogglApi
    ) -> None:
        api.respond("GET", "me/time_entries/current", json=None)
        api.respond("GET", "me/time_entries", json=[])
        api.respond("GET", "me/projects", json=[])

        app = TimerFormApp(make_client)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.query_one("#apply", Button).disabled is True
            app.action_apply()
            await pilot.pause()

        assert api.mutating_calls == []

    @pytest.mark.asyncio
    async def test_configuration_error_keeps_form_open(self) -> None:
        def no_token() -> TogglClient:
            raise ConfigurationError("TOGGL_API_TOKEN is not set")

        app = TimerFormApp(no_token)
        async with app.run_test() as pilot:
            await pilot.pause()

            assert app.query_one("#apply", Button).disabled is True
            assert app._service is None
