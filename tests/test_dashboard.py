"""Tests for the dashboard page and widget endpoints."""

from __future__ import annotations

import json
import re

import httpx
import pytest
import requests

from morningboard.dashboard.app import greeting
from tests.conftest import make_response


def _initial_state(page: str) -> dict:
    match = re.search(r"const INITIAL = (.*?);\n", page)
    assert match, "initial state not embedded"
    return json.loads(match.group(1))


@pytest.mark.asyncio
class TestDashboardPage:
    async def test_page_embeds_preloaded_state(self, client: httpx.AsyncClient, fake_session) -> None:
        weather = {"tool": "weather", "data": {"location": "Mountain View", "current_temp": 61}}
        fake_session.request.return_value = make_response(200, weather)

        r = await client.get("/")

        assert r.status_code == 200
        assert "Kevin" in r.text
        state = _initial_state(r.text)
        assert state["weather"] == weather
        assert all(err is None for err in state["errors"].values())

    async def test_page_renders_when_agent_is_down(self, client: httpx.AsyncClient, fake_session) -> None:
        fake_session.request.side_effect = requests.ConnectionError("refused")

        r = await client.get("/")

        assert r.status_code == 200
        state = _initial_state(r.text)
        assert state["weather"] is None
        assert all(state["errors"].values())

    async def test_script_content_is_escaped(self, client: httpx.AsyncClient, fake_session) -> None:
        payload = {"tool": "todos", "data": {"items": [{"text": "</script><b>x</b>"}]}}
        fake_session.request.return_value = make_response(200, payload)

        r = await client.get("/")

        assert "</script><b>" not in r.text
        assert _initial_state(r.text)["todos"] == payload


@pytest.mark.asyncio
class TestWidgets:
    async def test_widget_live(self, client: httpx.AsyncClient, fake_session) -> None:
        todos = {"tool": "todos", "data": {"items": [], "total_pending": 0}}
        fake_session.request.return_value = make_response(200, todos)

        r = await client.get("/api/widgets/todos")

        assert r.status_code == 200
        assert r.json() == todos

    async def test_widget_falls_back_to_fixture(self, client: httpx.AsyncClient, fake_session) -> None:
        fake_session.request.return_value = make_response(502, reason="Bad Gateway")

        r = await client.get("/api/widgets/weather")

        assert r.status_code == 200
        data = r.json()
        assert data["tool"] == "weather"
        assert data["data"]["location"] == "Mountain View"

    async def test_unknown_widget(self, client: httpx.AsyncClient) -> None:
        r = await client.get("/api/widgets/horoscope")
        assert r.status_code == 404

    async def test_commute(self, client: httpx.AsyncClient, fake_session) -> None:
        r = await client.get("/api/widgets/commute", params={"direction": "to_work"})

        assert r.status_code == 200
        assert r.json()["direction"] == "to_work"
        shuttle_call = fake_session.request.call_args_list[-1]
        assert shuttle_call.kwargs["params"]["origin"] == "mountain_view_caltrain"

    async def test_commute_failure(self, client: httpx.AsyncClient, fake_session) -> None:
        fake_session.request.side_effect = requests.ConnectionError("refused")
        r = await client.get("/api/widgets/commute")
        assert r.status_code == 502
        assert r.json() == {"error": "Failed to load commute data"}

    async def test_commute_bad_direction(self, client: httpx.AsyncClient, fake_session) -> None:
        r = await client.get("/api/widgets/commute", params={"direction": "sideways"})
        assert r.status_code == 400
        fake_session.request.assert_not_called()

    async def test_briefing_fallback(self, client: httpx.AsyncClient, fake_session) -> None:
        fake_session.request.side_effect = requests.ConnectionError("refused")
        r = await client.get("/api/briefing")
        assert r.status_code == 200
        assert r.json()["briefing"].startswith("Good morning")


@pytest.mark.parametrize("hour,expected", [
    (0, "Good morning"), (11, "Good morning"), (12, "Good afternoon"),
    (16, "Good afternoon"), (17, "Good evening"), (23, "Good evening"),
])
def test_greeting(hour: int, expected: str) -> None:
    assert greeting(hour) == expected
