from __future__ import annotations

import pytest
import requests

from morningboard.agent.client import AgentAPI, AgentAPIError
from morningboard.agent.sources import (
    FallbackDataSource,
    FixtureDataSource,
    LiveDataSource,
    shuttle_route,
)
from tests.conftest import AGENT_URL, make_response


class TestAgentAPI:
    def test_get_weather(self, agent_api, fake_session) -> None:
        fake_session.request.return_value = make_response(200, {"tool": "weather", "data": {}})

        data = agent_api.get_weather("Mountain View")

        assert data["tool"] == "weather"
        call = fake_session.request.call_args
        assert call.args == ("GET", f"{AGENT_URL}/tools/weather")
        assert call.kwargs["params"] == {"location": "Mountain View", "when": "today"}
        assert call.kwargs["timeout"] == 15

    def test_get_financial_defaults(self, agent_api, fake_session) -> None:
        agent_api.get_financial_data()
        call = fake_session.request.call_args
        assert call.args == ("POST", f"{AGENT_URL}/tools/financial")
        assert call.kwargs["json"] == {"symbols": ["MSFT", "BTC", "ETH", "NVDA"], "data_type": "mixed"}

    def test_get_calendar_without_date_sends_no_params(self, agent_api, fake_session) -> None:
        agent_api.get_calendar()
        assert fake_session.request.call_args.kwargs["params"] is None
        agent_api.get_calendar("2026-10-17")
        assert fake_session.request.call_args.kwargs["params"] == {"date": "2026-10-17"}

    def test_commute_and_shuttle(self, agent_api, fake_session) -> None:
        agent_api.get_commute_options("from_work")
        assert fake_session.request.call_args.kwargs["params"] == {"direction": "from_work"}
        agent_api.get_shuttle_schedule("a", "b")
        assert fake_session.request.call_args.kwargs["params"] == {"origin": "a", "destination": "b"}

    def test_session_endpoints(self, agent_api, fake_session) -> None:
        agent_api.delete_session("abc")
        assert fake_session.request.call_args.args == ("DELETE", f"{AGENT_URL}/sessions/abc")
        agent_api.get_session_info("abc")
        assert fake_session.request.call_args.args == ("GET", f"{AGENT_URL}/sessions/abc")

    def test_send_chat_message_omits_empty_session(self, agent_api, fake_session) -> None:
        agent_api.send_chat_message("hi")
        assert fake_session.request.call_args.kwargs["json"] == {"message": "hi"}
        agent_api.send_chat_message("hi", "S1")
        assert fake_session.request.call_args.kwargs["json"] == {"message": "hi", "session_id": "S1"}

    def test_http_error_raises(self, agent_api, fake_session) -> None:
        fake_session.request.return_value = make_response(503, reason="Service Unavailable")
        with pytest.raises(AgentAPIError) as exc_info:
            agent_api.get_todos()
        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "/tools/todos"
        assert "503 Service Unavailable" in str(exc_info.value)

    def test_http_error_wraps_raise_for_status(self, agent_api, fake_session) -> None:
        resp = make_response(404, reason="Not Found")
        fake_session.request.return_value = resp
        with pytest.raises(AgentAPIError) as exc_info:
            agent_api.get_session_info("gone")
        resp.raise_for_status.assert_called_once_with()
        assert isinstance(exc_info.value.__cause__, requests.HTTPError)
        assert exc_info.value.status_code == 404
        resp.json.assert_not_called()

    def test_transport_error_raises(self, agent_api, fake_session) -> None:
        fake_session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(AgentAPIError) as exc_info:
            agent_api.get_todos()
        assert exc_info.value.status_code is None

    def test_invalid_json_raises(self, agent_api, fake_session) -> None:
        resp = make_response(200)
        resp.json.side_effect = ValueError("Expecting value")
        fake_session.request.return_value = resp
        with pytest.raises(AgentAPIError):
            agent_api.get_todos()

    def test_from_config(self, config, fake_session) -> None:
        api = AgentAPI.from_config(config, session=fake_session)
        assert api.base_url == AGENT_URL
        assert api.timeout == 5.0
        assert api.debug is False

    def test_trailing_slash_stripped(self, fake_session) -> None:
        api = AgentAPI("http://agent.test/", session=fake_session)
        api.get_todos()
        assert fake_session.request.call_args.args[1] == "http://agent.test/tools/todos"


class TestSources:
    def test_fallback_uses_fixture_on_error(self, agent_api, fake_session) -> None:
        fake_session.request.side_effect = requests.ConnectionError("refused")
        source = FallbackDataSource(LiveDataSource(agent_api), FixtureDataSource())

        data = source.weather("Mountain View")

        assert data["tool"] == "weather"
        assert data["data"]["location"] == "Mountain View"
        assert source.todos()["tool"] == "todos"
        assert "briefing" in source.briefing()

    def test_fallback_prefers_live(self, agent_api, fake_session) -> None:
        live = {"tool": "calendar", "data": {"events": [], "total_events": 0}}
        fake_session.request.return_value = make_response(200, live)
        source = FallbackDataSource(LiveDataSource(agent_api), FixtureDataSource())
        assert source.calendar() == live

    def test_live_source_propagates_errors(self, agent_api, fake_session) -> None:
        fake_session.request.return_value = make_response(500, reason="Internal Server Error")
        with pytest.raises(AgentAPIError):
            LiveDataSource(agent_api).financial()

    def test_fixture_financial_filters_symbols(self) -> None:
        data = FixtureDataSource().financial(["nvda", "XYZ"])["data"]
        assert [q["symbol"] for q in data["data"]] == ["NVDA"]
        assert data["total_items"] == 1
        assert "NVDA" in data["summary"]

    def test_shuttle_route(self) -> None:
        assert shuttle_route("to_work") == ("mountain_view_caltrain", "linkedin_transit_center")
        assert shuttle_route("from_work") == ("linkedin_transit_center", "mountain_view_caltrain")
        with pytest.raises(ValueError):
            shuttle_route("sideways")

    def test_live_commute_requests_shuttle_for_direction(self, agent_api, fake_session) -> None:
        data = LiveDataSource(agent_api).commute("from_work")
        shuttle_call = fake_session.request.call_args_list[-1]
        assert shuttle_call.kwargs["params"] == {
            "origin": "linkedin_transit_center",
            "destination": "mountain_view_caltrain",
        }
        assert data["direction"] == "from_work"
