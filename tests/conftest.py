"""Shared fixtures: fake agent HTTP session, AgentAPI, and an app client."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest
import pytest_asyncio
import requests

from morningboard.agent.client import AgentAPI
from morningboard.common.config import load_config

AGENT_URL = "http://agent.test"


def make_response(status_code: int = 200, json_data: Any = None, reason: str = "OK") -> MagicMock:
    """Build a mock requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.reason = reason
    resp.json.return_value = json_data if json_data is not None else {}
    if not resp.ok:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} {reason}", response=resp,
        )
    return resp


def chat_reply(
    response: str = "Good morning!",
    session_id: str = "abc123",
    new_session: bool = True,
) -> dict[str, Any]:
    return {
        "response": response,
        "session_id": session_id,
        "new_session": new_session,
        "timestamp": "2026-10-17T07:30:00Z",
    }


def sent_bodies(session: MagicMock) -> list[Any]:
    """JSON bodies of every request made through the fake session."""
    return [call.kwargs.get("json") for call in session.request.call_args_list]


@pytest.fixture()
def fake_session() -> MagicMock:
    """Stand-in for requests.Session; set ``.request.return_value`` per test."""
    session = MagicMock()
    session.headers = {}
    session.request.return_value = make_response(200, chat_reply())
    return session


@pytest.fixture()
def agent_api(fake_session) -> AgentAPI:
    return AgentAPI(AGENT_URL, session=fake_session)


@pytest.fixture()
def config(tmp_path) -> dict[str, Any]:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"""
user_name: Kevin
log_dir: {tmp_path}/logs
agent:
  base_url: {AGENT_URL}
  timeout: 5
weather:
  location: Mountain View
financial:
  symbols: [MSFT, NVDA]
""")
    return load_config(config_file)


@pytest_asyncio.fixture()
async def client(agent_api, config):
    """Async httpx client bound to the FastAPI app with a fake agent."""
    from morningboard.common.deps import get_agent_api, get_config
    from morningboard.dashboard.app import app

    app.dependency_overrides[get_agent_api] = lambda: agent_api
    app.dependency_overrides[get_config] = lambda: config
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()
