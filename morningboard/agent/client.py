"""HTTP client for the external AI agent service.

Every dashboard widget and the chat panel are backed by the agent's REST
API. ``AgentAPI`` is a thin wrapper: it builds the request, checks the
status, and returns the decoded JSON. Any transport or HTTP failure is
raised as :class:`AgentAPIError`; falling back to fixture data is the
caller's decision (see ``morningboard.agent.sources``).
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger("morningboard.agent.client")

DEFAULT_SYMBOLS = ["MSFT", "BTC", "ETH", "NVDA"]


class AgentAPIError(Exception):
    """Raised when the agent service is unreachable or returns a non-2xx."""

    def __init__(self, endpoint: str, reason: str, status_code: int | None = None) -> None:
        self.endpoint = endpoint
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"API Error: {status_code} {reason} ({endpoint})")
        else:
            super().__init__(f"API Error: {reason} ({endpoint})")


class AgentAPI:
    """Typed access to the agent's tool, chat and session endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        debug: bool = False,
        timeout: float = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.debug = debug
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("Content-Type", "application/json")

        if debug:
            logger.info("AI Agent API URL: %s", self.base_url)

    @classmethod
    def from_config(cls, cfg: dict[str, Any], session: requests.Session | None = None) -> "AgentAPI":
        agent = cfg.get("agent", {})
        return cls(
            agent.get("base_url", "http://localhost:8001"),
            debug=bool(cfg.get("debug")),
            timeout=float(agent.get("timeout", 15)),
            session=session,
        )

    def close(self) -> None:
        self._session.close()

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        if self.debug:
            logger.debug("%s %s params=%s body=%s", method, url, params, json_body)

        try:
            resp = self._session.request(
                method, url, params=params, json=json_body, timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AgentAPIError(endpoint, str(exc)) from exc

        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise AgentAPIError(endpoint, resp.reason or "Error", resp.status_code) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise AgentAPIError(endpoint, f"invalid JSON body: {exc}", resp.status_code) from exc

    # ------------------------------------------------------------------
    # Dashboard tools
    # ------------------------------------------------------------------

    def get_weather(self, location: str = "San Francisco") -> dict[str, Any]:
        return self._request("GET", "/tools/weather", params={"location": location, "when": "today"})

    def get_financial_data(self, symbols: list[str] | None = None) -> dict[str, Any]:
        return self._request(
            "POST",
            "/tools/financial",
            json_body={"symbols": symbols or DEFAULT_SYMBOLS, "data_type": "mixed"},
        )

    def get_calendar(self, date: str | None = None) -> dict[str, Any]:
        params = {"date": date} if date else None
        return self._request("GET", "/tools/calendar", params=params)

    def get_todos(self) -> dict[str, Any]:
        return self._request("GET", "/tools/todos")

    def get_commute_options(self, direction: str = "to_work") -> dict[str, Any]:
        return self._request("GET", "/tools/commute", params={"direction": direction})

    def get_shuttle_schedule(self, origin: str, destination: str) -> dict[str, Any]:
        return self._request(
            "GET", "/tools/shuttle", params={"origin": origin, "destination": destination},
        )

    def get_morning_briefing(self) -> dict[str, Any]:
        return self._request("GET", "/briefing", params={"type": "smart"})

    # ------------------------------------------------------------------
    # Chat and sessions
    # ------------------------------------------------------------------

    def send_chat_message(self, message: str, session_id: str | None = None) -> dict[str, Any]:
        """Send one chat turn. ``session_id`` is only included when set."""
        body: dict[str, Any] = {"message": message}
        if session_id:
            body["session_id"] = session_id
        return self._request("POST", "/chat", json_body=body)

    def create_session(self, metadata: dict[str, Any] | None = None) -> dict[str, Any]:
        return self._request("POST", "/sessions", json_body={"metadata": metadata})

    def get_session_info(self, session_id: str) -> dict[str, Any]:
        return self._request("GET", f"/sessions/{session_id}")

    def delete_session(self, session_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/sessions/{session_id}")

    def list_sessions(self) -> dict[str, Any]:
        return self._request("GET", "/sessions")
