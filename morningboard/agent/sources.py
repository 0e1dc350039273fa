"""Dashboard data sources.

A data source supplies the snapshot for each widget. ``LiveDataSource``
reads from the agent and raises on failure, ``FixtureDataSource`` returns
the fixed mock payloads, and ``FallbackDataSource`` tries one and falls
back to the other. Which policy applies is chosen by whoever builds the
source, never hidden inside the HTTP client.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from morningboard.agent import fixtures
from morningboard.agent.client import AgentAPI, AgentAPIError

logger = logging.getLogger("morningboard.agent.sources")

# Shuttle stops for each commute direction: (origin, destination)
SHUTTLE_ROUTES: dict[str, tuple[str, str]] = {
    "to_work": ("mountain_view_caltrain", "linkedin_transit_center"),
    "from_work": ("linkedin_transit_center", "mountain_view_caltrain"),
}


def shuttle_route(direction: str) -> tuple[str, str]:
    """Return (origin, destination) shuttle stops for a commute direction."""
    try:
        return SHUTTLE_ROUTES[direction]
    except KeyError:
        raise ValueError(f"Unknown commute direction: {direction!r}") from None


class DataSource(ABC):
    """Supplies the snapshot payload for every dashboard widget."""

    name: str

    @abstractmethod
    def weather(self, location: str = "San Francisco") -> dict[str, Any]:
        ...

    @abstractmethod
    def financial(self, symbols: list[str] | None = None) -> dict[str, Any]:
        ...

    @abstractmethod
    def calendar(self, date: str | None = None) -> dict[str, Any]:
        ...

    @abstractmethod
    def todos(self) -> dict[str, Any]:
        ...

    @abstractmethod
    def briefing(self) -> dict[str, Any]:
        ...


class LiveDataSource(DataSource):
    """Reads every widget from the agent. Errors propagate as AgentAPIError."""

    name = "live"

    def __init__(self, api: AgentAPI) -> None:
        self.api = api

    def weather(self, location: str = "San Francisco") -> dict[str, Any]:
        return self.api.get_weather(location)

    def financial(self, symbols: list[str] | None = None) -> dict[str, Any]:
        return self.api.get_financial_data(symbols)

    def calendar(self, date: str | None = None) -> dict[str, Any]:
        return self.api.get_calendar(date)

    def todos(self) -> dict[str, Any]:
        return self.api.get_todos()

    def briefing(self) -> dict[str, Any]:
        return self.api.get_morning_briefing()

    def commute(self, direction: str = "to_work") -> dict[str, Any]:
        """Commute options plus the shuttle leg for ``direction``.

        Not part of the fallback policy: the commute widget shows its own
        error state instead of fixture data.
        """
        origin, destination = shuttle_route(direction)
        options = self.api.get_commute_options(direction)
        shuttle = self.api.get_shuttle_schedule(origin, destination)
        return {"direction": direction, "commute": options, "shuttle": shuttle}


class FixtureDataSource(DataSource):
    """Fixed mock payloads, stamped with the current time."""

    name = "fixture"

    def weather(self, location: str = "San Francisco") -> dict[str, Any]:
        return fixtures.mock_weather(location)

    def financial(self, symbols: list[str] | None = None) -> dict[str, Any]:
        return fixtures.mock_financial(symbols)

    def calendar(self, date: str | None = None) -> dict[str, Any]:
        return fixtures.mock_calendar(date)

    def todos(self) -> dict[str, Any]:
        return fixtures.mock_todos()

    def briefing(self) -> dict[str, Any]:
        return fixtures.mock_briefing()


class FallbackDataSource(DataSource):
    """Try ``primary``; on AgentAPIError return ``fallback``'s payload."""

    name = "fallback"

    def __init__(self, primary: DataSource, fallback: DataSource) -> None:
        self.primary = primary
        self.fallback = fallback

    def _try(self, widget: str, primary_fn: Callable[[], dict[str, Any]],
             fallback_fn: Callable[[], dict[str, Any]]) -> dict[str, Any]:
        try:
            return primary_fn()
        except AgentAPIError as exc:
            logger.warning("Failed to fetch %s data, using %s: %s", widget, self.fallback.name, exc)
            return fallback_fn()

    def weather(self, location: str = "San Francisco") -> dict[str, Any]:
        return self._try("weather", lambda: self.primary.weather(location),
                         lambda: self.fallback.weather(location))

    def financial(self, symbols: list[str] | None = None) -> dict[str, Any]:
        return self._try("financial", lambda: self.primary.financial(symbols),
                         lambda: self.fallback.financial(symbols))

    def calendar(self, date: str | None = None) -> dict[str, Any]:
        return self._try("calendar", lambda: self.primary.calendar(date),
                         lambda: self.fallback.calendar(date))

    def todos(self) -> dict[str, Any]:
        return self._try("todo", self.primary.todos, self.fallback.todos)

    def briefing(self) -> dict[str, Any]:
        return self._try("briefing", self.primary.briefing, self.fallback.briefing)
