"""Server-side preload of dashboard widgets.

Fetches every widget before the page is rendered so the browser starts
with data instead of a loading flash. Sources are fetched concurrently and
fail independently: a failing source leaves its slot empty and records an
error string, the others are kept as returned.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from morningboard.agent.sources import DataSource

logger = logging.getLogger("morningboard.dashboard.preload")

SOURCES = ("weather", "financial", "calendar", "todos")


@dataclass
class DashboardPreload:
    weather: dict[str, Any] | None = None
    financial: dict[str, Any] | None = None
    calendar: dict[str, Any] | None = None
    todos: dict[str, Any] | None = None
    errors: dict[str, str | None] = field(default_factory=lambda: {s: None for s in SOURCES})

    @property
    def missing(self) -> list[str]:
        """Widgets the browser still has to fetch itself."""
        return [s for s in SOURCES if getattr(self, s) is None]

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {s: getattr(self, s) for s in SOURCES}
        out["errors"] = dict(self.errors)
        return out


async def preload_dashboard(source: DataSource, cfg: dict[str, Any] | None = None) -> DashboardPreload:
    """Fetch all widgets from ``source`` concurrently."""
    cfg = cfg or {}
    location = cfg.get("weather", {}).get("location", "San Francisco")
    symbols = cfg.get("financial", {}).get("symbols")

    calls: dict[str, Callable[[], dict[str, Any]]] = {
        "weather": lambda: source.weather(location),
        "financial": lambda: source.financial(symbols),
        "calendar": source.calendar,
        "todos": source.todos,
    }

    results = await asyncio.gather(
        *(asyncio.to_thread(calls[name]) for name in SOURCES),
        return_exceptions=True,
    )

    preload = DashboardPreload()
    for name, result in zip(SOURCES, results):
        if isinstance(result, BaseException):
            logger.warning("Preload of %s failed: %s", name, result)
            preload.errors[name] = str(result) or type(result).__name__
        else:
            setattr(preload, name, result)

    loaded = len(SOURCES) - len(preload.missing)
    logger.info("Preloaded %d/%d dashboard sources", loaded, len(SOURCES))
    return preload
