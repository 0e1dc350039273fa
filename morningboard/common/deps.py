"""FastAPI dependencies shared by the dashboard and the v1 API routes."""

from __future__ import annotations

from typing import Any, Iterator

from fastapi import Depends

from morningboard.agent.client import AgentAPI
from morningboard.agent.sources import FallbackDataSource, FixtureDataSource, LiveDataSource
from morningboard.common.config import REPO_DIR, load_config

CONFIG_PATH = REPO_DIR / "config" / "config.yaml"


def get_config() -> dict[str, Any]:
    return load_config(CONFIG_PATH if CONFIG_PATH.is_file() else None)


def get_agent_api(cfg: dict[str, Any] = Depends(get_config)) -> Iterator[AgentAPI]:
    """One AgentAPI per request, closed when the response is sent."""
    api = AgentAPI.from_config(cfg)
    try:
        yield api
    finally:
        api.close()


def get_live_source(api: AgentAPI = Depends(get_agent_api)) -> LiveDataSource:
    return LiveDataSource(api)


def get_widget_source(live: LiveDataSource = Depends(get_live_source)) -> FallbackDataSource:
    """Live agent data with fixture payloads substituted on failure."""
    return FallbackDataSource(live, FixtureDataSource())
