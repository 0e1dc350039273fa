"""Versioned JSON API: chat proxy to the AI agent and a health check.

Request body for ``POST /api/v1/chat``::

    {"message": "What's on my calendar?", "session_id": "abc123"}

``session_id`` is optional; the agent assigns one on the first reply and
the caller sends it back on later turns. The proxy keeps no state.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from morningboard.agent.client import AgentAPI, AgentAPIError
from morningboard.common.deps import get_agent_api

logger = logging.getLogger("morningboard.chat.routes")

API_VERSION = "v1"
SERVICE_NAME = "morningboard-api"

PROXY_ERROR_TEXT = (
    "Sorry, I'm having trouble connecting to the AI service right now. "
    "Please try again later."
)

ENDPOINTS = {
    "POST /api/v1/chat": "Chat with AI assistant",
    "GET /api/v1/health": "Health check",
}

router = APIRouter(prefix=f"/api/{API_VERSION}", tags=["v1"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _v1_response(payload: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers={"API-Version": API_VERSION})


async def relay_chat(
    api: AgentAPI, message: Any, session_id: Any = None,
) -> tuple[int, dict[str, Any]]:
    """Forward one message to the agent. Returns (status_code, body).

    Exactly one upstream call is made for a valid message and none for an
    empty one. Upstream failures are logged and replaced by a fixed message.
    """
    text = message.strip() if isinstance(message, str) else ""
    if not text:
        return 400, {"error": "Message is required"}

    sid = session_id if isinstance(session_id, str) and session_id else None
    logger.info("Proxying chat message (%d chars, session=%s)", len(text), sid or "new")

    try:
        reply = await asyncio.to_thread(api.send_chat_message, text, sid)
    except AgentAPIError as exc:
        logger.error("Chat proxy error: %s", exc)
        return 500, {"error": PROXY_ERROR_TEXT, "timestamp": _now(), "version": API_VERSION}

    if not isinstance(reply, dict):
        logger.error("Chat proxy error: agent returned %s instead of an object", type(reply).__name__)
        return 500, {"error": PROXY_ERROR_TEXT, "timestamp": _now(), "version": API_VERSION}

    logger.info("Chat response received (session=%s)", reply.get("session_id"))
    return 200, {
        "success": True,
        "response": reply.get("response"),
        "session_id": reply.get("session_id"),
        "new_session": reply.get("new_session"),
        "timestamp": reply.get("timestamp"),
        "version": API_VERSION,
    }


@router.post("/chat")
async def chat(request: Request, api: AgentAPI = Depends(get_agent_api)) -> JSONResponse:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = {}
    if not isinstance(body, dict):
        body = {}

    status, payload = await relay_chat(api, body.get("message"), body.get("session_id"))
    return _v1_response(payload, status)


@router.get("/health")
async def health() -> JSONResponse:
    return _v1_response({
        "status": "ok",
        "version": API_VERSION,
        "timestamp": _now(),
        "service": SERVICE_NAME,
        "endpoints": ENDPOINTS,
    })
