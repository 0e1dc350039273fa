"""Chat conversation state: transcript, agent session handle, pending flag.

A send happens in two phases. ``begin`` appends the user's turn right away
and returns the request to issue; ``complete`` or ``fail`` appends the
assistant's turn once the call has settled. Only one request may be pending
at a time. ``clear`` starts over without touching the network, and any
request begun before it is ignored when it settles.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from morningboard.chat.commands import CLEAR, HELP, dispatch, help_text

logger = logging.getLogger("morningboard.chat.conversation")

CHAT_ERROR_TEXT = (
    "Sorry, I'm having trouble connecting to the AI service right now. "
    "Please try again later."
)
CLEARED_NOTICE = "Conversation cleared. Starting a new session - how can I help?"
GREETING = (
    "Good morning! I've gathered your daily briefing. Would you like me to "
    "explain anything in detail or help you plan your day?"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ConversationTurn:
    role: str  # "user" | "assistant"
    text: str
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "text": self.text, "timestamp": self.timestamp}


@dataclass(frozen=True)
class PendingRequest:
    body: dict[str, Any]
    epoch: int

    @property
    def message(self) -> str:
        return self.body["message"]

    @property
    def session_id(self) -> str | None:
        return self.body.get("session_id")


class ConversationBusy(RuntimeError):
    """A chat request is already in flight."""


class Conversation:
    """One chat panel's state.

    ``client`` is anything with ``send_chat_message(message, session_id=None)``
    returning the agent's reply dict (``AgentAPI`` or a test double).
    """

    def __init__(self, client: Any, *, greeting: str | None = GREETING) -> None:
        self.client = client
        self.session_id: str | None = None
        self.pending = False
        self.transcript: list[ConversationTurn] = []
        self._epoch = 0
        if greeting:
            self._append("assistant", greeting)

    def _append(self, role: str, text: str) -> ConversationTurn:
        turn = ConversationTurn(role, text)
        self.transcript.append(turn)
        return turn

    # ------------------------------------------------------------------
    # Two-phase send
    # ------------------------------------------------------------------

    def begin(self, text: str) -> PendingRequest | None:
        """Phase one. Returns the request to send, or None if nothing is sent."""
        if not text.strip():
            return None
        if self.pending:
            raise ConversationBusy("Wait for the previous message to finish")

        match = dispatch(text)
        if match is not None and match.command.action == HELP:
            self._append("assistant", help_text())
            return None
        if match is not None and match.command.action == CLEAR:
            self.clear()
            return None

        self._append("user", text)
        body: dict[str, Any] = {"message": text}
        if self.session_id:
            body["session_id"] = self.session_id
        self.pending = True
        return PendingRequest(body, self._epoch)

    def complete(self, request: PendingRequest, reply: Any) -> ConversationTurn | None:
        """Phase two, success: record the reply and adopt its session id."""
        if request.epoch != self._epoch:
            logger.info("Dropping reply for a cleared conversation")
            return None
        if not isinstance(reply, dict):
            return self.fail(request, TypeError(f"unexpected reply type {type(reply).__name__}"))
        self.pending = False

        new_id = reply.get("session_id")
        if new_id and (
            self.session_id is None or reply.get("new_session") or new_id != self.session_id
        ):
            if self.session_id and new_id != self.session_id:
                logger.info("Agent switched session %s -> %s", self.session_id, new_id)
            self.session_id = new_id

        return self._append("assistant", reply.get("response") or "")

    def fail(self, request: PendingRequest, exc: BaseException) -> ConversationTurn | None:
        """Phase two, failure: append the fixed error text, keep the session."""
        if request.epoch != self._epoch:
            return None
        self.pending = False
        logger.warning("Chat request failed: %s", exc)
        return self._append("assistant", CHAT_ERROR_TEXT)

    async def send(self, text: str) -> ConversationTurn | None:
        """Run both phases, calling the client in a worker thread."""
        request = self.begin(text)
        if request is None:
            return None
        try:
            reply = await asyncio.to_thread(
                self.client.send_chat_message, request.message, request.session_id,
            )
        except Exception as exc:
            return self.fail(request, exc)
        return self.complete(request, reply)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Forget the session and start a fresh transcript. No request is sent."""
        self._epoch += 1
        self.session_id = None
        self.pending = False
        self.transcript = [ConversationTurn("assistant", CLEARED_NOTICE)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "pending": self.pending,
            "transcript": [t.to_dict() for t in self.transcript],
        }
