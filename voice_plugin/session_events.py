"""
Host lifecycle event handling.

On "session.idle" (the assistant finished a turn):
- optionally announce completion aloud
- optionally capture the newest assistant response into the archive

Each assistant message is captured at most once per process. The progress
marker moves as soon as a new message is identified, before storage, so a
failed write is not retried on a later idle event.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from logging_setup import get_logger, Component
from .delivery import DeliveryChain
from .host_client import SessionMessage
from .response_store import ResponseStore


SESSION_IDLE = "session.idle"
ASSISTANT_ROLE = "assistant"


class SessionSource(Protocol):
    async def get_messages(self, session_id: str) -> list[SessionMessage]:
        ...


def latest_assistant_message(messages: list[SessionMessage]) -> Optional[SessionMessage]:
    """Newest message authored by the assistant, scanning from the end."""
    for message in reversed(messages):
        if message.role == ASSISTANT_ROLE:
            return message
    return None


def event_session_id(event: dict[str, Any]) -> Optional[str]:
    properties = event.get("properties")
    if not isinstance(properties, dict):
        return None
    session_id = properties.get("sessionID")
    if isinstance(session_id, str) and session_id.strip():
        return session_id.strip()
    return None


class SessionEventProcessor:
    """Consumes host events one at a time; owns the session progress marker."""

    def __init__(
        self,
        delivery: DeliveryChain,
        store: ResponseStore,
        sessions: SessionSource,
        announce_on_idle: bool = False,
        idle_message: str = "",
        capture_responses: bool = False,
        quiet: bool = False,
    ):
        self.delivery = delivery
        self.store = store
        self.sessions = sessions
        self.announce_on_idle = announce_on_idle
        self.idle_message = idle_message
        self.capture_responses = capture_responses
        self.logger = get_logger(Component.SESSION_EVENTS, quiet=quiet)

        # Id of the last assistant message handed to capture
        self.last_message_id: Optional[str] = None

    async def on_event(self, event: Any) -> None:
        """Handle one host event. Never raises; other event types are ignored."""
        if not isinstance(event, dict) or event.get("type") != SESSION_IDLE:
            return

        session_id = event_session_id(event)

        if self.announce_on_idle:
            await self._announce()

        if self.capture_responses and session_id:
            await self._capture(session_id)

    async def _announce(self) -> None:
        try:
            await self.delivery.speak(self.idle_message)
        except Exception as e:
            self.logger.warning(
                "Idle announcement failed",
                error=str(e),
                error_type=type(e).__name__,
            )

    async def _capture(self, session_id: str) -> None:
        session_logger = self.logger.with_session(session_id)
        try:
            messages = await self.sessions.get_messages(session_id)
        except Exception as e:
            session_logger.warning(
                "Could not fetch session messages, skipping capture",
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        message = latest_assistant_message(messages)
        if message is None:
            return
        if message.id == self.last_message_id:
            session_logger.debug("Assistant message already captured", message_id=message.id)
            return

        self.last_message_id = message.id

        content = message.joined_text()
        if not content.strip():
            return

        try:
            await self.store.store(content)
        except Exception as e:
            session_logger.warning(
                "Response capture failed",
                message_id=message.id,
                error_type=type(e).__name__,
            )
            return
        session_logger.debug("Assistant response captured", message_id=message.id)
