"""
opencode server client: session message history.

The server exposes GET /session/{id}/message returning a list of
{"info": {"id", "role", ...}, "parts": [{"type", "text"?, ...}]}.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from logging_setup import get_logger, Component


class HostRequestError(Exception):
    """The opencode server did not return a usable session payload."""


@dataclass(frozen=True)
class MessagePart:
    type: str
    text: Optional[str] = None


@dataclass(frozen=True)
class SessionMessage:
    id: str
    role: str
    parts: tuple[MessagePart, ...] = ()

    def joined_text(self) -> str:
        """Text of the "text" parts, in order, one per line."""
        return "\n".join(p.text for p in self.parts if p.type == "text" and p.text)


def parse_part(raw: Any) -> Optional[MessagePart]:
    if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
        return None
    text = raw.get("text")
    return MessagePart(type=raw["type"], text=text if isinstance(text, str) else None)


def parse_message(raw: Any) -> Optional[SessionMessage]:
    """
    Parse one message entry.

    Returns None if the entry has no usable info.id / info.role.
    """
    if not isinstance(raw, dict):
        return None
    info = raw.get("info")
    if not isinstance(info, dict):
        return None
    message_id = info.get("id")
    role = info.get("role")
    if not isinstance(message_id, str) or not isinstance(role, str):
        return None
    raw_parts = raw.get("parts")
    if not isinstance(raw_parts, list):
        raw_parts = []
    parts = tuple(p for p in (parse_part(rp) for rp in raw_parts) if p is not None)
    return SessionMessage(id=message_id, role=role, parts=parts)


def parse_messages(payload: Any) -> list[SessionMessage]:
    """Parse a message list, skipping malformed entries and keeping order."""
    if not isinstance(payload, list):
        raise HostRequestError("session message payload is not a list")
    return [m for m in (parse_message(raw) for raw in payload) if m is not None]


class HostSessionClient:
    """Reads session data from the opencode server."""

    def __init__(self, server_url: str, quiet: bool = False):
        self.server_url = server_url.rstrip("/")
        self.logger = get_logger(Component.HOST_CLIENT, quiet=quiet)

    async def get_messages(self, session_id: str) -> list[SessionMessage]:
        """
        Fetch the ordered message list of a session.

        Raises HostRequestError on non-2xx responses or malformed payloads;
        aiohttp errors propagate as-is.
        """
        endpoint = f"{self.server_url}/session/{session_id}/message"
        start_ts = time.time()
        async with aiohttp.ClientSession() as s:
            async with s.get(endpoint) as resp:
                if not 200 <= resp.status < 300:
                    raise HostRequestError(f"GET {endpoint} returned {resp.status}")
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise HostRequestError(f"GET {endpoint} returned invalid JSON") from e

        messages = parse_messages(payload)
        self.logger.debug(
            "Fetched session messages",
            session_id=session_id,
            count=len(messages),
            latency_ms=int((time.time() - start_ts) * 1000),
        )
        return messages
