"""
Speech lock check.

The TTS service holds a lock while the user is recording; speaking during
that window would end up in the recording. The check is fail-open: if the
lock state cannot be confirmed, speech is allowed.
"""

from __future__ import annotations

import time

import aiohttp

from logging_setup import get_logger, Component


DEFAULT_TIMEOUT_MS = 1000


class LockGate:
    """Asks the TTS service whether speech is currently permitted."""

    def __init__(self, can_speak_url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS, quiet: bool = False):
        self.can_speak_url = can_speak_url
        # aiohttp treats a zero or negative total as "no timeout"
        if timeout_ms <= 0:
            timeout_ms = DEFAULT_TIMEOUT_MS
        self.timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
        self.logger = get_logger(Component.LOCK_GATE, quiet=quiet)

    async def can_speak(self) -> bool:
        """
        Single bounded GET against the can-speak endpoint.

        Returns False only when the service answers 2xx with canSpeak=false.
        Non-2xx, malformed bodies, network errors and timeouts return True.
        """
        start_ts = time.time()
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as s:
                async with s.get(self.can_speak_url) as resp:
                    if not 200 <= resp.status < 300:
                        self.logger.warning(
                            "Speech lock check returned non-success status, allowing speech",
                            endpoint=self.can_speak_url,
                            status=resp.status,
                        )
                        return True
                    data = await resp.json(content_type=None)
        except Exception as e:
            self.logger.warning(
                "Could not check speech lock, allowing speech",
                endpoint=self.can_speak_url,
                error=str(e),
                error_type=type(e).__name__,
                latency_ms=int((time.time() - start_ts) * 1000),
            )
            return True

        if isinstance(data, dict) and data.get("canSpeak") is False:
            return False
        return True
