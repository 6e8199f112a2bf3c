"""
Speech delivery chain: lock check -> TTS HTTP API -> fallback script.

Failures never escape speak(); the boolean result is the only signal.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

import aiohttp

from logging_setup import get_logger, Component
from .lock_gate import LockGate


class DeliveryChain:
    """Speaks text via the primary TTS endpoint, falling back to a local script."""

    def __init__(
        self,
        api_url: str,
        fallback_script: str,
        lock_gate: Optional[LockGate] = None,
        quiet: bool = False,
    ):
        self.api_url = api_url
        self.fallback_script = fallback_script
        # None disables lock checking for every caller
        self.lock_gate = lock_gate
        self.logger = get_logger(Component.DELIVERY, quiet=quiet)

    async def speak(self, text: str) -> bool:
        """
        Speak text aloud.

        Returns True when speech was delivered or suppressed by the speech
        lock, False when both channels failed.
        """
        if not await self._lock_allows_speech():
            self.logger.info("Speech locked (user recording), skipping TTS")
            return True

        try:
            if await self._speak_primary(text):
                return True

            return await self._speak_fallback(text)
        except Exception as e:
            self.logger.error(
                "Speech delivery failed unexpectedly",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def _lock_allows_speech(self) -> bool:
        """Fail-open: any lock gate error counts as permitted."""
        if self.lock_gate is None:
            return True
        try:
            return await self.lock_gate.can_speak()
        except Exception as e:
            self.logger.warning(
                "Speech lock check failed, allowing speech",
                error=str(e),
                error_type=type(e).__name__,
            )
            return True

    async def _speak_primary(self, text: str) -> bool:
        start_ts = time.time()
        try:
            status = await self._post_primary(text)
        except Exception as e:
            self.logger.warning(
                "TTS API unavailable, using fallback script",
                endpoint=self.api_url,
                error=str(e),
                error_type=type(e).__name__,
                latency_ms=int((time.time() - start_ts) * 1000),
            )
            return False

        if 200 <= status < 300:
            self.logger.debug(
                "Speech delivered",
                channel="primary",
                latency_ms=int((time.time() - start_ts) * 1000),
            )
            return True

        self.logger.warning(
            f"TTS API returned {status}, using fallback script",
            endpoint=self.api_url,
            status=status,
        )
        return False

    async def _post_primary(self, text: str) -> int:
        """POST the text to the TTS API and return the response status."""
        async with aiohttp.ClientSession() as s:
            async with s.post(self.api_url, json={"text": text}) as resp:
                return resp.status

    async def _speak_fallback(self, text: str) -> bool:
        try:
            returncode = await self._run_fallback(text)
        except Exception as e:
            self.logger.error(
                "TTS fallback script failed",
                script=self.fallback_script,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if returncode != 0:
            self.logger.error(
                "TTS fallback script failed",
                script=self.fallback_script,
                returncode=returncode,
            )
            return False

        self.logger.debug("Speech delivered", channel="fallback")
        return True

    async def _run_fallback(self, text: str) -> int:
        """Run the fallback script with the text as its only argument."""
        proc = await asyncio.create_subprocess_exec(
            self.fallback_script,
            text,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        return await proc.wait()
