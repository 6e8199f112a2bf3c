"""
Plugin assembly: one config, one instance of every component.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import PluginConfig
from .delivery import DeliveryChain
from .host_client import HostSessionClient
from .lock_gate import LockGate
from .response_store import ResponseStore
from .session_events import SessionEventProcessor
from .speak_tool import SpeakTool


@dataclass
class VoicePlugin:
    config: PluginConfig
    delivery: DeliveryChain
    events: SessionEventProcessor
    speak: SpeakTool

    @property
    def tools(self) -> list[SpeakTool]:
        return [self.speak]


def create_plugin(config: Optional[PluginConfig] = None) -> VoicePlugin:
    """
    Build the plugin from config (defaults to the environment).

    Lock checking is wired into the delivery chain itself, so the speak tool
    and idle announcements follow the same policy.
    """
    config = config or PluginConfig.from_env()
    quiet = config.quiet

    lock_gate = None
    if config.check_lock:
        lock_gate = LockGate(config.can_speak_url, timeout_ms=config.lock_timeout_ms, quiet=quiet)

    delivery = DeliveryChain(
        api_url=config.api_url,
        fallback_script=config.fallback_script,
        lock_gate=lock_gate,
        quiet=quiet,
    )
    store = ResponseStore(config.db_path, enabled=config.capture_responses)
    events = SessionEventProcessor(
        delivery=delivery,
        store=store,
        sessions=HostSessionClient(config.server_url, quiet=quiet),
        announce_on_idle=config.announce_on_idle,
        idle_message=config.idle_message,
        capture_responses=config.capture_responses,
        quiet=quiet,
    )
    return VoicePlugin(
        config=config,
        delivery=delivery,
        events=events,
        speak=SpeakTool(delivery, quiet=quiet),
    )
