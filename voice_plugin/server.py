"""
HTTP bridge between the opencode host and the voice plugin.

- POST /event       host lifecycle events (fire-and-forget)
- GET  /tool        tool registration descriptors
- POST /tool/speak  speak tool invocation
- GET  /health      health check
"""
import asyncio
from typing import Any, Dict, Optional

from fastapi import FastAPI
from pydantic import BaseModel, Field

from logging_setup import get_logger, Component
from .plugin import VoicePlugin, create_plugin


class SpeakRequest(BaseModel):
    text: str = Field(..., min_length=1, description="The text to speak aloud (Czech language preferred)")


class SpeakResponse(BaseModel):
    output: str


class EventResponse(BaseModel):
    status: str


def create_app(plugin: Optional[VoicePlugin] = None) -> FastAPI:
    """Create the bridge app around a plugin (built from the environment by default)."""
    plugin = plugin or create_plugin()
    app = FastAPI(title="Voice Plugin Bridge")
    app.state.plugin = plugin
    logger = get_logger(Component.HOST_BRIDGE, quiet=plugin.config.quiet)
    app.state.logger = logger

    # Host events are handled strictly one at a time
    event_lock = asyncio.Lock()

    @app.post("/event", response_model=EventResponse)
    async def handle_event(event: Dict[str, Any]) -> EventResponse:
        logger.debug("Host event received", event_type=event.get("type"))
        async with event_lock:
            await plugin.events.on_event(event)
        return EventResponse(status="accepted")

    @app.get("/tool")
    async def list_tools() -> list[Dict[str, Any]]:
        return [tool.descriptor() for tool in plugin.tools]

    @app.post("/tool/speak", response_model=SpeakResponse)
    async def speak(req: SpeakRequest) -> SpeakResponse:
        output = await plugin.speak.execute(req.text)
        return SpeakResponse(output=output)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "component": "voice_plugin"}

    return app
