"""
The "speak" tool offered to the assistant.

The returned string is what the assistant sees as the tool result.
"""

from __future__ import annotations

from typing import Any

from logging_setup import get_logger, Component
from .delivery import DeliveryChain


TOOL_NAME = "speak"

TOOL_DESCRIPTION = (
    "Speak text aloud using text-to-speech. Use this for voice confirmations, "
    "task acknowledgments, and summaries. Text should be in Czech language, "
    "natural and conversational. Keep it brief (1-3 sentences)."
)

TEXT_ARG_DESCRIPTION = "The text to speak aloud (Czech language preferred)"

ERROR_MARKER = "[TTS error]"


def format_result(text: str, success: bool) -> str:
    quoted = f"„{text}\""
    if success:
        return quoted
    return f"{ERROR_MARKER} {quoted}"


class SpeakTool:
    """Assistant-facing speak capability backed by the delivery chain."""

    name = TOOL_NAME
    description = TOOL_DESCRIPTION

    def __init__(self, delivery: DeliveryChain, quiet: bool = False):
        self.delivery = delivery
        self.logger = get_logger(Component.SPEAK_TOOL, quiet=quiet)

    def descriptor(self) -> dict[str, Any]:
        """Registration descriptor: name, description, JSON schema of the args."""
        return {
            "name": self.name,
            "description": self.description,
            "args": {
                "type": "object",
                "properties": {
                    "text": {"type": "string", "description": TEXT_ARG_DESCRIPTION},
                },
                "required": ["text"],
            },
        }

    async def execute(self, text: str) -> str:
        success = await self.delivery.speak(text)
        if not success:
            self.logger.warning("Speak tool could not deliver speech", text_length=len(text))
        return format_result(text, success)
