"""
Voice plugin configuration.

Loads endpoint, fallback and capture settings from environment variables.
"""
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


VERBOSE = "verbose"
QUIET = "quiet"

DEFAULT_API_URL = "http://localhost:5555/api/speech/speak"
DEFAULT_CAN_SPEAK_URL = "http://localhost:5555/api/speech/can-speak"
DEFAULT_FALLBACK_SCRIPT = "~/voice-assistant/voice-output/tts-api.sh"
DEFAULT_IDLE_MESSAGE = "Úkol dokončen."
DEFAULT_DB_PATH = "~/voice-assistant/responses.db"
DEFAULT_SERVER_URL = "http://localhost:4096"
DEFAULT_LOCK_TIMEOUT_MS = 1000


def load_env_files(root: Path | None = None) -> None:
    """
    Load .env_local / .env.local from the project root (local dev convenience).

    Never overrides variables that are already exported.
    """
    root = root or Path(__file__).parent.parent
    for name in (".env_local", ".env.local"):
        p = root / name
        if p.exists():
            load_dotenv(p, override=False)


def _parse_int_env(key: str, default: int) -> int:
    """
    Parse integer environment variable, stripping comments and whitespace.

    Handles cases like:
    - "1000  # comment" -> 1000
    - "1000" -> 1000
    - None -> default
    """
    value = os.environ.get(key)
    if not value:
        return default

    if "#" in value:
        value = value.split("#")[0]

    value = value.strip()

    if not value:
        return default

    try:
        return int(value)
    except ValueError:
        return default


def _parse_positive_int_env(key: str, default: int) -> int:
    """Like _parse_int_env, but zero and negative values fall back to default."""
    value = _parse_int_env(key, default)
    if value <= 0:
        return default
    return value


def _parse_bool_env(key: str, default: bool) -> bool:
    """
    Parse boolean environment variable.

    Only the exact lowercase string "true" enables a flag and only "false"
    disables it; anything else ("TRUE", "yes", "1") keeps the default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    value = value.strip()
    if value == "true":
        return True
    if value == "false":
        return False
    return default


def _parse_verbosity_env(key: str, default: str = VERBOSE) -> str:
    value = os.environ.get(key, "").strip().lower()
    if value in (VERBOSE, QUIET):
        return value
    return default


@dataclass(frozen=True)
class PluginConfig:
    """Voice plugin configuration. Resolved once at startup, never mutated."""

    # Speech channels
    api_url: str = DEFAULT_API_URL
    can_speak_url: str = DEFAULT_CAN_SPEAK_URL
    fallback_script: str = os.path.expanduser(DEFAULT_FALLBACK_SCRIPT)

    # Idle announcement
    announce_on_idle: bool = False
    idle_message: str = DEFAULT_IDLE_MESSAGE

    # Response capture
    db_path: str = os.path.expanduser(DEFAULT_DB_PATH)
    capture_responses: bool = False

    # Speech lock (applies to every speak call, tool or announcement)
    check_lock: bool = True
    lock_timeout_ms: int = DEFAULT_LOCK_TIMEOUT_MS

    # "verbose" logs each fallback/failure, "quiet" suppresses diagnostics
    verbosity: str = VERBOSE

    # opencode server (session data) and our own HTTP bridge
    server_url: str = DEFAULT_SERVER_URL
    host: str = "127.0.0.1"
    port: int = 5556

    @property
    def quiet(self) -> bool:
        return self.verbosity == QUIET

    @classmethod
    def from_env(cls) -> "PluginConfig":
        """Load configuration from environment variables."""
        return cls(
            api_url=os.environ.get("OPENCODE_TTS_API_URL", DEFAULT_API_URL),
            can_speak_url=os.environ.get("OPENCODE_TTS_CAN_SPEAK_URL", DEFAULT_CAN_SPEAK_URL),
            fallback_script=os.path.expanduser(
                os.environ.get("OPENCODE_TTS_FALLBACK_SCRIPT", DEFAULT_FALLBACK_SCRIPT)
            ),
            announce_on_idle=_parse_bool_env("OPENCODE_TTS_ANNOUNCE_IDLE", default=False),
            idle_message=os.environ.get("OPENCODE_TTS_IDLE_MESSAGE", DEFAULT_IDLE_MESSAGE),
            db_path=os.path.expanduser(os.environ.get("OPENCODE_TTS_DB_PATH", DEFAULT_DB_PATH)),
            capture_responses=_parse_bool_env("OPENCODE_TTS_CAPTURE_RESPONSES", default=False),
            check_lock=_parse_bool_env("OPENCODE_TTS_CHECK_LOCK", default=True),
            lock_timeout_ms=_parse_positive_int_env("OPENCODE_TTS_LOCK_TIMEOUT_MS", default=DEFAULT_LOCK_TIMEOUT_MS),
            verbosity=_parse_verbosity_env("OPENCODE_TTS_VERBOSITY"),
            server_url=os.environ.get("OPENCODE_SERVER_URL", DEFAULT_SERVER_URL).rstrip("/"),
            host=os.environ.get("OPENCODE_TTS_HOST", "127.0.0.1"),
            port=_parse_int_env("OPENCODE_TTS_PORT", default=5556),
        )
