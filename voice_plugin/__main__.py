"""
Entry point for running the voice plugin bridge.

Usage:
    python -m voice_plugin

Starts the FastAPI bridge on OPENCODE_TTS_HOST:OPENCODE_TTS_PORT
(default http://127.0.0.1:5556).
"""
import uvicorn

from logging_setup import setup_logging_from_env
from .config import PluginConfig, load_env_files
from .plugin import create_plugin
from .server import create_app


def uvicorn_options(config: PluginConfig) -> dict:
    """Server options; quiet verbosity also silences uvicorn's own logs."""
    return {
        "host": config.host,
        "port": config.port,
        "log_level": "critical" if config.quiet else "info",
        "access_log": not config.quiet,
    }


def main() -> None:
    load_env_files()
    setup_logging_from_env()

    config = PluginConfig.from_env()
    app = create_app(create_plugin(config))

    uvicorn.run(app, **uvicorn_options(config))


if __name__ == "__main__":
    main()
