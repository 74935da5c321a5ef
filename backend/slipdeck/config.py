"""Server-level configuration from environment variables.

All fields have defaults, no .env file is required. Variables use the
``SLIPDECK_`` prefix, e.g. ``SLIPDECK_PORT=9000``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_log_file() -> Path:
    """Return the default log location under the user's home directory."""
    return Path.home() / ".slipdeck" / "slipdeck.log"


class Settings(BaseSettings):
    """Server infrastructure settings. Loaded from environment variables; optionally from .env."""

    model_config = SettingsConfigDict(
        env_prefix="SLIPDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Logging
    log_file: Path = Field(default_factory=_default_log_file)

    # Frontend origins allowed by CORS (Vite dev server by default)
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]


settings = Settings()
