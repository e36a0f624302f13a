from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "nvidia/nemotron-nano-12b-v2-vl:free"


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Runtime configuration read from the process environment.

    `app.main` loads `.env` into the environment before the first request,
    so values from that file show up here as well.
    """

    openrouter_api_key: str | None = None
    openrouter_base_url: str = DEFAULT_BASE_URL
    openrouter_model: str = DEFAULT_MODEL
    openrouter_timeout: float = 60.0
    font_dir: str | None = None
    jpeg_quality: int = 80
    log_level: str = "INFO"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openrouter_api_key)


def get_settings() -> Settings:
    """
    Build settings from the current environment.

    Read on every call; nothing is cached.
    """
    return Settings(
        openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
        openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        openrouter_model=os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL),
        openrouter_timeout=float(os.getenv("OPENROUTER_TIMEOUT", "60")),
        font_dir=os.getenv("FONT_DIR") or None,
        jpeg_quality=int(os.getenv("JPEG_QUALITY", "80")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
