"""
postcraft/config.py
Application configuration
Environment-driven (container / serverless compatible)

Nothing is required at import time. Each entry point calls
Settings.require(...) for the secrets it actually needs, so a missing
page token does not break webhook verification and vice versa.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from postcraft.errors import ConfigurationError

# Field name -> environment variable(s), first non-empty wins
_ENV_NAMES: dict[str, tuple[str, ...]] = {
    "gemini_api_key": ("GEMINI_API_KEY", "API_KEY"),
    "verify_token": ("FB_VERIFY_TOKEN",),
    "page_access_token": ("FB_PAGE_ACCESS_TOKEN",),
    "page_id": ("FB_PAGE_ID",),
    "app_secret": ("FB_APP_SECRET",),
    "database_url": ("DATABASE_URL",),
}


def _env(*names: str, default: str | None = None) -> str | None:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return default


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None = None
    verify_token: str | None = None
    page_access_token: str | None = None
    page_id: str | None = None
    app_secret: str | None = None
    database_url: str | None = None

    graph_api_version: str = "v19.0"
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    tts_voice: str = "Zephyr"
    public_base_url: str | None = None
    db_connect_timeout: int = 15
    schedule_file: str = "scheduled_posts.json"

    @property
    def graph_base_url(self) -> str:
        return f"https://graph.facebook.com/{self.graph_api_version}"

    @property
    def privacy_policy_url(self) -> str:
        base = (self.public_base_url or "").rstrip("/")
        return f"{base}/privacy-policy" if base else "/privacy-policy"

    def require(self, *names: str) -> None:
        """
        Raise ConfigurationError listing every missing setting in `names`.
        """
        known = {f.name for f in fields(self)}
        missing = []
        for name in names:
            if name not in known:
                raise ValueError(f"Unknown setting: {name}")
            if not getattr(self, name):
                missing.append(_ENV_NAMES.get(name, (name.upper(),))[0])

        if missing:
            raise ConfigurationError(
                "Missing required environment variable(s): "
                + ", ".join(missing)
                + ". Set them in your .env / hosting dashboard / shell before running."
            )


def load_settings() -> Settings:
    return Settings(
        gemini_api_key=_env(*_ENV_NAMES["gemini_api_key"]),
        verify_token=_env(*_ENV_NAMES["verify_token"]),
        page_access_token=_env(*_ENV_NAMES["page_access_token"]),
        page_id=_env(*_ENV_NAMES["page_id"]),
        app_secret=_env(*_ENV_NAMES["app_secret"]),
        database_url=_env(*_ENV_NAMES["database_url"]),
        graph_api_version=_env("META_GRAPH_API_VERSION", default="v19.0"),
        text_model=_env("GEMINI_TEXT_MODEL", default="gemini-2.5-flash"),
        image_model=_env("GEMINI_IMAGE_MODEL", default="gemini-2.5-flash-image"),
        tts_model=_env("GEMINI_TTS_MODEL", default="gemini-2.5-flash-preview-tts"),
        tts_voice=_env("TTS_VOICE", default="Zephyr"),
        public_base_url=_env("PUBLIC_BASE_URL", "URL"),
        db_connect_timeout=int(_env("DB_CONNECT_TIMEOUT_SECONDS", default="15")),
        schedule_file=_env("SCHEDULE_FILE", default="scheduled_posts.json"),
    )
