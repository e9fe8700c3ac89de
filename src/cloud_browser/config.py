"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_DEFAULT_CHROMIUM_ARGS = ",".join(
    [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-accelerated-2d-canvas",
        "--disable-gpu",
        "--window-size=1920,1080",
    ]
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    session_store: str = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_sessions_table: str = "browser_sessions"
    browser_ws_endpoint: str | None = None
    chromium_executable_path: str | None = None
    chromium_args: str = _DEFAULT_CHROMIUM_ARGS
    headless: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    launch_timeout_seconds: float = 30.0
    navigation_timeout_ms: int = 30000
    live_view_path: str = "/browser-view-placeholder.html"
    cors_allow_origins: str = "*"
    static_dir: str | None = None

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_csv(raw: str | None) -> list[str]:
    """Split a comma-separated setting, dropping blank entries."""
    if raw is None:
        return []
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]
