"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from cloud_browser.adapters.memory_session_repository import (
    InMemorySessionRepository,
)
from cloud_browser.adapters.playwright_launcher import PlaywrightLauncher
from cloud_browser.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from cloud_browser.config import Settings, parse_csv
from cloud_browser.domain.sessions import Viewport
from cloud_browser.services.sessions import SessionRepository, SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_session_repository(settings: Settings) -> SessionRepository:
    """Pick the session store named by ``settings.session_store``."""
    if settings.session_store == "memory":
        return InMemorySessionRepository()
    if settings.session_store == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase session store"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseSessionRepository(
            client, table_name=settings.supabase_sessions_table
        )
    raise RuntimeError(f"Unknown session store: {settings.session_store}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    launcher = PlaywrightLauncher(
        headless=resolved_settings.headless,
        args=parse_csv(resolved_settings.chromium_args),
        executable_path=resolved_settings.chromium_executable_path,
    )
    session_service = SessionService(
        repository=build_session_repository(resolved_settings),
        launcher=launcher,
        viewport=Viewport(
            width=resolved_settings.viewport_width,
            height=resolved_settings.viewport_height,
        ),
        headless=resolved_settings.headless,
        remote_endpoint=resolved_settings.browser_ws_endpoint,
        launch_timeout_seconds=resolved_settings.launch_timeout_seconds,
        navigation_timeout_ms=resolved_settings.navigation_timeout_ms,
        live_view_path=resolved_settings.live_view_path,
    )

    async def close_resources() -> None:
        await session_service.close_all()
        await launcher.stop()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        close_resources=close_resources,
    )
