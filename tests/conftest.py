"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from cloud_browser.adapters.memory_session_repository import (
    InMemorySessionRepository,
)
from cloud_browser.config import Settings
from cloud_browser.containers import AppContainer
from cloud_browser.domain.sessions import Viewport
from cloud_browser.services.sessions import BrowserLauncher, SessionService


@dataclass
class FakePage:
    """Fake Playwright page that records calls."""

    visited: list[tuple[str, str, int]] = field(default_factory=list)
    viewport: dict[str, int] | None = None
    goto_error: Exception | None = None
    screenshot_error: Exception | None = None
    image: bytes = b"fake-png-bytes"
    goto_delay: float = 0.0
    in_flight: int = 0
    max_in_flight: int = 0

    async def goto(self, url: str, wait_until: str, timeout: int) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.goto_delay:
                await asyncio.sleep(self.goto_delay)
            if self.goto_error is not None:
                raise self.goto_error
            self.visited.append((url, wait_until, timeout))
        finally:
            self.in_flight -= 1

    async def screenshot(self, type: str = "png") -> bytes:  # noqa: A002
        if self.screenshot_error is not None:
            raise self.screenshot_error
        return self.image

    async def set_viewport_size(self, viewport_size: dict[str, int]) -> None:
        self.viewport = viewport_size


@dataclass
class FakeContext:
    pages: list[FakePage] = field(default_factory=list)


@dataclass
class FakeBrowser:
    """Fake Playwright browser."""

    contexts: list[FakeContext] = field(default_factory=list)
    closed: bool = False
    close_error: Exception | None = None
    page_factory: type[FakePage] = FakePage

    async def new_page(self) -> FakePage:
        page = self.page_factory()
        self.contexts.append(FakeContext(pages=[page]))
        return page

    async def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True

    @property
    def page(self) -> FakePage:
        return self.contexts[0].pages[0]


@dataclass
class FakeBrowserLauncher(BrowserLauncher):
    """Fake launcher handing out fake browsers."""

    launched: list[FakeBrowser] = field(default_factory=list)
    connected: list[tuple[str, FakeBrowser]] = field(default_factory=list)
    remote_browsers: dict[str, FakeBrowser] = field(default_factory=dict)
    launch_error: Exception | None = None
    launch_delay: float = 0.0
    stopped: bool = False

    async def launch(self) -> FakeBrowser:
        if self.launch_delay:
            await asyncio.sleep(self.launch_delay)
        if self.launch_error is not None:
            raise self.launch_error
        browser = FakeBrowser()
        self.launched.append(browser)
        return browser

    async def connect(self, ws_endpoint: str) -> FakeBrowser:
        browser = self.remote_browsers.setdefault(ws_endpoint, FakeBrowser())
        self.connected.append((ws_endpoint, browser))
        return browser

    async def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", session_store="memory")


@pytest.fixture
def launcher() -> FakeBrowserLauncher:
    return FakeBrowserLauncher()


@pytest.fixture
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def session_service(
    launcher: FakeBrowserLauncher, repository: InMemorySessionRepository
) -> SessionService:
    return SessionService(
        repository=repository,
        launcher=launcher,
        viewport=Viewport(width=1920, height=1080),
        launch_timeout_seconds=5.0,
        navigation_timeout_ms=30000,
    )


@pytest.fixture
def container(settings: Settings, session_service: SessionService) -> AppContainer:
    async def close_resources() -> None:
        await session_service.close_all()
        await session_service.launcher.stop()

    return AppContainer(
        settings=settings,
        session_service=session_service,
        close_resources=close_resources,
    )
