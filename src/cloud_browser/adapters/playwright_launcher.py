"""Playwright-backed browser launcher."""

import asyncio
import logging
from dataclasses import dataclass, field

from playwright.async_api import Browser, Playwright, async_playwright

from cloud_browser.services.sessions import BrowserLauncher

logger = logging.getLogger(__name__)


@dataclass
class PlaywrightLauncher(BrowserLauncher):
    """Launches Chromium locally or attaches to a remote CDP endpoint.

    The Playwright driver is started lazily on first use and shared by every
    browser this process opens.
    """

    headless: bool = True
    args: list[str] = field(default_factory=list)
    executable_path: str | None = None
    playwright: Playwright | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def launch(self) -> Browser:
        """Launch a new Chromium process."""
        playwright = await self._driver()
        logger.info(
            "Launching Chromium",
            extra={
                "executable_path": self.executable_path,
                "chromium_args": self.args,
            },
        )
        return await playwright.chromium.launch(
            headless=self.headless,
            args=self.args,
            executable_path=self.executable_path,
        )

    async def connect(self, ws_endpoint: str) -> Browser:
        """Attach to a browser exposed by a remote browser service."""
        playwright = await self._driver()
        logger.info("Connecting to remote browser")
        return await playwright.chromium.connect_over_cdp(ws_endpoint)

    async def stop(self) -> None:
        """Stop the Playwright driver if it was started."""
        async with self._lock:
            if self.playwright is not None:
                await self.playwright.stop()
                self.playwright = None

    async def _driver(self) -> Playwright:
        async with self._lock:
            if self.playwright is None:
                self.playwright = await async_playwright().start()
        return self.playwright
