"""Browser session lifecycle across requests."""

import asyncio
import base64
import logging
import secrets
import string
import time
import weakref
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from cloud_browser.domain.errors import (
    BrowserLaunchError,
    BrowserLaunchTimeoutError,
    BrowserOperationError,
    MissingBrowserDependencyError,
    NavigationTimeoutError,
    SessionError,
    SessionNotFoundError,
)
from cloud_browser.domain.sessions import (
    BrowserInfo,
    Screenshot,
    SessionRecord,
    Viewport,
)

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
_ID_SUFFIX_LENGTH = 7

T = TypeVar("T")


class SessionRepository(Protocol):
    """Persistence interface for browser session records."""

    def create_session(self, record: SessionRecord) -> None:
        """Store a new session record."""

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""

    def update_current_url(self, session_id: str, url: str) -> None:
        """Remember the last URL a session navigated to."""

    def delete_session(self, session_id: str) -> None:
        """Remove a session record."""


class BrowserLauncher(Protocol):
    """Starts or attaches to browsers."""

    async def launch(self) -> Any:
        """Launch a local headless browser."""

    async def connect(self, ws_endpoint: str) -> Any:
        """Attach to a browser exposed by a remote browser service."""

    async def stop(self) -> None:
        """Release the automation driver."""


@dataclass
class BrowserHandle:
    """A live browser and the page a session drives."""

    browser: Any
    page: Any


def new_session_id() -> str:
    """Return an id like ``session-1718000000000-k3j9x0a``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"session-{int(time.time() * 1000)}-{suffix}"


@dataclass
class SessionService:
    """Creates, drives and closes browser sessions.

    Records go through the repository so they can outlive the process. Live
    browser handles only exist in ``handles``; a record without a handle is
    re-attached through its ``ws_endpoint`` or served by a throwaway browser.
    """

    repository: SessionRepository
    launcher: BrowserLauncher
    viewport: Viewport = field(default_factory=lambda: Viewport(1920, 1080))
    headless: bool = True
    remote_endpoint: str | None = None
    launch_timeout_seconds: float = 30.0
    navigation_timeout_ms: int = 30000
    live_view_path: str = "/browser-view-placeholder.html"
    handles: dict[str, BrowserHandle] = field(default_factory=dict)
    _locks: weakref.WeakValueDictionary[str, asyncio.Lock] = field(
        default_factory=weakref.WeakValueDictionary, repr=False
    )

    async def create_session(self) -> SessionRecord:
        """Start a browser and register a new session for it."""
        logger.info("Creating browser session")
        handle = await self._open(self.remote_endpoint)
        session_id = self._unused_session_id()
        record = SessionRecord(
            id=session_id,
            live_view_url=_live_view_url(self.live_view_path, session_id),
            browser_info=BrowserInfo(viewport=self.viewport, headless=self.headless),
            created_at=datetime.now(tz=UTC),
            ws_endpoint=self.remote_endpoint,
        )
        try:
            self.repository.create_session(record)
        except Exception as exc:
            logger.exception(
                "Failed to store session", extra={"session_id": session_id}
            )
            await self._close_quietly(handle, session_id)
            raise BrowserOperationError(
                str(exc) or "Failed to store session."
            ) from exc
        self.handles[session_id] = handle
        logger.info("Browser session created", extra={"session_id": session_id})
        return record

    async def navigate(self, session_id: str, url: str) -> None:
        """Point the session's page at ``url`` and wait for the network to idle."""
        async with self._lock_for(session_id):
            record = self._require(session_id)
            async with self._attached(record, replay=False) as handle:
                logger.info(
                    "Navigating session to %s", url, extra={"session_id": session_id}
                )
                await self._goto(handle, url)
            self._store(self.repository.update_current_url, session_id, url)

    async def screenshot(self, session_id: str) -> Screenshot:
        """Capture the session's page as a base64 PNG."""
        async with self._lock_for(session_id):
            record = self._require(session_id)
            async with self._attached(record, replay=True) as handle:
                try:
                    image = await handle.page.screenshot(type="png")
                except Exception as exc:
                    logger.exception(
                        "Screenshot failed", extra={"session_id": session_id}
                    )
                    raise BrowserOperationError(
                        str(exc) or "Failed to take screenshot."
                    ) from exc
        return Screenshot(image_base64=base64.b64encode(image).decode("ascii"))

    async def close_session(self, session_id: str) -> str:
        """Close the session's browser and forget the session."""
        async with self._lock_for(session_id):
            record = self._require(session_id, "Session not found.")
            handle = self.handles.get(session_id)
            if handle is None and record.ws_endpoint:
                handle = await self._reattach(record)
            if handle is None:
                self._store(self.repository.delete_session, session_id)
                logger.info(
                    "No live browser for session, dropping record",
                    extra={"session_id": session_id},
                )
                return f"Session {session_id} (possibly remote) considered closed."
            try:
                await handle.browser.close()
            except Exception as exc:
                logger.exception(
                    "Failed to close session", extra={"session_id": session_id}
                )
                raise BrowserOperationError(
                    str(exc) or "Failed to close session."
                ) from exc
            self.handles.pop(session_id, None)
            self._store(self.repository.delete_session, session_id)
        logger.info("Browser session closed", extra={"session_id": session_id})
        return f"Session {session_id} closed."

    async def close_all(self) -> None:
        """Close every live browser held by this process."""
        for session_id, handle in list(self.handles.items()):
            await self._close_quietly(handle, session_id)
            try:
                self.repository.delete_session(session_id)
            except Exception:
                logger.exception(
                    "Failed to delete session record",
                    extra={"session_id": session_id},
                )
        self.handles.clear()
        self._locks.clear()

    def _require(self, session_id: str, message: str | None = None) -> SessionRecord:
        record = self._store(self.repository.get_session, session_id)
        if record is None:
            raise SessionNotFoundError(session_id, message)
        return record

    def _store(self, call: Callable[..., T], *args: str) -> T:
        """Run a repository call, reporting storage failures as session errors."""
        try:
            return call(*args)
        except Exception as exc:
            logger.exception(
                "Session store call %s failed",
                call.__name__,
                extra={"session_id": args[0] if args else None},
            )
            raise BrowserOperationError(
                str(exc) or "Session store unavailable."
            ) from exc

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        return self._locks.setdefault(session_id, asyncio.Lock())

    def _unused_session_id(self) -> str:
        session_id = new_session_id()
        while self._store(self.repository.get_session, session_id) is not None:
            session_id = new_session_id()
        return session_id

    @asynccontextmanager
    async def _attached(
        self, record: SessionRecord, replay: bool
    ) -> AsyncIterator[BrowserHandle]:
        """Yield a handle for the record, opening a throwaway one if needed."""
        handle = self.handles.get(record.id)
        if handle is None and record.ws_endpoint:
            handle = await self._reattach(record)
        if handle is not None:
            yield handle
            return

        logger.info(
            "No live browser for session, using a temporary one",
            extra={"session_id": record.id},
        )
        handle = await self._open(None)
        try:
            if replay and record.current_url:
                try:
                    await self._goto(handle, record.current_url)
                except SessionError as exc:
                    raise BrowserOperationError(
                        f"Could not reopen {record.current_url}: {exc.message}"
                    ) from exc
            yield handle
        finally:
            await self._close_quietly(handle, record.id)

    async def _reattach(self, record: SessionRecord) -> BrowserHandle:
        logger.info(
            "Reconnecting to remote browser", extra={"session_id": record.id}
        )
        handle = await self._open(record.ws_endpoint, reuse_page=True)
        self.handles[record.id] = handle
        return handle

    async def _open(
        self, ws_endpoint: str | None, reuse_page: bool = False
    ) -> BrowserHandle:
        try:
            return await asyncio.wait_for(
                self._start(ws_endpoint, reuse_page),
                timeout=self.launch_timeout_seconds,
            )
        except TimeoutError:
            logger.error("Browser launch timed out")
            raise BrowserLaunchTimeoutError() from None
        except Exception as exc:
            logger.exception("Failed to start browser")
            message = str(exc)
            if "libnss3.so" in message:
                raise MissingBrowserDependencyError(message) from exc
            raise BrowserLaunchError(
                message or "Internal server error during session creation."
            ) from exc

    async def _start(self, ws_endpoint: str | None, reuse_page: bool) -> BrowserHandle:
        if ws_endpoint:
            browser = await self.launcher.connect(ws_endpoint)
        else:
            browser = await self.launcher.launch()
        try:
            page = _existing_page(browser) if reuse_page else None
            if page is None:
                page = await browser.new_page()
                await page.set_viewport_size(
                    {"width": self.viewport.width, "height": self.viewport.height}
                )
        except BaseException:
            await self._close_quietly(BrowserHandle(browser=browser, page=None), None)
            raise
        return BrowserHandle(browser=browser, page=page)

    async def _goto(self, handle: BrowserHandle, url: str) -> None:
        try:
            await handle.page.goto(
                url, wait_until="networkidle", timeout=self.navigation_timeout_ms
            )
        except PlaywrightTimeoutError:
            logger.warning("Navigation to %s timed out", url)
            raise NavigationTimeoutError(url) from None
        except Exception as exc:
            logger.exception("Navigation to %s failed", url)
            raise BrowserOperationError(
                str(exc) or "Failed to navigate the browser."
            ) from exc

    async def _close_quietly(
        self, handle: BrowserHandle, session_id: str | None
    ) -> None:
        try:
            await handle.browser.close()
        except Exception:
            logger.exception(
                "Error closing browser", extra={"session_id": session_id}
            )


def _live_view_url(path: str, session_id: str) -> str:
    parts = urlsplit(path)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append(("session_id", session_id))
    return urlunsplit(parts._replace(query=urlencode(query)))


def _existing_page(browser: Any) -> Any | None:
    for context in browser.contexts:
        if context.pages:
            return context.pages[0]
    return None
