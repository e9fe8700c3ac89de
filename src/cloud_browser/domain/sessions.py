"""Domain models for browser sessions."""

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class Viewport:
    """Page viewport size in CSS pixels."""

    width: int
    height: int


@dataclass(frozen=True)
class BrowserInfo:
    """Describes how a session's browser was started."""

    viewport: Viewport
    headless: bool


@dataclass(frozen=True)
class SessionRecord:
    """Represents a stored browser session."""

    id: str
    live_view_url: str
    browser_info: BrowserInfo
    created_at: datetime
    ws_endpoint: str | None = None
    current_url: str | None = None

    def with_current_url(self, url: str) -> "SessionRecord":
        """Return a copy pointing at a new current URL."""
        return replace(self, current_url=url)


@dataclass(frozen=True)
class Screenshot:
    """A captured page image."""

    image_base64: str
    mime_type: str = "image/png"
