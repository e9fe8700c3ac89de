"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from cloud_browser.domain.sessions import BrowserInfo, SessionRecord, Viewport
from cloud_browser.services.sessions import SessionRepository

_COLUMNS = (
    "id, live_view_url, viewport_width, viewport_height, headless, "
    "ws_endpoint, current_url, created_at"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for browser sessions."""

    client: Client
    table_name: str = "browser_sessions"

    def create_session(self, record: SessionRecord) -> None:
        """Insert a session row."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "id": record.id,
                    "live_view_url": record.live_view_url,
                    "viewport_width": record.browser_info.viewport.width,
                    "viewport_height": record.browser_info.viewport.height,
                    "headless": record.browser_info.headless,
                    "ws_endpoint": record.ws_endpoint,
                    "current_url": record.current_url,
                    "created_at": record.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def update_current_url(self, session_id: str, url: str) -> None:
        """Store the last navigated URL."""
        self.client.table(self.table_name).update(
            {
                "current_url": url,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", session_id).execute()

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        self.client.table(self.table_name).delete().eq("id", session_id).execute()


def _to_record(row: dict[str, object]) -> SessionRecord:
    return SessionRecord(
        id=str(row["id"]),
        live_view_url=str(row["live_view_url"]),
        browser_info=BrowserInfo(
            viewport=Viewport(
                width=int(row["viewport_width"]),
                height=int(row["viewport_height"]),
            ),
            headless=bool(row["headless"]),
        ),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        ws_endpoint=row.get("ws_endpoint") or None,
        current_url=row.get("current_url") or None,
    )
