"""Process-local session repository."""

from dataclasses import dataclass, field

from cloud_browser.domain.sessions import SessionRecord
from cloud_browser.services.sessions import SessionRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """Keeps session records in a dict for the life of the process.

    Only useful when one long-running process serves every request.
    """

    sessions: dict[str, SessionRecord] = field(default_factory=dict)

    def create_session(self, record: SessionRecord) -> None:
        self.sessions[record.id] = record

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def update_current_url(self, session_id: str, url: str) -> None:
        record = self.sessions.get(session_id)
        if record is not None:
            self.sessions[session_id] = record.with_current_url(url)

    def delete_session(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)
