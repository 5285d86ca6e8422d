"""Process-local session storage."""

from dataclasses import dataclass, field

from calories_bot.domain.sessions import SessionRecord
from calories_bot.services.sessions import SessionRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """Sessions keyed by user id; never evicted."""

    sessions: dict[int, SessionRecord] = field(default_factory=dict)

    def get(self, user_id: int) -> SessionRecord | None:
        return self.sessions.get(user_id)

    def save(self, session: SessionRecord) -> None:
        self.sessions[session.user_id] = session
