"""Domain models for conversation sessions."""

from dataclasses import dataclass
from enum import Enum


class SessionMode(Enum):
    """Kind of input a user is currently expected to send."""

    NEW = "NEW"
    AWAITING_WALLET = "AWAITING_WALLET"
    AWAITING_PHOTO = "AWAITING_PHOTO"
    IDLE = "IDLE"


@dataclass(frozen=True)
class SessionRecord:
    """Represents the transient conversation state of one user."""

    user_id: int
    awaiting_photo: bool = False
    awaiting_wallet: bool = False
    last_command: str | None = None

    @property
    def mode(self) -> SessionMode:
        if self.awaiting_wallet:
            return SessionMode.AWAITING_WALLET
        if self.awaiting_photo:
            return SessionMode.AWAITING_PHOTO
        return SessionMode.IDLE


def session_mode(session: SessionRecord | None) -> SessionMode:
    """Return the mode for a session, treating a missing one as new."""
    if session is None:
        return SessionMode.NEW
    return session.mode
