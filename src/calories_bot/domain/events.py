"""Transport-independent inbound events."""

from dataclasses import dataclass
from enum import Enum


class EventKind(Enum):
    """Kinds of inbound events the dispatcher understands."""

    COMMAND = "command"
    TEXT = "text"
    PHOTO = "photo"
    OTHER = "other"


@dataclass(frozen=True)
class PhotoVariant:
    """One resolution of a photo attached to a message."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None

    def as_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "file_id": self.file_id,
            "file_unique_id": self.file_unique_id,
            "width": self.width,
            "height": self.height,
        }
        if self.file_size is not None:
            payload["file_size"] = self.file_size
        return payload


@dataclass(frozen=True)
class InboundEvent:
    """A single chat update reduced to what the bot needs."""

    kind: EventKind
    chat_id: int
    user_id: int | None = None
    command: str | None = None
    argument: str | None = None
    text: str | None = None
    photos: tuple[PhotoVariant, ...] = ()
