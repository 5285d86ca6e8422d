"""Session state machine for registration and meal submission.

Transitions are pure: they take the current session (or ``None`` for a user
the bot has never seen) and return a :class:`Transition` describing the new
session, the replies to send and any side effect to perform. Storage and I/O
happen in the dispatcher and at the transport boundary.
"""

from dataclasses import dataclass
from typing import Protocol

from calories_bot.domain.events import PhotoVariant
from calories_bot.domain.sessions import SessionRecord
from calories_bot.services import messages
from calories_bot.services.registrations import is_valid_wallet_address


class SessionRepository(Protocol):
    """Storage interface for conversation sessions."""

    def get(self, user_id: int) -> SessionRecord | None:
        """Return the session for a user id, if present."""

    def save(self, session: SessionRecord) -> None:
        """Create or replace the session for its user id."""


@dataclass(frozen=True)
class Reply:
    """Represents one outbound message."""

    text: str
    photo: str | None = None
    reply_markup: dict | None = None


@dataclass(frozen=True)
class Transition:
    """Result of feeding one event into the state machine.

    ``session`` is ``None`` when the stored session must stay untouched.
    """

    session: SessionRecord | None = None
    replies: tuple[Reply, ...] = ()
    register_wallet: str | None = None
    analyze_photo: PhotoVariant | None = None


def on_start(
    session: SessionRecord | None, user_id: int, is_registered: bool
) -> Transition:
    """Greet a returning user or begin wallet registration."""
    if is_registered:
        return Transition(replies=(Reply(messages.WELCOME_BACK),))
    return Transition(
        session=SessionRecord(
            user_id=user_id,
            awaiting_photo=False,
            awaiting_wallet=True,
            last_command="start",
        ),
        replies=(Reply(messages.WELCOME_NEW),),
    )


def on_wallet(session: SessionRecord | None, user_id: int) -> Transition:
    """Reset the session and wait for a wallet address."""
    return Transition(
        session=SessionRecord(
            user_id=user_id,
            awaiting_photo=False,
            awaiting_wallet=True,
            last_command="wallet",
        ),
        replies=(Reply(messages.WALLET_PROMPT),),
    )


def on_submit(
    session: SessionRecord | None,
    user_id: int,
    is_registered: bool,
    require_registration: bool,
) -> Transition:
    """Wait for a meal photo, keeping any other pending expectation."""
    if require_registration and not is_registered:
        return Transition(replies=(Reply(messages.REGISTER_FIRST),))
    current = session or SessionRecord(user_id=user_id)
    return Transition(
        session=SessionRecord(
            user_id=user_id,
            awaiting_photo=True,
            awaiting_wallet=current.awaiting_wallet,
            last_command="submit",
        ),
        replies=(Reply(messages.SUBMIT_PROMPT),),
    )


def on_text(session: SessionRecord | None, text: str) -> Transition:
    """Treat text as a wallet address when one is expected, else echo it."""
    if session is None or not session.awaiting_wallet:
        return Transition(replies=(Reply(messages.echo(text)),))
    if not is_valid_wallet_address(text):
        return Transition(replies=(Reply(messages.INVALID_WALLET),))
    return Transition(
        session=SessionRecord(
            user_id=session.user_id,
            awaiting_photo=False,
            awaiting_wallet=False,
            last_command=session.last_command,
        ),
        replies=(Reply(messages.registered(text)),),
        register_wallet=text,
    )


def on_photo(
    session: SessionRecord | None, photos: tuple[PhotoVariant, ...]
) -> Transition:
    """Accept a meal photo only right after /submit."""
    if session is None or not session.awaiting_photo:
        return Transition(replies=(Reply(messages.SUBMIT_FIRST),))
    cleared = SessionRecord(
        user_id=session.user_id,
        awaiting_photo=False,
        awaiting_wallet=session.awaiting_wallet,
        last_command=session.last_command,
    )
    if not photos:
        return Transition(session=cleared, replies=(Reply(messages.EMPTY_PHOTO),))
    return Transition(session=cleared, analyze_photo=select_photo(photos))


def select_photo(photos: tuple[PhotoVariant, ...]) -> PhotoVariant:
    """Pick the last variant, which Telegram orders as the largest."""
    return photos[-1]
