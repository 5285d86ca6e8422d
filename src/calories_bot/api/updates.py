"""Turn Telegram updates into events and deliver the resulting replies."""

import logging
from contextlib import AbstractAsyncContextManager, nullcontext
from dataclasses import dataclass

from calories_bot.adapters.telegram_client import TelegramClient
from calories_bot.api.telegram_models import TelegramMessage, TelegramUpdate
from calories_bot.domain.events import EventKind, InboundEvent, PhotoVariant
from calories_bot.services import messages
from calories_bot.services.analysis import AnalysisRequest, PhotoAnalyzer
from calories_bot.services.commands import CommandDispatcher, Outcome
from calories_bot.services.locks import UserLocks
from calories_bot.services.sessions import Reply
from calories_bot.telegram_commands import START_CALLBACK_DATA

logger = logging.getLogger(__name__)


def parse_command(text: str) -> tuple[str, str | None] | None:
    """Split `/name[@bot] [argument]` into its keyword and argument."""
    if not text.startswith("/"):
        return None
    head, _, rest = text.partition(" ")
    name = head[1:].split("@", maxsplit=1)[0]
    if not name:
        return None
    argument = rest.strip() or None
    return name, argument


def event_from_message(message: TelegramMessage) -> InboundEvent:
    """Classify a Telegram message as a command, text, photo or other event."""
    user_id = message.from_user.id if message.from_user else None
    chat_id = message.chat.id
    if message.photo is not None:
        return InboundEvent(
            kind=EventKind.PHOTO,
            chat_id=chat_id,
            user_id=user_id,
            photos=tuple(
                PhotoVariant(
                    file_id=size.file_id,
                    file_unique_id=size.file_unique_id,
                    width=size.width,
                    height=size.height,
                    file_size=size.file_size,
                )
                for size in message.photo
            ),
        )
    if message.text is not None:
        parsed = parse_command(message.text)
        if parsed:
            command, argument = parsed
            return InboundEvent(
                kind=EventKind.COMMAND,
                chat_id=chat_id,
                user_id=user_id,
                command=command,
                argument=argument,
                text=message.text,
            )
        return InboundEvent(
            kind=EventKind.TEXT, chat_id=chat_id, user_id=user_id, text=message.text
        )
    return InboundEvent(kind=EventKind.OTHER, chat_id=chat_id, user_id=user_id)


def event_from_update(update: TelegramUpdate) -> InboundEvent | None:
    """Return the event carried by an update, or None when there is no chat."""
    callback = update.callback_query
    if callback is not None:
        if callback.message is None:
            return None
        chat_id = callback.message.chat.id
        if callback.data == START_CALLBACK_DATA:
            return InboundEvent(
                kind=EventKind.COMMAND,
                chat_id=chat_id,
                user_id=callback.from_user.id,
                command="start",
                text="/start",
            )
        return InboundEvent(
            kind=EventKind.OTHER, chat_id=chat_id, user_id=callback.from_user.id
        )
    if update.message is not None:
        return event_from_message(update.message)
    return None


@dataclass
class UpdateProcessor:
    """Runs one update through the dispatcher and performs its I/O."""

    dispatcher: CommandDispatcher
    telegram_client: TelegramClient
    analyzer: PhotoAnalyzer
    user_locks: UserLocks | None = None

    async def process(self, update: TelegramUpdate) -> None:
        """Handle an update to completion; failures never escape."""
        if update.callback_query is not None:
            try:
                await self.telegram_client.answer_callback_query(
                    update.callback_query.id
                )
            except Exception:
                logger.exception(
                    "Failed to answer callback query",
                    extra={"callback_query_id": update.callback_query.id},
                )
        event = event_from_update(update)
        if event is None:
            return
        async with self._serialized(event.user_id):
            try:
                outcome = self.dispatcher.dispatch(event)
                await self.deliver(outcome)
            except Exception:
                logger.exception(
                    "Failed to handle update",
                    extra={"update_id": update.update_id, "user_id": event.user_id},
                )
                await self._send_failure(event.chat_id, messages.COMMAND_FAILED)

    async def deliver(self, outcome: Outcome) -> None:
        """Send replies in order, then run any requested photo analysis."""
        for reply in outcome.replies:
            await self._send(outcome.chat_id, reply)
        if outcome.analysis is not None:
            await self._analyze(outcome.analysis)

    async def _analyze(self, request: AnalysisRequest) -> None:
        logger.info(
            "Received photo",
            extra={"user_id": request.user_id, "file_id": request.photo.file_id},
        )
        try:
            acknowledgement = self.analyzer.acknowledgement
            if acknowledgement:
                await self.telegram_client.send_message(
                    chat_id=request.chat_id, text=acknowledgement
                )
            replies = await self.analyzer.analyze(request)
            for text in replies:
                await self.telegram_client.send_message(
                    chat_id=request.chat_id, text=text
                )
        except Exception:
            logger.exception(
                "Photo analysis failed",
                extra={"user_id": request.user_id, "file_id": request.photo.file_id},
            )
            await self._send_failure(request.chat_id, messages.ANALYSIS_FAILED)

    async def _send(self, chat_id: int, reply: Reply) -> None:
        if reply.photo is not None:
            await self.telegram_client.send_photo(
                chat_id=chat_id,
                photo=reply.photo,
                caption=reply.text,
                reply_markup=reply.reply_markup,
            )
            return
        await self.telegram_client.send_message(
            chat_id=chat_id, text=reply.text, reply_markup=reply.reply_markup
        )

    async def _send_failure(self, chat_id: int, text: str) -> None:
        try:
            await self.telegram_client.send_message(chat_id=chat_id, text=text)
        except Exception:
            logger.exception("Failed to send error reply", extra={"chat_id": chat_id})

    def _serialized(self, user_id: int | None) -> AbstractAsyncContextManager:
        if self.user_locks is None or user_id is None:
            return nullcontext()
        return self.user_locks.for_user(user_id)
