"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, Request, Response, status

from calories_bot.adapters.analysis_client import ANALYSIS_PATH
from calories_bot.adapters.telegram_client import TelegramClient
from calories_bot.api.telegram_models import TelegramUpdate
from calories_bot.app_logging import configure_logging
from calories_bot.containers import AppContainer
from calories_bot.telegram_commands import CHAT_MENU_BUTTON, telegram_commands

ANALYSIS_GREETING = "Hello from the background task!"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        await state_container.update_processor.process(update)
        return {"status": "ok"}

    @app.post(ANALYSIS_PATH, status_code=status.HTTP_204_NO_CONTENT)
    async def analysis_webhook(
        request: Request, background_tasks: BackgroundTasks
    ) -> Response:
        """Acknowledge a forwarded photo and greet its chat in the background."""
        state_container: AppContainer = request.app.state.container
        try:
            payload = await request.json()
            chat_id = _extract_chat_id(payload)
        except Exception:
            logger.exception("Failed to parse forwarded photo payload")
            chat_id = None
        if chat_id is not None:
            logger.info("Forwarded update has a chat id", extra={"chat_id": chat_id})
            background_tasks.add_task(
                _send_greeting, state_container.telegram_client, chat_id
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def _extract_chat_id(payload: object) -> int | None:
    """Return `message.chat.id` from a Telegram-shaped body, if present."""
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if not isinstance(message, dict):
        return None
    chat = message.get("chat")
    if not isinstance(chat, dict):
        return None
    chat_id = chat.get("id")
    if isinstance(chat_id, bool) or not isinstance(chat_id, int):
        return None
    return chat_id


async def _send_greeting(telegram_client: TelegramClient, chat_id: int) -> None:
    try:
        await telegram_client.send_message(chat_id=chat_id, text=ANALYSIS_GREETING)
    except Exception:
        logging.getLogger(__name__).exception(
            "Failed to send analysis greeting", extra={"chat_id": chat_id}
        )
