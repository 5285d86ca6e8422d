"""Long-polling runner for environments without a public webhook."""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from calories_bot.api.telegram_models import TelegramUpdate
from calories_bot.app_logging import configure_logging
from calories_bot.containers import AppContainer, build_container
from calories_bot.telegram_commands import CHAT_MENU_BUTTON, telegram_commands

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 1.0


async def poll(container: AppContainer, max_batches: int | None = None) -> None:
    """Fetch update batches and process each update in order."""
    client = container.telegram_client
    processor = container.update_processor
    offset: int | None = None
    batches = 0
    while max_batches is None or batches < max_batches:
        batches += 1
        try:
            raw_updates = await client.get_updates(
                offset=offset, timeout=container.settings.poll_timeout
            )
        except (httpx.HTTPError, RuntimeError):
            logger.exception("Failed to fetch updates")
            await asyncio.sleep(RETRY_DELAY_SECONDS)
            continue
        for raw in raw_updates:
            offset = int(raw["update_id"]) + 1
            try:
                update = TelegramUpdate.model_validate(raw)
            except ValidationError:
                logger.warning("Skipping malformed update", extra={"offset": offset})
                continue
            await processor.process(update)


async def run(container: AppContainer) -> None:
    """Sync bot commands, then poll until cancelled."""
    try:
        await container.telegram_client.set_my_commands(telegram_commands())
        await container.telegram_client.set_chat_menu_button(CHAT_MENU_BUTTON)
    except Exception:
        logger.exception("Failed to sync Telegram bot commands")
    logger.info("Calories.fun bot is up and running...")
    try:
        await poll(container)
    finally:
        await container.close_resources()


def main() -> None:
    """Console entrypoint."""
    configure_logging()
    container = build_container()
    try:
        asyncio.run(run(container))
    except KeyboardInterrupt:
        logger.info("Calories.fun bot stopped")


if __name__ == "__main__":
    main()
