"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calories_bot.adapters.analysis_client import HttpxAnalysisClient
from calories_bot.adapters.memory_registration_repository import (
    InMemoryRegistrationRepository,
)
from calories_bot.adapters.memory_session_repository import InMemorySessionRepository
from calories_bot.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from calories_bot.adapters.telegram_file_client import HttpxTelegramFileClient
from calories_bot.api.updates import UpdateProcessor
from calories_bot.config import Settings
from calories_bot.services.analysis import (
    ForwardingCalorieAnalyzer,
    PhotoAnalyzer,
    StubCalorieAnalyzer,
)
from calories_bot.services.commands import BotOptions, CommandDispatcher, WelcomeCard
from calories_bot.services.locks import UserLocks
from calories_bot.services.registrations import RegistrationService
from calories_bot.services.sessions import SessionRepository


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    registration_service: RegistrationService
    session_repository: SessionRepository
    dispatcher: CommandDispatcher
    analyzer: PhotoAnalyzer
    update_processor: UpdateProcessor
    close_resources: Callable[[], Awaitable[None]]


def bot_options(settings: Settings) -> BotOptions:
    """Translate settings into dispatcher behavior toggles."""
    welcome_card = None
    if settings.rich_welcome and settings.welcome_image_url:
        welcome_card = WelcomeCard(
            image_url=settings.welcome_image_url,
            link_text=settings.welcome_link_text,
            link_url=settings.welcome_link_url,
        )
    return BotOptions(
        require_registration=settings.require_registration,
        referral_base_url=settings.referral_base_url,
        welcome_card=welcome_card,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    closers: list[Callable[[], Awaitable[None]]] = [telegram_client.close]

    analyzer: PhotoAnalyzer
    if resolved_settings.analysis_mode == "forward":
        file_client = HttpxTelegramFileClient.create(
            resolved_settings.telegram_bot_token
        )
        analysis_client = HttpxAnalysisClient.create(
            str(resolved_settings.analysis_base_url)
        )
        closers.extend([file_client.close, analysis_client.close])
        analyzer = ForwardingCalorieAnalyzer(
            file_client=file_client, analysis_client=analysis_client
        )
    else:
        analyzer = StubCalorieAnalyzer()

    registration_service = RegistrationService(InMemoryRegistrationRepository())
    session_repository = InMemorySessionRepository()
    dispatcher = CommandDispatcher(
        session_repository=session_repository,
        registration_service=registration_service,
        options=bot_options(resolved_settings),
    )
    update_processor = UpdateProcessor(
        dispatcher=dispatcher,
        telegram_client=telegram_client,
        analyzer=analyzer,
        user_locks=UserLocks() if resolved_settings.serialize_per_user else None,
    )

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        registration_service=registration_service,
        session_repository=session_repository,
        dispatcher=dispatcher,
        analyzer=analyzer,
        update_processor=update_processor,
        close_resources=close_resources,
    )
