"""Shared test fixtures."""

import random
from dataclasses import dataclass, field

import pytest

from calories_bot.adapters.analysis_client import AnalysisClient
from calories_bot.adapters.memory_registration_repository import (
    InMemoryRegistrationRepository,
)
from calories_bot.adapters.memory_session_repository import InMemorySessionRepository
from calories_bot.adapters.telegram_client import TelegramClient
from calories_bot.adapters.telegram_file_client import TelegramFileClient
from calories_bot.api.updates import UpdateProcessor
from calories_bot.config import Settings
from calories_bot.containers import AppContainer, bot_options
from calories_bot.services.analysis import StubCalorieAnalyzer
from calories_bot.services.commands import CommandDispatcher
from calories_bot.services.registrations import RegistrationService

VALID_WALLET = "0x" + "a" * 40
OTHER_WALLET = "0x" + "b" * 40


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    markups: list[dict | None] = field(default_factory=list)
    photos: list[tuple[int, str, str | None, dict | None]] = field(
        default_factory=list
    )
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None
    updates: list[list[dict[str, object]]] = field(default_factory=list)
    offsets: list[int | None] = field(default_factory=list)
    fail_sends: bool = False

    async def send_message(
        self, chat_id: int, text: str, reply_markup: dict | None = None
    ) -> None:
        if self.fail_sends:
            raise RuntimeError("telegram unavailable")
        self.messages.append((chat_id, text))
        self.markups.append(reply_markup)

    async def send_photo(
        self,
        chat_id: int,
        photo: str,
        caption: str | None = None,
        reply_markup: dict | None = None,
    ) -> None:
        self.photos.append((chat_id, photo, caption, reply_markup))

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button

    async def get_updates(
        self, offset: int | None = None, timeout: int = 30
    ) -> list[dict[str, object]]:
        self.offsets.append(offset)
        if self.updates:
            return self.updates.pop(0)
        return []


@dataclass
class FakeTelegramFileClient(TelegramFileClient):
    """Fake file client returning a predictable URL."""

    requested: list[str] = field(default_factory=list)

    async def get_file_url(self, file_id: str) -> str:
        self.requested.append(file_id)
        return f"https://files.test/{file_id}.jpg"


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client recording forwarded payloads."""

    payloads: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None

    async def forward_photo(self, payload: dict[str, object]) -> None:
        if self.error is not None:
            raise self.error
        self.payloads.append(payload)


@dataclass
class RecordingAnalyzer(StubCalorieAnalyzer):
    """Stub analyzer that remembers which photos it saw."""

    seen_file_ids: list[str] = field(default_factory=list)

    def estimate(self, file_id: str) -> int:
        self.seen_file_ids.append(file_id)
        return super().estimate(file_id)


def message_payload(
    user_id: int | None = 123,
    chat_id: int = 99,
    update_id: int = 1,
    **fields: object,
) -> dict[str, object]:
    """Build a Telegram update carrying a message."""
    message: dict[str, object] = {
        "message_id": update_id * 10,
        "date": 1700000000 + update_id,
        "chat": {"id": chat_id, "type": "private"},
    }
    if user_id is not None:
        message["from"] = {"id": user_id, "is_bot": False, "first_name": "Test"}
    message.update(fields)
    return {"update_id": update_id, "message": message}


def photo_sizes(*file_ids: str) -> list[dict[str, object]]:
    """Build photo variants ordered from smallest to largest."""
    return [
        {
            "file_id": file_id,
            "file_unique_id": f"{file_id}-unique",
            "width": 90 * (index + 1),
            "height": 90 * (index + 1),
        }
        for index, file_id in enumerate(file_ids)
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(telegram_bot_token="test-token", _env_file=None)


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def registration_repository() -> InMemoryRegistrationRepository:
    return InMemoryRegistrationRepository()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def analyzer() -> RecordingAnalyzer:
    return RecordingAnalyzer(rng=random.Random(7))


@pytest.fixture
def container(
    settings: Settings,
    telegram_client: FakeTelegramClient,
    registration_repository: InMemoryRegistrationRepository,
    session_repository: InMemorySessionRepository,
    analyzer: RecordingAnalyzer,
) -> AppContainer:
    registration_service = RegistrationService(registration_repository)
    dispatcher = CommandDispatcher(
        session_repository=session_repository,
        registration_service=registration_service,
        options=bot_options(settings),
    )
    update_processor = UpdateProcessor(
        dispatcher=dispatcher,
        telegram_client=telegram_client,
        analyzer=analyzer,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        registration_service=registration_service,
        session_repository=session_repository,
        dispatcher=dispatcher,
        analyzer=analyzer,
        update_processor=update_processor,
        close_resources=close_resources,
    )
