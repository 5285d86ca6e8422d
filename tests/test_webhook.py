"""Tests for Telegram webhook handling."""

from fastapi.testclient import TestClient

from calories_bot.api.app import ANALYSIS_GREETING, create_app
from calories_bot.services import messages
from calories_bot.services.analysis import ForwardingCalorieAnalyzer
from calories_bot.services.commands import BotOptions, WelcomeCard
from tests.conftest import (
    VALID_WALLET,
    FakeAnalysisClient,
    FakeTelegramClient,
    FakeTelegramFileClient,
    RecordingAnalyzer,
    message_payload,
    photo_sizes,
)


def _post(client: TestClient, payload: dict[str, object]) -> None:
    response = client.post("/telegram/webhook", json=payload)
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_start_then_wallet_registers_user(
    container, telegram_client: FakeTelegramClient, registration_repository
) -> None:
    client = TestClient(create_app(container))

    _post(client, message_payload(text="/start", update_id=1))
    _post(client, message_payload(text=VALID_WALLET, update_id=2))

    assert telegram_client.messages[0] == (99, messages.WELCOME_NEW)
    assert "Successfully registered" in telegram_client.messages[1][1]
    assert registration_repository.get(123).wallet_address == VALID_WALLET


def test_submit_then_photo_replies_with_estimate(
    container,
    telegram_client: FakeTelegramClient,
    registration_repository,
    analyzer: RecordingAnalyzer,
) -> None:
    registration_repository.upsert(123, VALID_WALLET)
    client = TestClient(create_app(container))

    _post(client, message_payload(text="/submit", update_id=1))
    _post(client, message_payload(photo=photo_sizes("p1", "p2", "p3"), update_id=2))

    texts = [text for _, text in telegram_client.messages]
    assert texts[0] == messages.SUBMIT_PROMPT
    assert texts[1] == messages.PHOTO_RECEIVED
    assert analyzer.seen_file_ids == ["p3"]
    calories = int(texts[2].split("about ")[1].split(" ")[0])
    assert 200 <= calories <= 800


def test_photo_without_submit_is_rejected(
    container, telegram_client: FakeTelegramClient, session_repository
) -> None:
    client = TestClient(create_app(container))

    _post(client, message_payload(photo=photo_sizes("p1")))

    assert telegram_client.messages == [(99, messages.SUBMIT_FIRST)]
    assert session_repository.sessions == {}


def test_message_without_sender_gets_apology(
    container, telegram_client: FakeTelegramClient, session_repository
) -> None:
    client = TestClient(create_app(container))

    _post(client, message_payload(user_id=None, text="/start"))

    assert telegram_client.messages == [(99, messages.UNIDENTIFIED_USER)]
    assert session_repository.sessions == {}


def test_sticker_message_is_ignored(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    _post(client, message_payload(sticker={"file_id": "s"}))

    assert telegram_client.messages == []


def test_handler_failure_sends_generic_reply(
    container, telegram_client: FakeTelegramClient
) -> None:
    class ExplodingDispatcher:
        def dispatch(self, event):  # type: ignore[no-untyped-def]
            raise RuntimeError("boom")

    container.update_processor.dispatcher = ExplodingDispatcher()
    client = TestClient(create_app(container))

    _post(client, message_payload(text="/help"))

    assert telegram_client.messages == [(99, messages.COMMAND_FAILED)]


def test_forwarding_failure_is_reported(
    container, telegram_client: FakeTelegramClient, registration_repository
) -> None:
    registration_repository.upsert(123, VALID_WALLET)
    container.update_processor.analyzer = ForwardingCalorieAnalyzer(
        file_client=FakeTelegramFileClient(),
        analysis_client=FakeAnalysisClient(error=RuntimeError("down")),
    )
    client = TestClient(create_app(container))

    _post(client, message_payload(text="/submit", update_id=1))
    _post(client, message_payload(photo=photo_sizes("p1"), update_id=2))

    assert telegram_client.messages[-1] == (99, messages.ANALYSIS_FAILED)


def test_forwarding_success_sends_nothing_more(
    container, telegram_client: FakeTelegramClient, registration_repository
) -> None:
    registration_repository.upsert(123, VALID_WALLET)
    analysis_client = FakeAnalysisClient()
    container.update_processor.analyzer = ForwardingCalorieAnalyzer(
        file_client=FakeTelegramFileClient(), analysis_client=analysis_client
    )
    client = TestClient(create_app(container))

    _post(client, message_payload(text="/submit", update_id=1))
    _post(client, message_payload(photo=photo_sizes("p1", "p2"), update_id=2))

    assert [text for _, text in telegram_client.messages] == [
        messages.SUBMIT_PROMPT
    ]
    assert analysis_client.payloads[0]["message"]["photo"]["file_id"] == "p2"


def test_mine_now_button_runs_start(
    container, telegram_client: FakeTelegramClient, session_repository
) -> None:
    container.dispatcher.options = BotOptions(
        welcome_card=WelcomeCard(
            image_url="https://img.test/mine.png",
            link_text="Site",
            link_url="https://calories.test",
        )
    )
    client = TestClient(create_app(container))

    payload = {
        "update_id": 7,
        "callback_query": {
            "id": "cbq-1",
            "from": {"id": 555, "is_bot": False, "first_name": "Test"},
            "message": {
                "message_id": 70,
                "date": 1700000007,
                "chat": {"id": 202, "type": "private"},
                "caption": "Welcome",
            },
            "data": "start",
        },
    }
    _post(client, payload)

    assert telegram_client.callbacks == [("cbq-1", None)]
    chat_id, photo, caption, markup = telegram_client.photos[0]
    assert (chat_id, photo, caption) == (
        202,
        "https://img.test/mine.png",
        messages.WELCOME_NEW,
    )
    assert markup is not None
    assert session_repository.get(555).awaiting_wallet


def test_analysis_webhook_greets_chat(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/get-calories-from-photo",
        json={"message": {"chat": {"id": 321}, "from": {"id": 1}}},
    )

    assert response.status_code == 204
    assert response.content == b""
    assert telegram_client.messages == [(321, ANALYSIS_GREETING)]


def test_analysis_webhook_always_acknowledges(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    no_chat = client.post("/api/get-calories-from-photo", json={"hello": "world"})
    garbage = client.post(
        "/api/get-calories-from-photo",
        content=b"not json",
        headers={"content-type": "application/json"},
    )
    telegram_client.fail_sends = True
    failing = client.post(
        "/api/get-calories-from-photo", json={"message": {"chat": {"id": 5}}}
    )

    assert [no_chat.status_code, garbage.status_code, failing.status_code] == [
        204,
        204,
        204,
    ]
    assert telegram_client.messages == []


def test_lifespan_syncs_commands(
    container, telegram_client: FakeTelegramClient
) -> None:
    with TestClient(create_app(container)):
        pass

    assert telegram_client.commands is not None
    assert telegram_client.commands[0]["command"] == "start"
    assert telegram_client.menu_button == {"type": "commands"}
