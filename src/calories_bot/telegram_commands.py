"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Start the bot and register")
    HELP = TelegramCommand("help", "Show available commands")
    WALLET = TelegramCommand("wallet", "Link your wallet")
    SUBMIT = TelegramCommand("submit", "Submit a meal photo")
    REFERRAL = TelegramCommand("referral", "Get your referral link")

    @classmethod
    def from_name(cls, name: str | None) -> "BotCommand | None":
        """Return the command with the given keyword, if recognized."""
        for entry in cls:
            if entry.value.command == name:
                return entry
        return None


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}

START_CALLBACK_DATA = "start"
