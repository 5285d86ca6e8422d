"""Registration business logic."""

import logging
from dataclasses import dataclass
from typing import Protocol

from calories_bot.domain.models import RegistrationRecord

logger = logging.getLogger(__name__)

WALLET_PREFIX = "0x"
WALLET_LENGTH = 42


class RegistrationRepository(Protocol):
    """Storage interface for wallet registrations."""

    def get(self, user_id: int) -> RegistrationRecord | None:
        """Return the registration for a user id, if present."""

    def upsert(self, user_id: int, wallet_address: str) -> RegistrationRecord:
        """Create or update the registration for a user id and return it."""

    def exists(self, user_id: int) -> bool:
        """Return true when the user id has a registration."""


def is_valid_wallet_address(address: str) -> bool:
    """Weak structural check: `0x` prefix and 42 characters, nothing more."""
    return address.startswith(WALLET_PREFIX) and len(address) == WALLET_LENGTH


@dataclass
class RegistrationService:
    """Application service for wallet registration."""

    repository: RegistrationRepository

    def is_registered(self, user_id: int) -> bool:
        return self.repository.exists(user_id)

    def register(self, user_id: int, wallet_address: str) -> RegistrationRecord:
        """Link a wallet address to the user, replacing any previous one."""
        if not is_valid_wallet_address(wallet_address):
            raise ValueError(f"Invalid wallet address: {wallet_address!r}")
        record = self.repository.upsert(user_id, wallet_address)
        logger.info("Registered wallet", extra={"user_id": user_id})
        return record
