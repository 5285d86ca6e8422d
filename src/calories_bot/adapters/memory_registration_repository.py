"""Process-local registration storage."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from calories_bot.domain.models import RegistrationRecord
from calories_bot.services.registrations import RegistrationRepository


@dataclass
class InMemoryRegistrationRepository(RegistrationRepository):
    """Registrations keyed by user id, kept for the process lifetime."""

    records: dict[int, RegistrationRecord] = field(default_factory=dict)

    def get(self, user_id: int) -> RegistrationRecord | None:
        return self.records.get(user_id)

    def upsert(self, user_id: int, wallet_address: str) -> RegistrationRecord:
        """Insert a registration or overwrite the wallet of an existing one."""
        existing = self.records.get(user_id)
        registered_at = (
            existing.registered_at if existing else datetime.now(tz=UTC)
        )
        record = RegistrationRecord(
            user_id=user_id,
            wallet_address=wallet_address,
            registered_at=registered_at,
        )
        self.records[user_id] = record
        return record

    def exists(self, user_id: int) -> bool:
        return user_id in self.records
