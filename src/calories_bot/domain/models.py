"""Domain models for the calories bot."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RegistrationRecord:
    """Represents a user linked to a claimed wallet address."""

    user_id: int
    wallet_address: str
    registered_at: datetime
