"""Per-user serialization of event handling."""

import asyncio
from dataclasses import dataclass, field


@dataclass
class UserLocks:
    """Hands out one asyncio lock per user id.

    Locks are created lazily and kept for the process lifetime, like sessions.
    """

    _locks: dict[int, asyncio.Lock] = field(default_factory=dict)

    def for_user(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock
