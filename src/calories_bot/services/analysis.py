"""Meal photo analysis: local stub or forwarding to an external service."""

import logging
import random
from dataclasses import dataclass, field
from typing import Protocol

from calories_bot.adapters.analysis_client import AnalysisClient
from calories_bot.adapters.telegram_file_client import TelegramFileClient
from calories_bot.domain.events import PhotoVariant
from calories_bot.services import messages

logger = logging.getLogger(__name__)

MIN_CALORIES = 200
MAX_CALORIES = 800


@dataclass(frozen=True)
class AnalysisRequest:
    """A meal photo accepted for analysis."""

    chat_id: int
    user_id: int
    photo: PhotoVariant


class PhotoAnalyzer(Protocol):
    """Interface for turning an accepted photo into replies."""

    @property
    def acknowledgement(self) -> str | None:
        """Text sent before analysis starts, if any."""

    async def analyze(self, request: AnalysisRequest) -> list[str]:
        """Analyze the photo and return reply texts to send."""


@dataclass
class StubCalorieAnalyzer:
    """Placeholder analyzer returning a random estimate."""

    rng: random.Random = field(default_factory=random.Random)

    @property
    def acknowledgement(self) -> str | None:
        return messages.PHOTO_RECEIVED

    def estimate(self, file_id: str) -> int:
        """Return a uniform integer in [MIN_CALORIES, MAX_CALORIES]."""
        return self.rng.randint(MIN_CALORIES, MAX_CALORIES)

    async def analyze(self, request: AnalysisRequest) -> list[str]:
        calories = self.estimate(request.photo.file_id)
        logger.info(
            "Simulated calorie analysis",
            extra={"user_id": request.user_id, "calories": calories},
        )
        return [messages.calorie_estimate(calories)]


@dataclass
class ForwardingCalorieAnalyzer:
    """Analyzer that hands the photo to an external analysis endpoint.

    The external service replies to the chat on its own, so nothing is sent
    from here on success.
    """

    file_client: TelegramFileClient
    analysis_client: AnalysisClient

    @property
    def acknowledgement(self) -> str | None:
        return None

    async def analyze(self, request: AnalysisRequest) -> list[str]:
        file_url = await self.file_client.get_file_url(request.photo.file_id)
        await self.analysis_client.forward_photo(
            build_forward_payload(request, file_url)
        )
        logger.info(
            "Forwarded photo for analysis",
            extra={"user_id": request.user_id, "file_id": request.photo.file_id},
        )
        return []


def build_forward_payload(
    request: AnalysisRequest, file_url: str
) -> dict[str, object]:
    """Build the Telegram-shaped body expected by the analysis endpoint."""
    return {
        "message": {
            "chat": {"id": request.chat_id},
            "from": {"id": request.user_id},
            "photo": request.photo.as_payload(),
            "fileUrl": file_url,
        }
    }
