"""HTTP client for the external meal analysis service."""

from dataclasses import dataclass
from typing import Protocol

import httpx

ANALYSIS_PATH = "/api/get-calories-from-photo"


class AnalysisClient(Protocol):
    """Interface for forwarding photos to the analysis service."""

    async def forward_photo(self, payload: dict[str, object]) -> None:
        """Post a photo payload; the response body is ignored."""


@dataclass
class HttpxAnalysisClient(AnalysisClient):
    """Analysis client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxAnalysisClient":
        """Create an analysis client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def forward_photo(self, payload: dict[str, object]) -> None:
        """Post the payload to the analysis endpoint."""
        url = f"{self.base_url}{ANALYSIS_PATH}"
        response = await self.http_client.post(url, json=payload, timeout=30)
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
