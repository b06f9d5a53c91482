"""Remote image download client."""

import logging
from dataclasses import dataclass

import httpx

from hairstyle_studio.services.images import ImageFetcher

logger = logging.getLogger(__name__)


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx with a per-request deadline."""

    http_client: httpx.AsyncClient
    timeout_seconds: float

    @classmethod
    def create(cls, timeout_seconds: float) -> "HttpxImageFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout_seconds=timeout_seconds,
        )

    async def fetch(self, url: str) -> bytes | None:
        """Download image bytes; failures are logged and reported as None."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout_seconds)
        except httpx.HTTPError:
            logger.exception("Failed to download image", extra={"url": url})
            return None
        if response.status_code != httpx.codes.OK:
            logger.warning(
                "Image download returned non-success status",
                extra={"url": url, "status_code": response.status_code},
            )
            return None
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
