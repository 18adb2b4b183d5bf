"""Flux web image backend for bot_lanes.

This module provides a prompt-to-image client for the public Flux
generation endpoint: the prompt is URL-encoded into the path and the
response body is the image itself.
"""

import random
from typing import Any, Self
from urllib.parse import quote

import httpx

from bot_lanes.config import ImageSettings
from bot_lanes.errors import ImageGenerationError
from bot_lanes.interfaces.image import ImageGeneratorInterface
from bot_lanes.logging import get_logger

__all__ = [
    "FluxImageClient",
]

logger = get_logger(__name__)


class FluxImageClient(ImageGeneratorInterface):
    """httpx implementation of the image backend interface.

    Example:
        client = await FluxImageClient.from_config(ImageSettings())
        data = await client.generate("a sunset over the sea")
    """

    config_class = ImageSettings

    def __init__(self, settings: ImageSettings, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the client.

        Args:
            settings: Image backend settings
            client: Preconfigured HTTP client (built from settings if None)
        """
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.timeout,
            follow_redirects=True,
        )

    @classmethod
    async def from_config(cls, config: ImageSettings) -> Self:
        """Factory method for BotLanes instantiation."""
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict."""
        return cls(ImageSettings(**config))

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def build_url(self, prompt: str, seed: int | None = None) -> str:
        """Build the generation URL for a prompt."""
        if seed is None:
            seed = random.randint(0, 999)
        base = self._settings.base_url.rstrip("/")
        query = httpx.QueryParams(
            {
                "width": self._settings.width,
                "height": self._settings.height,
                "seed": seed,
                "model": self._settings.model,
                "nologo": "true",
                "nofeed": "true",
            }
        )
        return f"{base}/generate/{quote(prompt, safe='')}?{query}"

    async def generate(self, prompt: str) -> bytes:
        """Render an image for a prompt."""
        if not prompt.strip():
            raise ImageGenerationError("empty prompt")

        url = self.build_url(prompt)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ImageGenerationError(f"image request failed: {e}") from e

        if not response.content:
            raise ImageGenerationError("Empty image response")

        logger.info("image_generated", size=len(response.content))
        return response.content
