"""OpenAI-compatible chat backend for bot_lanes.

This module provides the chat-completions implementation of the text
backend interface. Any OpenAI-compatible endpoint can be targeted via
the base URL setting.
"""

from typing import Any, Self

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from bot_lanes.config import LLMSettings
from bot_lanes.errors import BackendError
from bot_lanes.interfaces.llm import ChatBackendInterface
from bot_lanes.logging import get_logger
from bot_lanes.models.turn import Turn

__all__ = [
    "OpenAIProvider",
]

logger = get_logger(__name__)


class OpenAIProvider(ChatBackendInterface):
    """OpenAI implementation of the chat backend interface.

    One request per call, no retries. A client error (4xx) is treated as
    a normal empty response; timeouts, connection failures, server
    errors and malformed payloads raise BackendError.
    """

    config_class = LLMSettings

    def __init__(self, settings: LLMSettings, client: AsyncOpenAI | None = None) -> None:
        """Initialize OpenAI provider.

        Args:
            settings: LLM configuration settings
            client: Preconfigured client (built from settings if None)
        """
        self._settings = settings
        if client is None:
            api_key = settings.api_key.get_secret_value() if settings.api_key else None
            client = AsyncOpenAI(
                api_key=api_key,
                base_url=settings.base_url,
                timeout=settings.timeout,
                max_retries=0,
            )
        self._client = client
        self._model = settings.model

    @classmethod
    async def from_config(cls, config: LLMSettings) -> Self:
        """Factory method for BotLanes instantiation.

        Args:
            config: LLM settings

        Returns:
            OpenAIProvider instance
        """
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict.

        Args:
            config: Dictionary with LLM settings

        Returns:
            OpenAIProvider instance
        """
        settings = LLMSettings(**config)
        return cls(settings)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

    async def complete(self, messages: list[Turn]) -> str | None:
        """Generate a reply for a conversation."""
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[turn.to_message() for turn in messages],  # type: ignore[misc]
                max_tokens=self._settings.max_tokens,
                temperature=self._settings.temperature,
                top_p=self._settings.top_p,
                stream=False,
            )
        except APIStatusError as e:
            if e.status_code < 500:
                logger.warning("openai_client_error", status=e.status_code, error=str(e))
                return None
            raise BackendError(f"server error {e.status_code}") from e
        except APIConnectionError as e:
            # APITimeoutError is a subclass
            raise BackendError(f"request failed: {e}") from e

        try:
            return response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise BackendError("malformed completion payload") from e
