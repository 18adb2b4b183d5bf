"""Anthropic chat backend for bot_lanes.

This module provides the Anthropic Messages API implementation of the
text backend interface. System turns are folded into the request's
system parameter since the API does not accept them inline.
"""

from typing import Any, Self

from anthropic import APIConnectionError, APIStatusError, AsyncAnthropic

from bot_lanes.config import LLMSettings
from bot_lanes.errors import BackendError
from bot_lanes.interfaces.llm import ChatBackendInterface
from bot_lanes.logging import get_logger
from bot_lanes.models.turn import Role, Turn

__all__ = [
    "AnthropicProvider",
]

logger = get_logger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicProvider(ChatBackendInterface):
    """Anthropic implementation of the chat backend interface.

    Same contract as the OpenAI provider: 4xx is an empty response,
    everything else that goes wrong raises BackendError.
    """

    config_class = LLMSettings

    def __init__(self, settings: LLMSettings, client: AsyncAnthropic | None = None) -> None:
        """Initialize Anthropic provider.

        Args:
            settings: LLM configuration settings
            client: Preconfigured client (built from settings if None)
        """
        self._settings = settings
        if client is None:
            api_key = settings.api_key.get_secret_value() if settings.api_key else None
            client = AsyncAnthropic(
                api_key=api_key,
                base_url=settings.base_url,
                timeout=settings.timeout,
                max_retries=0,
            )
        self._client = client
        # The shared default targets OpenAI; fall back to a Claude model
        model = settings.model
        self._model = model if model.startswith("claude") else DEFAULT_MODEL

    @classmethod
    async def from_config(cls, config: LLMSettings) -> Self:
        """Factory method for BotLanes instantiation.

        Args:
            config: LLM settings

        Returns:
            AnthropicProvider instance
        """
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict.

        Args:
            config: Dictionary with LLM settings

        Returns:
            AnthropicProvider instance
        """
        settings = LLMSettings(**config)
        return cls(settings)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

    async def complete(self, messages: list[Turn]) -> str | None:
        """Generate a reply for a conversation."""
        system = "\n\n".join(t.content for t in messages if t.role == Role.SYSTEM)
        dialogue = [t.to_message() for t in messages if t.role != Role.SYSTEM]

        kwargs: dict[str, Any] = {}
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._settings.max_tokens,
                temperature=self._settings.temperature,
                top_p=self._settings.top_p,
                messages=dialogue,  # type: ignore[arg-type]
                **kwargs,
            )
        except APIStatusError as e:
            if e.status_code < 500:
                logger.warning("anthropic_client_error", status=e.status_code, error=str(e))
                return None
            raise BackendError(f"server error {e.status_code}") from e
        except APIConnectionError as e:
            raise BackendError(f"request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return text or None
