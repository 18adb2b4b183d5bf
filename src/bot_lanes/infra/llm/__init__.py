"""Chat backend implementations for bot_lanes."""

from bot_lanes.infra.llm.anthropic_provider import AnthropicProvider
from bot_lanes.infra.llm.openai_provider import OpenAIProvider
from bot_lanes.interfaces.llm import ChatBackendInterface

__all__ = ["OpenAIProvider", "AnthropicProvider", "backend_class_for"]

_BACKENDS: dict[str, type[ChatBackendInterface]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def backend_class_for(provider: str) -> type[ChatBackendInterface]:
    """Resolve the backend class for a configured provider name.

    Raises:
        ValueError: If the provider is unknown
    """
    try:
        return _BACKENDS[provider.lower()]
    except KeyError:
        raise ValueError(
            f"unknown LLM provider '{provider}' (expected one of: {', '.join(_BACKENDS)})"
        ) from None
