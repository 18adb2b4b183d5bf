"""bot_lanes - Conversational chat-bot core with per-conversation ordering.

This package provides tools for:
- Serializing work per conversation while conversations run concurrently
- Keeping a bounded rolling context per conversation
- Extracting side-effect commands (reactions, cached animations) from model output
- Best-effort dispatch of those side effects
- A content-addressed media cache and an append-only event log on MongoDB

Example usage:
    from bot_lanes import (
        BotLanes,
        BotLanesConfig,
        FluxImageClient,
        MongoStorageRepository,
        OpenAIProvider,
        TelegramTransport,
    )

    # Config loaded from .env automatically
    config = BotLanesConfig()
    transport = TelegramTransport(config.telegram)
    async with BotLanes(
        storage_class=MongoStorageRepository,
        backend_class=OpenAIProvider,
        transport=transport,
        image_class=FluxImageClient,
        config=config,
    ) as bot:
        await transport.run(bot.submit)
"""

__version__ = "0.1.0"

# Orchestrator
from bot_lanes.config import BotLanesConfig
from bot_lanes.errors import BackendError, BotLanesError, ImageGenerationError, TransportError

# Implementations
from bot_lanes.infra.image.flux_client import FluxImageClient
from bot_lanes.infra.llm.anthropic_provider import AnthropicProvider
from bot_lanes.infra.llm.openai_provider import OpenAIProvider
from bot_lanes.infra.mongo.repositories import MongoStorageRepository
from bot_lanes.infra.telegram.transport import TelegramTransport

# Interfaces
from bot_lanes.interfaces.image import ImageGeneratorInterface
from bot_lanes.interfaces.llm import ChatBackendInterface
from bot_lanes.interfaces.storage import StorageInterface
from bot_lanes.interfaces.transport import TransportInterface
from bot_lanes.models.inbound import InboundMessage
from bot_lanes.orchestrator import BotLanes, Outcome

__all__ = [  # noqa: RUF022
    # Orchestrator
    "BotLanes",
    "BotLanesConfig",
    "InboundMessage",
    "Outcome",
    # Implementations
    "MongoStorageRepository",
    "OpenAIProvider",
    "AnthropicProvider",
    "FluxImageClient",
    "TelegramTransport",
    # Interfaces
    "ChatBackendInterface",
    "ImageGeneratorInterface",
    "StorageInterface",
    "TransportInterface",
    # Errors
    "BotLanesError",
    "BackendError",
    "ImageGenerationError",
    "TransportError",
]
