"""Interface contracts for bot_lanes.

This module exports all Protocol-based interfaces for dependency injection.
"""

from bot_lanes.interfaces.image import ImageGeneratorInterface
from bot_lanes.interfaces.llm import ChatBackendInterface
from bot_lanes.interfaces.storage import (
    EventStoreInterface,
    MediaStoreInterface,
    StorageInterface,
)
from bot_lanes.interfaces.transport import (
    MediaKind,
    PresenceKind,
    RenderMode,
    TransportInterface,
)

__all__ = [
    "ChatBackendInterface",
    "EventStoreInterface",
    "ImageGeneratorInterface",
    "MediaKind",
    "MediaStoreInterface",
    "PresenceKind",
    "RenderMode",
    "StorageInterface",
    "TransportInterface",
]
