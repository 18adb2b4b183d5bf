"""Exception types for bot_lanes."""

__all__ = [
    "BotLanesError",
    "BackendError",
    "ImageGenerationError",
    "TransportError",
]


class BotLanesError(Exception):
    """Base class for bot_lanes errors."""


class BackendError(BotLanesError):
    """Text backend produced no usable response (timeout, network, 5xx, bad payload)."""


class ImageGenerationError(BotLanesError):
    """Image backend failed or returned an empty image."""


class TransportError(BotLanesError):
    """Messaging transport rejected or failed an operation."""
