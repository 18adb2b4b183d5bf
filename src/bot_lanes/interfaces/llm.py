"""Text backend interface for bot_lanes.

This module defines the Protocol for the generative text backend.
"""

from typing import ClassVar, Protocol, runtime_checkable

from bot_lanes.models.turn import Turn

__all__ = [
    "ChatBackendInterface",
]


@runtime_checkable
class ChatBackendInterface(Protocol):
    """Contract for chat-completion backends.

    Implementations should send the given turns (system preamble first)
    and return the first choice's content.
    """

    config_class: ClassVar[type | None] = None

    async def complete(self, messages: list[Turn]) -> str | None:
        """Generate a reply for a conversation.

        Args:
            messages: Ordered turns, system preamble first, new user turn last

        Returns:
            Reply text, or None when the backend answered without content

        Raises:
            BackendError: On timeout, network failure, server error or
                malformed response
        """
        ...
