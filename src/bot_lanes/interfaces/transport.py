"""Messaging transport interface for bot_lanes.

This module defines the Protocol for the chat channel the bot talks
through: sending text and media, reactions, presence signals and
attachment downloads.
"""

from enum import StrEnum
from typing import Protocol, runtime_checkable

from bot_lanes.models.turn import ConversationId

__all__ = [
    "MediaKind",
    "PresenceKind",
    "RenderMode",
    "TransportInterface",
]


class RenderMode(StrEnum):
    """Rich-text renderer applied by the transport."""

    PLAIN = "plain"
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


class PresenceKind(StrEnum):
    """Presence signals announced while the bot is busy."""

    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"


class MediaKind(StrEnum):
    """Media payload flavours the transport can send."""

    ANIMATION = "animation"
    PHOTO = "photo"


@runtime_checkable
class TransportInterface(Protocol):
    """Contract for the messaging channel.

    Implementations raise on failure; callers decide whether a failure
    is fatal.
    """

    @property
    def bot_id(self) -> int | str | None:
        """Identity of the bot account (None until connected)."""
        ...

    async def send_text(
        self,
        conversation_id: ConversationId,
        text: str,
        reply_to_message_id: int | None = None,
        render_mode: RenderMode = RenderMode.PLAIN,
    ) -> int:
        """Send a text message.

        Args:
            conversation_id: Target chat
            text: Message text, already escaped for render_mode
            reply_to_message_id: Message to reply to
            render_mode: Rich-text renderer

        Returns:
            ID of the sent message
        """
        ...

    async def send_media(
        self,
        conversation_id: ConversationId,
        data: bytes,
        reply_to_message_id: int | None = None,
        kind: MediaKind = MediaKind.ANIMATION,
        filename: str | None = None,
    ) -> int:
        """Send a binary media payload.

        Returns:
            ID of the sent message
        """
        ...

    async def set_reaction(
        self,
        conversation_id: ConversationId,
        message_id: int,
        symbol: str,
    ) -> None:
        """Set a reaction emoji on a message."""
        ...

    async def announce_presence(
        self,
        conversation_id: ConversationId,
        kind: PresenceKind = PresenceKind.TYPING,
    ) -> None:
        """Show a presence signal (e.g. "typing") in the chat."""
        ...

    async def fetch_attachment_bytes(self, attachment_ref: str) -> bytes:
        """Download attachment content by transport handle."""
        ...
