"""Inbound message models for bot_lanes.

These frozen models define the contract between the messaging
transport and the routing/orchestration layer.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from bot_lanes.models.turn import ConversationId

__all__ = [
    "Attachment",
    "AttachmentKind",
    "InboundMessage",
]


class AttachmentKind(StrEnum):
    """Attachment categories the bot distinguishes."""

    ANIMATION = "animation"
    DOCUMENT = "document"
    OTHER = "other"


class Attachment(BaseModel, frozen=True):
    """Reference to an attachment carried by an inbound message.

    Attributes:
        file_id: Transport handle used to download the content
        file_unique_id: Stable content identity, if the transport provides one
        mime_type: Declared MIME type
        kind: Attachment category
    """

    file_id: str
    file_unique_id: str | None = None
    mime_type: str | None = None
    kind: AttachmentKind = AttachmentKind.OTHER

    @property
    def is_animation(self) -> bool:
        """Animations and mp4 documents are both cached as animations."""
        if self.kind == AttachmentKind.ANIMATION:
            return True
        return self.kind == AttachmentKind.DOCUMENT and self.mime_type == "video/mp4"


class InboundMessage(BaseModel, frozen=True):
    """Normalized inbound event from the transport.

    Attributes:
        conversation_id: Chat the message belongs to
        message_id: Transport message ID (reply/reaction target)
        sender_id: Author identity
        sender_name: Display name of the author
        text: Message text, if any
        attachment: Attachment reference, if any
        reply_to_message_id: ID of the message this one replies to
        reply_to_sender_id: Author of the message this one replies to
    """

    conversation_id: ConversationId | None = None
    message_id: int | None = None
    sender_id: int | str | None = None
    sender_name: str = Field(default="")
    text: str | None = None
    attachment: Attachment | None = None
    reply_to_message_id: int | None = None
    reply_to_sender_id: int | str | None = None

    @property
    def has_identity(self) -> bool:
        return self.conversation_id is not None and self.sender_id is not None
