"""Conversation turn models for bot_lanes.

These models represent the role-tagged utterances kept in a
conversation's rolling context and forwarded to the text backend.
"""

from enum import StrEnum

from pydantic import BaseModel

__all__ = [
    "ConversationId",
    "Role",
    "Turn",
]

ConversationId = int | str
"""Opaque conversation identity (one per chat/channel)."""


class Role(StrEnum):
    """Author role of a turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Turn(BaseModel, frozen=True):
    """One role-tagged utterance within a conversation.

    Turns carry no timestamp: insertion order in the context store
    is the only ordering signal.

    Attributes:
        role: Author role (user, assistant or system)
        content: Utterance text
    """

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> "Turn":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Turn":
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def system(cls, content: str) -> "Turn":
        return cls(role=Role.SYSTEM, content=content)

    def to_message(self) -> dict[str, str]:
        """Render as a chat-completions message dict."""
        return {"role": self.role.value, "content": self.content}
