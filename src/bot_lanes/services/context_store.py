"""Conversation context store for bot_lanes.

This module provides the volatile, bounded per-conversation memory of
exchanged turns, plus the trailing list of message IDs the bot itself
sent in each conversation.
"""

from collections.abc import Iterable

from bot_lanes.logging import get_logger
from bot_lanes.models.turn import ConversationId, Turn

__all__ = [
    "ConversationContextStore",
]

logger = get_logger(__name__)


class ConversationContextStore:
    """Bounded rolling context keyed by conversation.

    Two independent bounds apply:
    - retention: maximum number of turns kept per conversation
    - window: number of most recent turns forwarded to the backend

    retention must be >= window so trimming for storage never drops a
    turn the next backend call still needs.

    Entries are created lazily and live for the process lifetime. Each
    mutation rebinds the stored list in one step, so concurrent lanes
    never observe a half-applied append.

    Example:
        store = ConversationContextStore(retention=18, window=8)
        store.append(chat_id, [Turn.user("hi"), Turn.assistant("hello")])
        history = store.window(chat_id)
    """

    def __init__(
        self,
        retention: int = 18,
        window: int = 8,
        outbound_history: int = 10,
    ) -> None:
        """Initialize the store.

        Args:
            retention: Maximum turns kept per conversation
            window: Turns forwarded to the backend per call
            outbound_history: Sent message IDs kept per conversation

        Raises:
            ValueError: If a bound is negative or retention < window
        """
        if window < 0 or retention < 0 or outbound_history < 0:
            raise ValueError("context bounds must be non-negative")
        if retention < window:
            raise ValueError(f"retention ({retention}) must be >= window ({window})")
        self._retention = retention
        self._window = window
        self._outbound_history = outbound_history
        self._contexts: dict[ConversationId, list[Turn]] = {}
        self._outbound: dict[ConversationId, list[int]] = {}

    @property
    def retention(self) -> int:
        return self._retention

    @property
    def window_size(self) -> int:
        return self._window

    def get(self, conversation_id: ConversationId) -> list[Turn]:
        """Get all retained turns of a conversation (empty if unknown)."""
        return list(self._contexts.get(conversation_id, ()))

    def window(self, conversation_id: ConversationId) -> list[Turn]:
        """Get the most recent turns to forward to the backend."""
        return self.tail(self.get(conversation_id), self._window)

    def append(self, conversation_id: ConversationId, new_turns: Iterable[Turn]) -> None:
        """Append turns and drop the oldest beyond the retention bound.

        Args:
            conversation_id: Conversation to update
            new_turns: Turns to add, in order
        """
        combined = [*self._contexts.get(conversation_id, ()), *new_turns]
        self._contexts[conversation_id] = self.tail(combined, self._retention)
        logger.debug(
            "context_appended",
            conversation_id=conversation_id,
            size=len(self._contexts[conversation_id]),
        )

    def record_outbound(self, conversation_id: ConversationId, message_id: int) -> None:
        """Remember a message the bot sent, keeping only the newest IDs."""
        ids = [*self._outbound.get(conversation_id, ()), message_id]
        self._outbound[conversation_id] = self.tail(ids, self._outbound_history)

    def recent_outbound(self, conversation_id: ConversationId) -> list[int]:
        """Get the trailing IDs of messages the bot sent in a conversation."""
        return list(self._outbound.get(conversation_id, ()))

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)

    @staticmethod
    def tail(items: list, size: int) -> list:
        """Keep the last `size` items (none when size is 0)."""
        return items[-size:] if size > 0 else []
