"""Unit tests for the conversation context store."""

import pytest

from bot_lanes.models.turn import Role, Turn
from bot_lanes.services.context_store import ConversationContextStore


def exchange(i: int) -> list[Turn]:
    return [Turn.user(f"q{i}"), Turn.assistant(f"a{i}")]


class TestConversationContextStore:
    """Tests for ConversationContextStore."""

    def test_unknown_conversation_is_empty(self) -> None:
        store = ConversationContextStore()
        assert store.get("chat") == []
        assert store.window("chat") == []
        assert "chat" not in store

    def test_append_keeps_order(self) -> None:
        store = ConversationContextStore()
        store.append("chat", exchange(1))
        store.append("chat", exchange(2))

        assert [t.content for t in store.get("chat")] == ["q1", "a1", "q2", "a2"]

    def test_twenty_exchanges_keep_last_retention_turns(self) -> None:
        store = ConversationContextStore(retention=18, window=8)
        for i in range(20):
            store.append("chat", exchange(i))
            assert len(store.get("chat")) <= 18

        stored = store.get("chat")
        assert len(stored) == 18
        assert stored[0].content == "q11"
        assert stored[-1].content == "a19"

    def test_window_is_tail_of_stored(self) -> None:
        store = ConversationContextStore(retention=18, window=8)
        for i in range(20):
            store.append("chat", exchange(i))

        window = store.window("chat")
        assert len(window) == 8
        assert window == store.get("chat")[-8:]
        assert window[0].role == Role.USER
        assert window[0].content == "q16"

    def test_window_shorter_than_size(self) -> None:
        store = ConversationContextStore(retention=18, window=8)
        store.append("chat", exchange(1))
        assert len(store.window("chat")) == 2

    def test_zero_window(self) -> None:
        store = ConversationContextStore(retention=4, window=0)
        store.append("chat", exchange(1))
        assert store.window("chat") == []
        assert len(store.get("chat")) == 2

    def test_get_returns_copy(self) -> None:
        store = ConversationContextStore()
        store.append("chat", exchange(1))
        snapshot = store.get("chat")
        snapshot.clear()
        assert len(store.get("chat")) == 2

    def test_conversations_are_isolated(self) -> None:
        store = ConversationContextStore()
        store.append("a", exchange(1))
        assert store.get("b") == []
        assert len(store) == 1

    def test_retention_below_window_rejected(self) -> None:
        with pytest.raises(ValueError, match="retention"):
            ConversationContextStore(retention=4, window=8)

    def test_negative_bounds_rejected(self) -> None:
        with pytest.raises(ValueError):
            ConversationContextStore(retention=-1, window=0)

    def test_recent_outbound_bounded(self) -> None:
        store = ConversationContextStore(outbound_history=3)
        for message_id in range(1, 6):
            store.record_outbound("chat", message_id)

        assert store.recent_outbound("chat") == [3, 4, 5]
        assert store.recent_outbound("other") == []
