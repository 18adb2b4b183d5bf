"""Unit tests for the event log service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from mocks.mock_backends import InMemoryStorage

from bot_lanes.models.event import EventKind, EventSubtype
from bot_lanes.services import event_log as event_log_module
from bot_lanes.services.event_log import EventLog


class TestEventLog:
    """Tests for EventLog."""

    @pytest.mark.asyncio
    async def test_record_is_written_in_background(
        self, event_log: EventLog, storage: InMemoryStorage
    ) -> None:
        record = event_log.record(EventKind.RESPONSE, EventSubtype.TEXT, "hi", 1)
        assert event_log.pending == 1

        await event_log.flush()

        assert event_log.pending == 0
        assert storage.logs == [record]
        assert record.event_kind == "RESPONSE"
        assert record.event_subtype == "text"

    @pytest.mark.asyncio
    async def test_every_record_gets_unique_id(self, event_log: EventLog) -> None:
        ids = {event_log.record(EventKind.STARTED).id for _ in range(20)}
        await event_log.flush()
        assert len(ids) == 20

    @pytest.mark.asyncio
    async def test_write_failure_goes_to_fallback_log(
        self, storage: InMemoryStorage, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fallback = MagicMock()
        monkeypatch.setattr(event_log_module, "logger", fallback)
        storage.fail_logs = True
        log = EventLog(storage)

        record = log.record(EventKind.REACTION, EventSubtype.SYSTEM, "👍", 1)
        await log.flush()

        assert storage.logs == []
        fallback.error.assert_called_once()
        args, kwargs = fallback.error.call_args
        assert args == ("event_log_write_failed",)
        assert kwargs["record_id"] == str(record.id)
        assert kwargs["payload"] == "👍"
        assert kwargs["error"] == "log store down"

    @pytest.mark.asyncio
    async def test_error_formats_payload(
        self, event_log: EventLog, storage: InMemoryStorage
    ) -> None:
        event_log.error("Reaction failed", RuntimeError("forbidden"), 7)
        await event_log.flush()

        [record] = storage.logs
        assert record.event_kind == EventKind.ERROR
        assert record.event_subtype == EventSubtype.SYSTEM
        assert record.payload == "Reaction failed: forbidden"
        assert record.actor_id == 7

    @pytest.mark.asyncio
    async def test_error_without_message_uses_type_name(
        self, event_log: EventLog, storage: InMemoryStorage
    ) -> None:
        event_log.error("AI request failed", TimeoutError())
        await event_log.flush()
        assert storage.logs[0].payload == "AI request failed: TimeoutError"

    def test_record_without_running_loop(self, mock_storage: AsyncMock) -> None:
        log = EventLog(mock_storage)
        record = log.record(EventKind.STARTED)
        assert record.event_kind == "STARTED"
        mock_storage.append_log.assert_not_called()
