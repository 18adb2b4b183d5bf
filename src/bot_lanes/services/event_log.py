"""Event log service for bot_lanes.

This module provides the fire-and-forget writer every other component
uses to record responses, side effects and caught errors. Writes run
in the background; a failing write is reported to the structlog
fallback channel and never reaches the caller.
"""

import asyncio

from bot_lanes.interfaces.storage import EventStoreInterface
from bot_lanes.logging import get_logger
from bot_lanes.models.event import EventKind, EventSubtype, LogRecord

__all__ = [
    "EventLog",
]

logger = get_logger(__name__)


class EventLog:
    """Append-only event recorder.

    Example:
        events = EventLog(storage)
        events.record(EventKind.REACTION, EventSubtype.SYSTEM, "👍", user_id)
        events.error("Reaction failed", exc, user_id)
        await events.flush()
    """

    def __init__(self, store: EventStoreInterface) -> None:
        """Initialize the event log.

        Args:
            store: Persistent event store
        """
        self._store = store
        self._pending: set[asyncio.Task[None]] = set()

    def record(
        self,
        event_kind: EventKind | str,
        event_subtype: EventSubtype | str | None = None,
        payload: str | None = None,
        actor_id: int | str | None = None,
    ) -> LogRecord:
        """Schedule an append and return immediately.

        Args:
            event_kind: What happened
            event_subtype: Optional qualifier
            payload: Optional detail text
            actor_id: Conversation/user involved

        Returns:
            The record being written
        """
        record = LogRecord(
            event_kind=str(event_kind),
            event_subtype=str(event_subtype) if event_subtype is not None else None,
            payload=payload,
            actor_id=actor_id,
        )
        try:
            task = asyncio.get_running_loop().create_task(self._write(record))
        except RuntimeError:
            logger.warning(
                "event_log_no_loop",
                event=record.event_kind,
                payload=record.payload,
            )
            return record
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return record

    def error(
        self,
        message: str,
        error: BaseException | str,
        actor_id: int | str | None = None,
    ) -> LogRecord:
        """Record a caught error with a short cause description."""
        cause = str(error) or type(error).__name__
        logger.warning("recorded_error", message=message, error=cause, actor_id=actor_id)
        return self.record(
            EventKind.ERROR,
            EventSubtype.SYSTEM,
            f"{message}: {cause}",
            actor_id,
        )

    @property
    def pending(self) -> int:
        """Number of writes still in flight."""
        return len(self._pending)

    async def flush(self) -> None:
        """Wait for all scheduled writes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _write(self, record: LogRecord) -> None:
        try:
            await self._store.append_log(record)
        except Exception as e:
            logger.error(
                "event_log_write_failed",
                record_id=str(record.id),
                event=record.event_kind,
                type=record.event_subtype,
                payload=record.payload,
                actor_id=record.actor_id,
                error=str(e),
            )
