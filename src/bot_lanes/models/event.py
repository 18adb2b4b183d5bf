"""Event log models for bot_lanes.

Log records are append-only. Each record gets a fresh UUID4 which is
its sole primary key.
"""

import uuid
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

__all__ = [
    "EventKind",
    "EventSubtype",
    "LogRecord",
]


class EventKind(StrEnum):
    """Kinds of events written to the event log."""

    STARTED = "STARTED"
    RESPONSE = "RESPONSE"
    REACTION = "REACTION"
    GIF_SENT = "GIF_SENT"
    GIF_SAVED = "GIF_SAVED"
    ERROR = "ERROR"


class EventSubtype(StrEnum):
    """Optional event qualifiers."""

    SYSTEM = "SYSTEM"
    TEXT = "text"
    IMAGE = "image"


class LogRecord(BaseModel, frozen=True):
    """One append-only event log entry.

    Attributes:
        id: Random UUID4, unique per record
        event_kind: What happened
        event_subtype: Optional qualifier
        payload: Optional human-readable detail
        actor_id: Conversation/user the event concerns
        timestamp: Record creation time (UTC)
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_kind: str
    event_subtype: str | None = None
    payload: str | None = None
    actor_id: int | str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
