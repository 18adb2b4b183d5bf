"""Storage interfaces for bot_lanes.

This module defines the Protocols for the persistent event log and
the content-addressed media store.
"""

from typing import ClassVar, Protocol, runtime_checkable

from bot_lanes.models.event import LogRecord
from bot_lanes.models.media import MediaItem

__all__ = [
    "EventStoreInterface",
    "MediaStoreInterface",
    "StorageInterface",
]


@runtime_checkable
class EventStoreInterface(Protocol):
    """Contract for the append-only event log store."""

    async def append_log(self, record: LogRecord) -> str:
        """Append a log record (never update or delete).

        Args:
            record: Record to append

        Returns:
            Record ID
        """
        ...


@runtime_checkable
class MediaStoreInterface(Protocol):
    """Contract for the content-addressed media store."""

    async def insert_media_if_absent(self, item: MediaItem) -> bool:
        """Insert a media item unless its (hash, origin_ref) pair exists.

        Must be a single atomic insert-or-ignore.

        Args:
            item: Media item to store

        Returns:
            True if inserted, False if the pair already existed
        """
        ...

    async def media_exists(self, content_hash: str) -> bool:
        """Check whether any item with this content hash is stored."""
        ...

    async def sample_media(self) -> MediaItem | None:
        """Pick one stored item uniformly at random.

        Returns:
            A media item, or None if the store is empty
        """
        ...

    async def count_media(self) -> int:
        """Count stored media items."""
        ...


@runtime_checkable
class StorageInterface(EventStoreInterface, MediaStoreInterface, Protocol):
    """Combined storage backing the event log and the media cache."""

    config_class: ClassVar[type | None] = None
