"""MongoDB repositories for bot_lanes.

This module provides the MongoDB implementation of the event log and
media cache stores.
"""

from typing import Any, Self

from pymongo.errors import DuplicateKeyError

from bot_lanes.config import MongoSettings
from bot_lanes.infra.mongo.client import MongoClient
from bot_lanes.interfaces.storage import StorageInterface
from bot_lanes.logging import get_logger
from bot_lanes.models.event import LogRecord
from bot_lanes.models.media import MediaItem

__all__ = [
    "MongoStorageRepository",
]

logger = get_logger(__name__)


class MongoStorageRepository(StorageInterface):
    """MongoDB implementation of StorageInterface.

    Log records are insert-only. Media items are written with a single
    upsert whose update only carries $setOnInsert, so concurrent lanes
    ingesting the same (hash, origin_ref) pair store it exactly once.
    """

    config_class = MongoSettings

    def __init__(self, client: MongoClient) -> None:
        """Initialize repository with MongoDB client.

        Args:
            client: Connected MongoClient instance
        """
        self._client = client
        self._owns_client = False

    @classmethod
    async def from_config(cls, config: MongoSettings) -> Self:
        """Factory method for BotLanes instantiation.

        Creates a MongoClient, connects, creates indexes, and returns repository.

        Args:
            config: MongoDB settings

        Returns:
            Connected MongoStorageRepository instance
        """
        client = MongoClient(config)
        await client.connect()
        await client.create_indexes()

        instance = cls(client)
        instance._owns_client = True
        return instance

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict.

        Args:
            config: Dictionary with MongoDB settings

        Returns:
            Connected MongoStorageRepository instance
        """
        settings = MongoSettings(**config)
        return await cls.from_config(settings)

    async def close(self) -> None:
        """Close owned resources."""
        if self._owns_client and self._client:
            await self._client.disconnect()

    # Event log operations
    async def append_log(self, record: LogRecord) -> str:
        """Append a log record."""
        await self._client.logs.insert_one(self._record_to_doc(record))
        return str(record.id)

    # Media operations
    async def insert_media_if_absent(self, item: MediaItem) -> bool:
        """Insert a media item unless its (hash, origin_ref) pair exists."""
        try:
            result = await self._client.gifs.update_one(
                {"hash": item.content_hash, "origin_ref": item.origin_ref},
                {"$setOnInsert": self._media_to_doc(item)},
                upsert=True,
            )
        except DuplicateKeyError:
            # Lost an upsert race against another writer of the same pair
            return False
        return result.upserted_id is not None

    async def media_exists(self, content_hash: str) -> bool:
        """Check if any media item with this hash exists."""
        count = await self._client.gifs.count_documents({"hash": content_hash}, limit=1)
        return count > 0

    async def sample_media(self) -> MediaItem | None:
        """Pick one media item uniformly at random."""
        cursor = self._client.gifs.aggregate([{"$sample": {"size": 1}}])
        async for doc in cursor:
            return self._doc_to_media(doc)
        return None

    async def count_media(self) -> int:
        """Count stored media items."""
        return await self._client.gifs.count_documents({})

    # Document conversion helpers
    @staticmethod
    def _record_to_doc(record: LogRecord) -> dict[str, Any]:
        return {
            "id": str(record.id),
            "event": record.event_kind,
            "type": record.event_subtype,
            "text": record.payload,
            "actor_id": record.actor_id,
            "time": record.timestamp,
        }

    @staticmethod
    def _media_to_doc(item: MediaItem) -> dict[str, Any]:
        return {
            "base64": item.encoded,
            "hash": item.content_hash,
            "origin_ref": item.origin_ref,
            "time": item.created_at,
        }

    @staticmethod
    def _doc_to_media(doc: dict[str, Any]) -> MediaItem:
        return MediaItem(
            content_hash=doc["hash"],
            encoded=doc["base64"],
            origin_ref=doc["origin_ref"],
            created_at=doc["time"],
        )
