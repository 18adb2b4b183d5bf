"""Media cache service for bot_lanes.

This module provides idempotent ingestion and random retrieval of
content-addressed media. Content identity is computed by the caller;
this service only persists and deduplicates.
"""

from bot_lanes.interfaces.storage import MediaStoreInterface
from bot_lanes.logging import get_logger
from bot_lanes.models.media import MediaItem

__all__ = [
    "MediaCache",
]

logger = get_logger(__name__)


class MediaCache:
    """Dedup-on-ingest media cache.

    The dedup key is (content_hash, origin_ref). Re-ingesting a known
    pair is a silent no-op, so ingestion is safe to retry. Storage
    errors are logged and reported as neutral values, never raised.

    Example:
        cache = MediaCache(storage)
        inserted = await cache.ingest(file_hash, origin_ref, encoded)
        item = await cache.sample_random()
    """

    def __init__(self, store: MediaStoreInterface) -> None:
        """Initialize the cache.

        Args:
            store: Persistent media store
        """
        self._store = store

    async def ingest(self, content_hash: str, origin_ref: str, encoded: str) -> bool:
        """Store an item unless its dedup key is already present.

        Args:
            content_hash: Content identity
            origin_ref: Where the content came from
            encoded: Base64-encoded content

        Returns:
            True if stored, False on duplicate or storage failure
        """
        item = MediaItem(content_hash=content_hash, encoded=encoded, origin_ref=origin_ref)
        try:
            inserted = await self._store.insert_media_if_absent(item)
        except Exception as e:
            logger.error(
                "media_ingest_failed",
                content_hash=content_hash,
                origin_ref=origin_ref,
                error=str(e),
            )
            return False

        if inserted:
            logger.info("media_ingested", content_hash=content_hash, origin_ref=origin_ref)
        else:
            logger.debug("media_duplicate", content_hash=content_hash, origin_ref=origin_ref)
        return inserted

    async def contains(self, content_hash: str) -> bool:
        """Check whether content with this hash is already cached.

        Lets ingestion skip downloading content that is already known.
        A storage failure reports False (the insert stays idempotent).
        """
        try:
            return await self._store.media_exists(content_hash)
        except Exception as e:
            logger.error("media_lookup_failed", content_hash=content_hash, error=str(e))
            return False

    async def sample_random(self) -> MediaItem | None:
        """Pick one cached item uniformly at random (None if empty)."""
        try:
            return await self._store.sample_media()
        except Exception as e:
            logger.error("media_sample_failed", error=str(e))
            return None

    async def count(self) -> int:
        """Count cached items (0 on storage failure)."""
        try:
            return await self._store.count_media()
        except Exception as e:
            logger.error("media_count_failed", error=str(e))
            return 0
