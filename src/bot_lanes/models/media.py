"""Media cache models for bot_lanes."""

import base64
from datetime import UTC, datetime

from pydantic import BaseModel, Field

__all__ = [
    "MediaItem",
]


class MediaItem(BaseModel, frozen=True):
    """Content-addressed media blob (short animation).

    The pair (content_hash, origin_ref) is the dedup key: the same
    content may be stored once per distinct origin reference.

    Attributes:
        content_hash: Stable content identity computed by the fetch side
        encoded: Base64-encoded content bytes
        origin_ref: Reference to the message the content was taken from
        created_at: Ingestion time (UTC)
    """

    content_hash: str = Field(min_length=1)
    encoded: str = Field(description="Base64-encoded bytes")
    origin_ref: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.content_hash, self.origin_ref)

    def decode(self) -> bytes:
        """Decode the stored base64 payload back to raw bytes."""
        return base64.b64decode(self.encoded)

    @classmethod
    def from_bytes(cls, content_hash: str, origin_ref: str, data: bytes) -> "MediaItem":
        return cls(
            content_hash=content_hash,
            encoded=base64.b64encode(data).decode("ascii"),
            origin_ref=origin_ref,
        )
