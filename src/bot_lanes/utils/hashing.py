"""Hashing utilities for bot_lanes.

This module provides deterministic helpers for content identity and
origin references of cached media.
"""

import hashlib

from bot_lanes.models.turn import ConversationId

__all__ = [
    "generate_origin_ref",
    "hash_bytes",
    "resolve_content_hash",
]


def hash_bytes(data: bytes) -> str:
    """Generate SHA256 hash of raw bytes.

    Args:
        data: Input bytes

    Returns:
        Hexadecimal SHA256 hash string
    """
    return hashlib.sha256(data).hexdigest()


def generate_origin_ref(conversation_id: ConversationId, message_id: int | None) -> str:
    """Build the origin reference of an ingested media item.

    The reference points at the message the content was posted in,
    in the public t.me link form.

    Args:
        conversation_id: Chat the media was posted in
        message_id: Message that carried the media

    Returns:
        Origin reference string
    """
    return f"t.me/{conversation_id}/{message_id}"


def resolve_content_hash(file_unique_id: str | None, data: bytes | None = None) -> str | None:
    """Pick the content identity for an attachment.

    The transport's stable file identity wins; otherwise the SHA256 of
    the downloaded bytes is used.

    Args:
        file_unique_id: Transport-provided content identity
        data: Downloaded bytes, if already fetched

    Returns:
        Content hash, or None if neither source is available
    """
    if file_unique_id:
        return file_unique_id
    if data is not None:
        return hash_bytes(data)
    return None
