"""Utility functions for bot_lanes.

This module contains internal utility functions.
"""

from bot_lanes.utils.hashing import (
    generate_origin_ref,
    hash_bytes,
    resolve_content_hash,
)
from bot_lanes.utils.text import escape_markdown_v2

__all__ = [
    "escape_markdown_v2",
    "generate_origin_ref",
    "hash_bytes",
    "resolve_content_hash",
]
