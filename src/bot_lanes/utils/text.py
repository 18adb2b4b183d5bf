"""Text helpers for bot_lanes."""

import re

__all__ = [
    "escape_markdown_v2",
]

_RESERVED_RE = re.compile(r"([_*\[\]()~`>#+\-=|{}.!])")


def escape_markdown_v2(text: str) -> str:
    """Escape characters reserved by the MarkdownV2 renderer.

    Every reserved character is prefixed with a backslash so the text
    renders literally.

    Args:
        text: Raw reply text

    Returns:
        Escaped text
    """
    return _RESERVED_RE.sub(r"\\\1", text)
