"""Inbound message routing for bot_lanes.

This module decides what, if anything, the bot does with an inbound
message before it enters a conversation lane:

- media upload: an animation (or mp4 document) is cached
- draw: "[<trigger>] draw|нарисуй <prompt>" goes to the image backend
- chat: a message starting with the trigger word, or a reply to the
  bot (a continuation that reuses the conversation context)

Everything else, and anything without conversation/sender identity or
outside the allow-list, is dropped. An empty allow-list admits no
conversation.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from bot_lanes.models.inbound import InboundMessage

__all__ = [
    "MessageRouter",
    "Route",
    "RouteKind",
]


class RouteKind(StrEnum):
    """Pipelines an inbound message can be sent to."""

    MEDIA_UPLOAD = "media_upload"
    DRAW = "draw"
    CHAT = "chat"


@dataclass(frozen=True)
class Route:
    """Routing decision for one inbound message.

    Attributes:
        kind: Target pipeline
        message: The inbound message
        text: Command text (trigger stripped) or image prompt
        is_continuation: True when the message replies to the bot
    """

    kind: RouteKind
    message: InboundMessage
    text: str = ""
    is_continuation: bool = False


class MessageRouter:
    """Pure routing rules.

    Example:
        router = MessageRouter("bot", allowed_chat_ids=[-100123])
        route = router.route(message, bot_id=transport.bot_id)
    """

    def __init__(
        self,
        trigger_word: str,
        allowed_chat_ids: Iterable[int] = (),
    ) -> None:
        """Initialize the router.

        Args:
            trigger_word: Phrase that addresses the bot in a shared chat
            allowed_chat_ids: Conversations the bot acts in (empty = none)
        """
        trigger = re.escape(trigger_word.strip())
        self._allowed = {int(chat_id) for chat_id in allowed_chat_ids}
        self._draw_re = re.compile(
            rf"^({trigger}\s+)?(draw|нарисуй)\s+(.+)$",
            re.IGNORECASE,
        )
        self._trigger_re = re.compile(rf"^{trigger}\s*(.*)", re.IGNORECASE | re.DOTALL)

    def is_allowed(self, message: InboundMessage) -> bool:
        """Check identity and allow-list."""
        if not message.has_identity or not self._allowed:
            return False
        try:
            return int(message.conversation_id) in self._allowed  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def route(
        self,
        message: InboundMessage,
        bot_id: int | str | None = None,
    ) -> Route | None:
        """Decide the pipeline for a message.

        Args:
            message: Inbound message
            bot_id: Identity of the bot account, for reply detection

        Returns:
            Route, or None if the message should be ignored
        """
        if not self.is_allowed(message):
            return None

        if message.attachment is not None and message.attachment.is_animation:
            return Route(kind=RouteKind.MEDIA_UPLOAD, message=message)

        text = message.text
        if not text:
            return None

        draw_match = self._draw_re.match(text)
        if draw_match and draw_match.group(3).strip():
            return Route(kind=RouteKind.DRAW, message=message, text=draw_match.group(3).strip())

        is_reply_to_bot = bot_id is not None and message.reply_to_sender_id == bot_id
        trigger_match = self._trigger_re.match(text)

        if trigger_match:
            return Route(
                kind=RouteKind.CHAT,
                message=message,
                text=trigger_match.group(1).strip(),
                is_continuation=is_reply_to_bot,
            )
        if is_reply_to_bot:
            return Route(kind=RouteKind.CHAT, message=message, text=text, is_continuation=True)
        return None
