"""In-memory transport for testing."""

from dataclasses import dataclass

from bot_lanes.errors import TransportError
from bot_lanes.interfaces.transport import (
    MediaKind,
    PresenceKind,
    RenderMode,
    TransportInterface,
)
from bot_lanes.models.turn import ConversationId


@dataclass
class SentText:
    conversation_id: ConversationId
    text: str
    reply_to_message_id: int | None
    render_mode: RenderMode
    message_id: int


@dataclass
class SentMedia:
    conversation_id: ConversationId
    data: bytes
    reply_to_message_id: int | None
    kind: MediaKind
    filename: str | None
    message_id: int


class MockTransport(TransportInterface):
    """Records every outbound call; failures are switched on per operation."""

    def __init__(self, bot_id: int = 999) -> None:
        self._bot_id = bot_id
        self._next_id = 1000
        self.texts: list[SentText] = []
        self.media: list[SentMedia] = []
        self.reactions: list[tuple[ConversationId, int, str]] = []
        self.presence: list[tuple[ConversationId, PresenceKind]] = []
        self.attachments: dict[str, bytes] = {}
        self.fetches: list[str] = []
        self.fail: set[str] = set()
        self.calls: list[str] = []
        self.closed = False

    @property
    def bot_id(self) -> int:
        return self._bot_id

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if self.closed:
            raise TransportError(f"{operation} after close")
        if operation in self.fail:
            raise TransportError(f"{operation} failed")

    def _allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def send_text(
        self,
        conversation_id: ConversationId,
        text: str,
        reply_to_message_id: int | None = None,
        render_mode: RenderMode = RenderMode.PLAIN,
    ) -> int:
        self._maybe_fail("send_text")
        message_id = self._allocate_id()
        self.texts.append(
            SentText(conversation_id, text, reply_to_message_id, render_mode, message_id)
        )
        return message_id

    async def send_media(
        self,
        conversation_id: ConversationId,
        data: bytes,
        reply_to_message_id: int | None = None,
        kind: MediaKind = MediaKind.ANIMATION,
        filename: str | None = None,
    ) -> int:
        self._maybe_fail("send_media")
        message_id = self._allocate_id()
        self.media.append(
            SentMedia(conversation_id, data, reply_to_message_id, kind, filename, message_id)
        )
        return message_id

    async def set_reaction(
        self,
        conversation_id: ConversationId,
        message_id: int,
        symbol: str,
    ) -> None:
        self._maybe_fail("set_reaction")
        self.reactions.append((conversation_id, message_id, symbol))

    async def announce_presence(
        self,
        conversation_id: ConversationId,
        kind: PresenceKind = PresenceKind.TYPING,
    ) -> None:
        self._maybe_fail("announce_presence")
        self.presence.append((conversation_id, kind))

    async def fetch_attachment_bytes(self, attachment_ref: str) -> bytes:
        self._maybe_fail("fetch_attachment_bytes")
        self.fetches.append(attachment_ref)
        return self.attachments[attachment_ref]

    async def close(self) -> None:
        self.closed = True
