"""Side-effect dispatcher for bot_lanes.

This module executes commands extracted from model output against the
transport and the media cache. Side effects are best-effort: each one
is attempted on its own, failures are recorded and swallowed, and none
of them can hold back the visible reply.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from bot_lanes.interfaces.transport import MediaKind, TransportInterface
from bot_lanes.logging import get_logger
from bot_lanes.models.command import Command, ReactionCommand, SendMediaCommand
from bot_lanes.models.event import EventKind, EventSubtype
from bot_lanes.models.turn import ConversationId
from bot_lanes.services.event_log import EventLog
from bot_lanes.services.media_cache import MediaCache

__all__ = [
    "DISPATCH_ORDER",
    "DispatchReport",
    "DispatchTarget",
    "SideEffectDispatcher",
]

logger = get_logger(__name__)

DISPATCH_ORDER: tuple[type, ...] = (ReactionCommand, SendMediaCommand)
"""Commands run in this order regardless of how they were extracted."""


@dataclass(frozen=True)
class DispatchTarget:
    """Where side effects of one response land."""

    conversation_id: ConversationId
    message_id: int | None
    actor_id: int | str | None = None


@dataclass
class DispatchReport:
    """What the dispatcher actually delivered."""

    reaction_sent: bool = False
    media_sent: bool = False

    @property
    def anything_sent(self) -> bool:
        return self.reaction_sent or self.media_sent


class SideEffectDispatcher:
    """Executes reaction and media commands.

    Example:
        dispatcher = SideEffectDispatcher(transport, media_cache, event_log)
        report = await dispatcher.dispatch(parsed.commands, target)
    """

    def __init__(
        self,
        transport: TransportInterface,
        media_cache: MediaCache,
        event_log: EventLog,
    ) -> None:
        self._transport = transport
        self._media = media_cache
        self._events = event_log

    async def dispatch(
        self,
        commands: Sequence[Command],
        target: DispatchTarget,
    ) -> DispatchReport:
        """Run every command once, reaction before media.

        Args:
            commands: Commands extracted from one response
            target: Conversation/message the response belongs to

        Returns:
            DispatchReport describing delivered side effects
        """
        report = DispatchReport()
        for command in sorted(commands, key=self._order):
            if isinstance(command, ReactionCommand):
                if await self.send_reaction(command.symbol, target):
                    report.reaction_sent = True
            elif isinstance(command, SendMediaCommand):
                if await self.send_random_media(target):
                    report.media_sent = True
            else:
                logger.warning("unknown_command", command=repr(command))
        return report

    async def send_reaction(self, symbol: str, target: DispatchTarget) -> bool:
        """React to the originating message. Never raises."""
        if not symbol or target.message_id is None:
            return False
        try:
            await self._transport.set_reaction(
                target.conversation_id, target.message_id, symbol
            )
        except Exception as e:
            self._events.error("Reaction failed", e, target.actor_id)
            return False
        self._events.record(EventKind.REACTION, EventSubtype.SYSTEM, symbol, target.actor_id)
        return True

    async def send_random_media(self, target: DispatchTarget) -> bool:
        """Send one random cached animation. Empty cache is a no-op."""
        try:
            item = await self._media.sample_random()
            if item is None:
                logger.debug("media_cache_empty", conversation_id=target.conversation_id)
                return False
            await self._transport.send_media(
                target.conversation_id,
                item.decode(),
                kind=MediaKind.ANIMATION,
                filename=f"gif_{item.content_hash}.mp4",
            )
        except Exception as e:
            self._events.error("GIF send failed", e, target.actor_id)
            return False
        self._events.record(
            EventKind.GIF_SENT, EventSubtype.SYSTEM, item.content_hash, target.actor_id
        )
        return True

    @staticmethod
    def _order(command: Command) -> int:
        for index, kind in enumerate(DISPATCH_ORDER):
            if isinstance(command, kind):
                return index
        return len(DISPATCH_ORDER)
