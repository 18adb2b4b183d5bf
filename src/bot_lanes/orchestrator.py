"""BotLanes orchestrator for conversational message handling.

This module provides the main entry point for the bot_lanes package.
It owns every per-process registry (lanes, context, outbound ids),
routes inbound messages onto per-conversation lanes and runs each unit
of work through the text, draw or media-upload pipeline.
"""

import asyncio
import base64
import random
from contextlib import suppress
from enum import StrEnum
from typing import Any

from bot_lanes.config import BotLanesConfig
from bot_lanes.errors import BackendError
from bot_lanes.interfaces.image import ImageGeneratorInterface
from bot_lanes.interfaces.llm import ChatBackendInterface
from bot_lanes.interfaces.storage import StorageInterface
from bot_lanes.interfaces.transport import (
    MediaKind,
    PresenceKind,
    RenderMode,
    TransportInterface,
)
from bot_lanes.logging import get_logger
from bot_lanes.models.event import EventKind, EventSubtype
from bot_lanes.models.inbound import InboundMessage
from bot_lanes.models.turn import ConversationId, Turn
from bot_lanes.services.command_protocol import CommandProtocol
from bot_lanes.services.context_store import ConversationContextStore
from bot_lanes.services.dispatcher import DispatchTarget, SideEffectDispatcher
from bot_lanes.services.event_log import EventLog
from bot_lanes.services.media_cache import MediaCache
from bot_lanes.services.message_router import MessageRouter, Route, RouteKind
from bot_lanes.services.queue import ConversationQueueManager
from bot_lanes.utils.hashing import generate_origin_ref, hash_bytes, resolve_content_hash
from bot_lanes.utils.text import escape_markdown_v2

__all__ = ["BotLanes", "Outcome"]

logger = get_logger(__name__)


class Outcome(StrEnum):
    """Terminal state of one unit of work."""

    DELIVERED = "delivered"  # reply or at least one side effect went out
    SUPPRESSED = "suppressed"  # nothing was sent, nothing went wrong
    FAILED = "failed"  # an error ended the unit


class BotLanes:
    """Main orchestrator of bot_lanes.

    Accepts implementation classes for storage and backends (config is
    loaded from .env, or from custom config dicts when an implementation
    sets config_class = None) and a ready transport instance.

    Example:
        async with BotLanes(
            storage_class=MongoStorageRepository,
            backend_class=OpenAIProvider,
            transport=transport,
            image_class=FluxImageClient,
        ) as bot:
            await transport.run(bot.submit)
    """

    def __init__(
        self,
        storage_class: type[StorageInterface],
        backend_class: type[ChatBackendInterface],
        transport: TransportInterface,
        image_class: type[ImageGeneratorInterface] | None = None,
        *,
        storage_custom_config: dict[str, Any] | None = None,
        backend_custom_config: dict[str, Any] | None = None,
        image_custom_config: dict[str, Any] | None = None,
        config: BotLanesConfig | None = None,
    ) -> None:
        """Initialize BotLanes with implementation classes.

        Args:
            storage_class: Storage implementation class (event log + media)
            backend_class: Text backend implementation class
            transport: Messaging transport instance
            image_class: Image backend implementation class (draw disabled if None)
            storage_custom_config: Custom config dict if storage_class.config_class is None
            backend_custom_config: Custom config dict if backend_class.config_class is None
            image_custom_config: Custom config dict if image_class.config_class is None
            config: Application config (loaded from .env if None)
        """
        self._config = config or BotLanesConfig()

        self._storage_class = storage_class
        self._backend_class = backend_class
        self._image_class = image_class
        self._transport = transport

        self._storage_custom_config = storage_custom_config
        self._backend_custom_config = backend_custom_config
        self._image_custom_config = image_custom_config

        # Instances (created on connect)
        self._storage: StorageInterface | None = None
        self._backend: ChatBackendInterface | None = None
        self._image: ImageGeneratorInterface | None = None

        # Registries (owned by this instance, process lifetime)
        self._context = ConversationContextStore(
            retention=self._config.context_retention,
            window=self._config.context_window,
            outbound_history=self._config.outbound_history,
        )
        self._queue = ConversationQueueManager(on_error=self._on_lane_error)
        self._router = MessageRouter(self._config.trigger_word, self._config.allowed_chat_ids)
        self._protocol = CommandProtocol()

        # Services (wired on connect)
        self._events: EventLog | None = None
        self._media: MediaCache | None = None
        self._dispatcher: SideEffectDispatcher | None = None

        self._connected = False

    def _settings_for(self, config_class: type) -> Any:
        """Reuse the nested settings block of the app config when it matches."""
        for settings in (
            self._config.mongo,
            self._config.llm,
            self._config.image,
            self._config.telegram,
        ):
            if type(settings) is config_class:
                return settings
        return config_class()

    async def _instantiate_class(
        self,
        cls: type,
        custom_config: dict[str, Any] | None,
    ) -> Any:
        """Instantiate an implementation class.

        If cls.config_class is set, use the matching settings (loads from .env).
        If cls.config_class is None, use custom_config dict.
        """
        config_class = getattr(cls, "config_class", None)

        if config_class is None:
            if custom_config is None:
                raise ValueError(
                    f"{cls.__name__} has config_class=None but no custom_config provided"
                )
            return await cls.from_dict(custom_config)
        return await cls.from_config(self._settings_for(config_class))

    async def _connect(self) -> None:
        """Initialize connections and services."""
        if self._connected:
            return

        self._storage = await self._instantiate_class(
            self._storage_class, self._storage_custom_config
        )
        self._backend = await self._instantiate_class(
            self._backend_class, self._backend_custom_config
        )
        if self._image_class is not None:
            self._image = await self._instantiate_class(
                self._image_class, self._image_custom_config
            )

        # Wire services
        self._events = EventLog(self._storage)
        self._media = MediaCache(self._storage)
        self._dispatcher = SideEffectDispatcher(self._transport, self._media, self._events)

        self._connected = True
        self._events.record(EventKind.STARTED, EventSubtype.SYSTEM, "Bot started")
        logger.info("bot_lanes_connected", draw_enabled=self._image is not None)

    async def _disconnect(self) -> None:
        """Drain lanes, flush the event log and close all connections."""
        await self._queue.join()
        if self._events is not None:
            await self._events.flush()

        if hasattr(self._transport, "close"):
            await self._transport.close()

        if self._backend and hasattr(self._backend, "close"):
            await self._backend.close()
        if self._image and hasattr(self._image, "close"):
            await self._image.close()
        if self._storage and hasattr(self._storage, "close"):
            await self._storage.close()

        self._connected = False
        logger.info("bot_lanes_disconnected")

    async def __aenter__(self) -> "BotLanes":
        """Async context manager entry - connects automatically."""
        await self._connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - disconnects automatically."""
        await self._disconnect()

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError("BotLanes not connected. Use 'async with BotLanes(...) as bot:'")

    # === ENTRY POINT ===

    def submit(self, message: InboundMessage) -> "asyncio.Future[Outcome] | None":
        """Route an inbound message and queue it on its conversation lane.

        Returns immediately. Must be called from the running event loop.

        Args:
            message: Normalized inbound message

        Returns:
            Future resolving to the unit's Outcome, or None if ignored
        """
        self._ensure_connected()

        route = self._router.route(message, self._transport.bot_id)
        if route is None:
            logger.debug(
                "message_ignored",
                conversation_id=message.conversation_id,
                message_id=message.message_id,
            )
            return None

        conversation_id: ConversationId = message.conversation_id  # type: ignore[assignment]
        logger.debug(
            "message_queued",
            conversation_id=conversation_id,
            route=route.kind.value,
            pending=self._queue.pending(conversation_id),
        )
        return self._queue.enqueue(conversation_id, lambda: self.process(route))

    async def process(self, route: Route) -> Outcome:
        """Run one routed unit of work. Never raises."""
        self._ensure_connected()
        try:
            if route.kind == RouteKind.MEDIA_UPLOAD:
                return await self.handle_media_upload(route)
            if route.kind == RouteKind.DRAW:
                return await self.handle_draw(route)
            return await self.handle_chat(route)
        except Exception as e:
            logger.error(
                "unit_failed",
                conversation_id=route.message.conversation_id,
                route=route.kind.value,
                error=str(e),
            )
            self.events.error("Message handling failed", e, route.message.sender_id)
            return Outcome.FAILED

    # === PIPELINES ===

    async def handle_chat(self, route: Route) -> Outcome:
        """Text pipeline: backend call, command extraction, side effects, reply.

        Args:
            route: CHAT route

        Returns:
            Outcome of the unit
        """
        message = route.message
        conversation_id: ConversationId = message.conversation_id  # type: ignore[assignment]
        actor_id = message.sender_id
        backend = self._require(self._backend)
        dispatcher = self._require(self._dispatcher)

        history = self._context.window(conversation_id) if route.is_continuation else []

        await self._pause(self._config.think_delay_min, self._config.think_delay_max)
        await self._announce(conversation_id, PresenceKind.TYPING)

        prompt: list[Turn] = []
        if self._config.llm.system_prompt:
            prompt.append(Turn.system(self._config.llm.system_prompt))
        prompt.extend(history)
        prompt.append(Turn.user(f"{message.sender_name}: {route.text}"))

        try:
            raw = await backend.complete(prompt)
        except BackendError as e:
            logger.warning(
                "backend_unavailable",
                conversation_id=conversation_id,
                error=str(e),
            )
            self.events.error("AI request failed", e, actor_id)
            return Outcome.SUPPRESSED

        if not raw or not raw.strip():
            logger.info("backend_empty_response", conversation_id=conversation_id)
            return Outcome.SUPPRESSED

        self.events.record(EventKind.RESPONSE, EventSubtype.TEXT, raw, actor_id)

        parsed = self._protocol.parse(raw)
        report = await dispatcher.dispatch(
            parsed.commands,
            DispatchTarget(conversation_id, message.message_id, actor_id),
        )

        if not parsed.text:
            return Outcome.DELIVERED if report.anything_sent else Outcome.SUPPRESSED

        await self._pause(self._config.reply_delay_min, self._config.reply_delay_max)
        await self._announce(conversation_id, PresenceKind.TYPING)

        if route.is_continuation:
            self._context.append(
                conversation_id,
                [Turn.user(route.text), Turn.assistant(parsed.text)],
            )

        try:
            sent_id = await self._transport.send_text(
                conversation_id,
                escape_markdown_v2(parsed.text),
                reply_to_message_id=message.message_id,
                render_mode=RenderMode.MARKDOWN_V2,
            )
        except Exception as e:
            self.events.error("Reply failed", e, actor_id)
            return Outcome.DELIVERED if report.anything_sent else Outcome.FAILED

        if route.is_continuation and not parsed.wants_media:
            self._context.record_outbound(conversation_id, sent_id)

        logger.info(
            "reply_sent",
            conversation_id=conversation_id,
            message_id=sent_id,
            reaction=report.reaction_sent,
            media=report.media_sent,
        )
        return Outcome.DELIVERED

    async def handle_draw(self, route: Route) -> Outcome:
        """Image pipeline: generate from the prompt and reply with a photo.

        Touches neither the conversation context nor the command protocol.
        """
        message = route.message
        conversation_id: ConversationId = message.conversation_id  # type: ignore[assignment]
        if self._image is None:
            logger.info("draw_disabled", conversation_id=conversation_id)
            return Outcome.SUPPRESSED

        await self._announce(conversation_id, PresenceKind.UPLOAD_PHOTO)
        presence = asyncio.create_task(
            self._keep_presence(conversation_id, PresenceKind.UPLOAD_PHOTO),
            name=f"presence-{conversation_id}",
        )
        try:
            image = await self._image.generate(route.text)
            await self._transport.send_media(
                conversation_id,
                image,
                reply_to_message_id=message.message_id,
                kind=MediaKind.PHOTO,
                filename="image.jpg",
            )
        except Exception as e:
            logger.warning("draw_failed", conversation_id=conversation_id, error=str(e))
            self.events.error("Image generation failed", e, message.sender_id)
            return Outcome.FAILED
        finally:
            presence.cancel()
            with suppress(asyncio.CancelledError):
                await presence

        self.events.record(EventKind.RESPONSE, EventSubtype.IMAGE, route.text, message.sender_id)
        return Outcome.DELIVERED

    async def handle_media_upload(self, route: Route) -> Outcome:
        """Cache an animation posted in the conversation.

        Nothing is sent back, so a successful ingest resolves suppressed.
        """
        message = route.message
        attachment = message.attachment
        if attachment is None:
            return Outcome.SUPPRESSED
        media = self._require(self._media)

        content_hash = resolve_content_hash(attachment.file_unique_id)
        if content_hash is not None and await media.contains(content_hash):
            logger.debug("media_already_cached", content_hash=content_hash)
            return Outcome.SUPPRESSED

        try:
            data = await self._transport.fetch_attachment_bytes(attachment.file_id)
        except Exception as e:
            self.events.error("GIF upload failed", e, message.sender_id)
            return Outcome.FAILED

        content_hash = content_hash or hash_bytes(data)
        origin_ref = generate_origin_ref(message.conversation_id, message.message_id)  # type: ignore[arg-type]
        encoded = base64.b64encode(data).decode("ascii")

        if await media.ingest(content_hash, origin_ref, encoded):
            self.events.record(
                EventKind.GIF_SAVED, EventSubtype.SYSTEM, content_hash, message.sender_id
            )
        return Outcome.SUPPRESSED

    # === ACCESSORS ===

    @property
    def config(self) -> BotLanesConfig:
        return self._config

    @property
    def context(self) -> ConversationContextStore:
        return self._context

    @property
    def queue(self) -> ConversationQueueManager:
        return self._queue

    @property
    def events(self) -> EventLog:
        return self._require(self._events)

    @property
    def media(self) -> MediaCache:
        return self._require(self._media)

    # === HELPERS ===

    def _require(self, service: Any) -> Any:
        if service is None:
            self._ensure_connected()
            raise RuntimeError("BotLanes service not initialized")
        return service

    async def _pause(self, low: float, high: float) -> None:
        if high <= 0:
            return
        await asyncio.sleep(random.uniform(low, high))

    async def _announce(self, conversation_id: ConversationId, kind: PresenceKind) -> None:
        try:
            await self._transport.announce_presence(conversation_id, kind)
        except Exception as e:
            logger.debug(
                "presence_failed",
                conversation_id=conversation_id,
                kind=kind.value,
                error=str(e),
            )

    async def _keep_presence(self, conversation_id: ConversationId, kind: PresenceKind) -> None:
        while True:
            await asyncio.sleep(self._config.draw_presence_interval)
            await self._announce(conversation_id, kind)

    def _on_lane_error(self, conversation_id: ConversationId, error: BaseException) -> None:
        if self._events is not None:
            self._events.error("Lane task failed", error, conversation_id)
