"""Telegram transport for bot_lanes.

This module provides the python-telegram-bot implementation of the
transport interface plus the long-polling loop that feeds inbound
messages to the orchestrator.
"""

import asyncio
from collections.abc import Callable
from typing import Self

from telegram import InputFile, Message, ReactionTypeEmoji, ReplyParameters, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from bot_lanes.config import TelegramSettings
from bot_lanes.errors import TransportError
from bot_lanes.interfaces.transport import (
    MediaKind,
    PresenceKind,
    RenderMode,
    TransportInterface,
)
from bot_lanes.logging import get_logger
from bot_lanes.models.inbound import Attachment, AttachmentKind, InboundMessage
from bot_lanes.models.turn import ConversationId

__all__ = [
    "TelegramTransport",
    "to_inbound",
]

logger = get_logger(__name__)

MessageCallback = Callable[[InboundMessage], object]

_PARSE_MODES: dict[RenderMode, str | None] = {
    RenderMode.PLAIN: None,
    RenderMode.MARKDOWN_V2: ParseMode.MARKDOWN_V2,
    RenderMode.HTML: ParseMode.HTML,
}


def to_inbound(message: Message) -> InboundMessage:
    """Normalize a Telegram message."""
    attachment = None
    # Animations also populate message.document, so check them first
    if message.animation is not None:
        attachment = Attachment(
            file_id=message.animation.file_id,
            file_unique_id=message.animation.file_unique_id,
            mime_type=message.animation.mime_type,
            kind=AttachmentKind.ANIMATION,
        )
    elif message.document is not None:
        attachment = Attachment(
            file_id=message.document.file_id,
            file_unique_id=message.document.file_unique_id,
            mime_type=message.document.mime_type,
            kind=AttachmentKind.DOCUMENT,
        )

    sender = message.from_user
    reply = message.reply_to_message
    reply_sender = reply.from_user if reply is not None else None
    return InboundMessage(
        conversation_id=message.chat_id,
        message_id=message.message_id,
        sender_id=sender.id if sender else None,
        sender_name=sender.full_name if sender else "",
        text=message.text,
        attachment=attachment,
        reply_to_message_id=reply.message_id if reply is not None else None,
        reply_to_sender_id=reply_sender.id if reply_sender else None,
    )


class TelegramTransport(TransportInterface):
    """python-telegram-bot implementation of TransportInterface.

    Updates are processed concurrently; per-conversation ordering is
    restored by the orchestrator's lanes.

    Example:
        transport = TelegramTransport(settings)
        async with BotLanes(..., transport=transport) as bot:
            await transport.run(bot.submit)
    """

    config_class = TelegramSettings

    def __init__(self, settings: TelegramSettings) -> None:
        """Initialize the transport.

        Args:
            settings: Telegram settings (token required)

        Raises:
            ValueError: If no token is configured
        """
        if settings.token is None:
            raise ValueError("Telegram bot token not configured")
        self._settings = settings
        self._app: Application = (
            Application.builder()
            .token(settings.token.get_secret_value())
            .concurrent_updates(True)
            .build()
        )
        self._on_message: MessageCallback | None = None
        self._bot_id: int | None = None
        self._stop = asyncio.Event()

    @classmethod
    def from_config(cls, config: TelegramSettings) -> Self:
        return cls(config)

    @property
    def bot_id(self) -> int | None:
        return self._bot_id

    # === LIFECYCLE ===

    async def run(self, on_message: MessageCallback) -> None:
        """Long-poll for updates until stop() is called.

        Args:
            on_message: Called with every normalized inbound message
        """
        self._on_message = on_message
        self._app.add_handler(
            MessageHandler(
                (filters.TEXT | filters.ANIMATION | filters.Document.ALL) & ~filters.COMMAND,
                self._handle_update,
            )
        )

        await self._app.initialize()
        await self._app.start()
        self._bot_id = self._app.bot.id
        logger.info("telegram_connected", username=self._app.bot.username)

        await self._app.updater.start_polling(allowed_updates=[Update.MESSAGE])
        try:
            await self._stop.wait()
        finally:
            # Lanes may still be sending; close() stops the application
            await self._app.updater.stop()
            self._on_message = None
            logger.info("telegram_polling_stopped")

    def stop(self) -> None:
        self._stop.set()

    async def close(self) -> None:
        """Stop the application and release its HTTP client."""
        if self._app.running:
            await self._app.stop()
        await self._app.shutdown()
        logger.info("telegram_disconnected")

    async def _handle_update(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or self._on_message is None:
            return
        self._on_message(to_inbound(message))

    # === TRANSPORT INTERFACE ===

    async def send_text(
        self,
        conversation_id: ConversationId,
        text: str,
        reply_to_message_id: int | None = None,
        render_mode: RenderMode = RenderMode.PLAIN,
    ) -> int:
        try:
            sent = await self._app.bot.send_message(
                chat_id=conversation_id,
                text=text,
                parse_mode=_PARSE_MODES[render_mode],
                reply_parameters=self._reply_to(reply_to_message_id),
            )
        except TelegramError as e:
            raise TransportError(f"send_message failed: {e}") from e
        return sent.message_id

    async def send_media(
        self,
        conversation_id: ConversationId,
        data: bytes,
        reply_to_message_id: int | None = None,
        kind: MediaKind = MediaKind.ANIMATION,
        filename: str | None = None,
    ) -> int:
        payload = InputFile(data, filename=filename)
        reply = self._reply_to(reply_to_message_id)
        try:
            if kind == MediaKind.PHOTO:
                sent = await self._app.bot.send_photo(
                    chat_id=conversation_id, photo=payload, reply_parameters=reply
                )
            else:
                sent = await self._app.bot.send_animation(
                    chat_id=conversation_id, animation=payload, reply_parameters=reply
                )
        except TelegramError as e:
            raise TransportError(f"send_{kind.value} failed: {e}") from e
        return sent.message_id

    async def set_reaction(
        self,
        conversation_id: ConversationId,
        message_id: int,
        symbol: str,
    ) -> None:
        try:
            await self._app.bot.set_message_reaction(
                chat_id=conversation_id,
                message_id=message_id,
                reaction=[ReactionTypeEmoji(emoji=symbol)],
            )
        except TelegramError as e:
            raise TransportError(f"set_message_reaction failed: {e}") from e

    async def announce_presence(
        self,
        conversation_id: ConversationId,
        kind: PresenceKind = PresenceKind.TYPING,
    ) -> None:
        try:
            await self._app.bot.send_chat_action(chat_id=conversation_id, action=kind.value)
        except TelegramError as e:
            raise TransportError(f"send_chat_action failed: {e}") from e

    async def fetch_attachment_bytes(self, attachment_ref: str) -> bytes:
        try:
            file = await self._app.bot.get_file(attachment_ref)
            data = await file.download_as_bytearray()
        except TelegramError as e:
            raise TransportError(f"file download failed: {e}") from e
        return bytes(data)

    @staticmethod
    def _reply_to(message_id: int | None) -> ReplyParameters | None:
        if message_id is None:
            return None
        return ReplyParameters(message_id=message_id, allow_sending_without_reply=True)
