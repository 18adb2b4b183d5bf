"""Telegram transport for bot_lanes."""

from bot_lanes.infra.telegram.transport import TelegramTransport, to_inbound

__all__ = ["TelegramTransport", "to_inbound"]
