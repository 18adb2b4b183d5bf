"""Public models for bot_lanes.

This module exports all public data transfer objects.
"""

from bot_lanes.models.command import Command, ReactionCommand, SendMediaCommand
from bot_lanes.models.event import EventKind, EventSubtype, LogRecord
from bot_lanes.models.inbound import Attachment, AttachmentKind, InboundMessage
from bot_lanes.models.media import MediaItem
from bot_lanes.models.turn import ConversationId, Role, Turn

__all__ = [
    "Attachment",
    "AttachmentKind",
    "Command",
    "ConversationId",
    "EventKind",
    "EventSubtype",
    "InboundMessage",
    "LogRecord",
    "MediaItem",
    "ReactionCommand",
    "Role",
    "SendMediaCommand",
    "Turn",
]
