"""Service layer for bot_lanes.

This module exports the building blocks the orchestrator wires together.
"""

from bot_lanes.services.command_protocol import (
    DEFAULT_TAGS,
    CommandProtocol,
    CommandTag,
    ParsedResponse,
    extract,
)
from bot_lanes.services.context_store import ConversationContextStore
from bot_lanes.services.dispatcher import DispatchReport, DispatchTarget, SideEffectDispatcher
from bot_lanes.services.event_log import EventLog
from bot_lanes.services.media_cache import MediaCache
from bot_lanes.services.message_router import MessageRouter, Route, RouteKind
from bot_lanes.services.queue import ConversationLane, ConversationQueueManager

__all__ = [
    "DEFAULT_TAGS",
    "CommandProtocol",
    "CommandTag",
    "ConversationContextStore",
    "ConversationLane",
    "ConversationQueueManager",
    "DispatchReport",
    "DispatchTarget",
    "EventLog",
    "MediaCache",
    "MessageRouter",
    "ParsedResponse",
    "Route",
    "RouteKind",
    "SideEffectDispatcher",
    "extract",
]
