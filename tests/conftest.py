"""Shared test fixtures for bot_lanes.

This module provides pytest fixtures used across all tests.
"""

from unittest.mock import AsyncMock

import pytest
from mocks.mock_backends import InMemoryStorage
from mocks.mock_transport import MockTransport

from bot_lanes.config import BotLanesConfig
from bot_lanes.models.inbound import Attachment, AttachmentKind, InboundMessage
from bot_lanes.models.media import MediaItem
from bot_lanes.services.event_log import EventLog
from bot_lanes.services.media_cache import MediaCache

BOT_ID = 999
CHAT_ID = -100123


# Mock fixtures
@pytest.fixture
def mock_storage() -> AsyncMock:
    """Create mock storage interface."""
    storage = AsyncMock()
    storage.append_log.return_value = "test-record-id"
    storage.insert_media_if_absent.return_value = True
    storage.media_exists.return_value = False
    storage.sample_media.return_value = None
    storage.count_media.return_value = 0
    return storage


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport(bot_id=BOT_ID)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def event_log(storage: InMemoryStorage) -> EventLog:
    return EventLog(storage)


@pytest.fixture
def media_cache(storage: InMemoryStorage) -> MediaCache:
    return MediaCache(storage)


@pytest.fixture
def fast_config() -> BotLanesConfig:
    """Config with pacing delays disabled."""
    return BotLanesConfig(
        trigger_word="bot",
        allowed_chat_ids=[CHAT_ID],
        think_delay_min=0,
        think_delay_max=0,
        reply_delay_min=0,
        reply_delay_max=0,
        draw_presence_interval=0.01,
    )


# Sample data fixtures
@pytest.fixture
def sample_item() -> MediaItem:
    """Create sample MediaItem."""
    return MediaItem.from_bytes("AgADxyz", f"t.me/{CHAT_ID}/42", b"GIF89a-fake")


@pytest.fixture
def trigger_message() -> InboundMessage:
    """Create a message addressed to the bot by trigger word."""
    return InboundMessage(
        conversation_id=CHAT_ID,
        message_id=10,
        sender_id=1,
        sender_name="Alice",
        text="bot how are you?",
    )


@pytest.fixture
def reply_message() -> InboundMessage:
    """Create a message replying to the bot (continuation)."""
    return InboundMessage(
        conversation_id=CHAT_ID,
        message_id=11,
        sender_id=1,
        sender_name="Alice",
        text="and what about tomorrow?",
        reply_to_message_id=5,
        reply_to_sender_id=BOT_ID,
    )


@pytest.fixture
def animation_message() -> InboundMessage:
    """Create a message carrying an animation."""
    return InboundMessage(
        conversation_id=CHAT_ID,
        message_id=12,
        sender_id=2,
        sender_name="Bob",
        attachment=Attachment(
            file_id="file-1",
            file_unique_id="AgADuniq",
            mime_type="video/mp4",
            kind=AttachmentKind.ANIMATION,
        ),
    )
