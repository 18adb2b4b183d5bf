#!/usr/bin/env python
"""Run the bot_lanes Telegram bot.

Long-polls Telegram and answers in the configured chats until
interrupted (Ctrl+C / SIGTERM).

Usage:
    python scripts/run_bot.py [--json-logs] [--debug]

Prerequisites:
    1. MongoDB running on configured URI
    2. .env file with the Telegram token and LLM endpoint configured

Environment variables (via .env):
    BOT_LANES_TELEGRAM_TOKEN=123456:ABC...
    BOT_LANES_MONGO_URI=mongodb://localhost:27017
    BOT_LANES_MONGO_DATABASE=bot_lanes
    BOT_LANES_LLM_PROVIDER=openai
    BOT_LANES_LLM_BASE_URL=https://api.openai.com/v1
    BOT_LANES_LLM_API_KEY=your_api_key
    BOT_LANES_LLM_MODEL=gpt-4o-mini
    BOT_LANES_LLM_SYSTEM_PROMPT="You are a friendly chat member..."
    BOT_LANES_TRIGGER_WORD=bot
    BOT_LANES_ALLOWED_CHAT_IDS=[-1001234567890]
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bot_lanes.config import BotLanesConfig
from bot_lanes.infra.image.flux_client import FluxImageClient
from bot_lanes.infra.llm import backend_class_for
from bot_lanes.infra.mongo.repositories import MongoStorageRepository
from bot_lanes.infra.telegram.transport import TelegramTransport
from bot_lanes.logging import configure_logging, get_logger
from bot_lanes.orchestrator import BotLanes

logger = get_logger("run_bot")


async def main(args: argparse.Namespace) -> None:
    """Main entry point."""
    config = BotLanesConfig()

    if config.telegram.token is None:
        print("ERROR: BOT_LANES_TELEGRAM_TOKEN not set in environment")
        print("Please set up your .env file with the required variables.")
        sys.exit(1)

    if not config.allowed_chat_ids:
        logger.warning("allow_list_empty", hint="set BOT_LANES_ALLOWED_CHAT_IDS")

    transport = TelegramTransport(config.telegram)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, transport.stop)

    async with BotLanes(
        storage_class=MongoStorageRepository,
        backend_class=backend_class_for(config.llm.provider),
        transport=transport,
        image_class=FluxImageClient,
        config=config,
    ) as bot:
        logger.info(
            "bot_running",
            trigger_word=config.trigger_word,
            allowed_chats=len(config.allowed_chat_ids),
        )
        await transport.run(bot.submit)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the bot_lanes Telegram bot")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    configure_logging(
        level=logging.DEBUG if args.debug else logging.INFO,
        json_output=args.json_logs,
    )
    asyncio.run(main(args))
