"""Configuration management for bot_lanes.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from typing import Self

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "MongoSettings",
    "LLMSettings",
    "ImageSettings",
    "TelegramSettings",
    "BotLanesConfig",
]


class MongoSettings(BaseSettings):
    """MongoDB connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="BOT_LANES_MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "bot_lanes"
    collection_prefix: str = ""


class LLMSettings(BaseSettings):
    """Text generation backend settings."""

    model_config = SettingsConfigDict(
        env_prefix="BOT_LANES_LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "openai"  # "openai" or "anthropic"
    base_url: str | None = None  # OpenAI-compatible endpoint root
    api_key: SecretStr | None = None
    model: str = "gpt-4o-mini"
    system_prompt: str = ""
    max_tokens: int = 1024
    temperature: float = 0.7
    top_p: float = 0.9
    timeout: float = 30.0


class ImageSettings(BaseSettings):
    """Image generation backend settings."""

    model_config = SettingsConfigDict(
        env_prefix="BOT_LANES_IMAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = "https://fluxwebui.com"
    model: str = "flux"
    width: int = 576
    height: int = 1024
    timeout: float = 60.0


class TelegramSettings(BaseSettings):
    """Telegram transport settings."""

    model_config = SettingsConfigDict(
        env_prefix="BOT_LANES_TELEGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    token: SecretStr | None = None


class BotLanesConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = BotLanesConfig()
        window = config.context_window
    """

    model_config = SettingsConfigDict(
        env_prefix="BOT_LANES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Component settings (nested)
    mongo: MongoSettings = MongoSettings()
    llm: LLMSettings = LLMSettings()
    image: ImageSettings = ImageSettings()
    telegram: TelegramSettings = TelegramSettings()

    # Routing
    trigger_word: str = "bot"
    allowed_chat_ids: list[int] = []

    # Conversation memory
    context_retention: int = 18
    context_window: int = 8
    outbound_history: int = 10

    # Response pacing (seconds)
    think_delay_min: float = 1.0
    think_delay_max: float = 2.5
    reply_delay_min: float = 1.5
    reply_delay_max: float = 3.5
    draw_presence_interval: float = 2.0

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.context_window < 0:
            raise ValueError("context_window must be non-negative")
        if self.context_retention < self.context_window:
            raise ValueError(
                f"context_retention ({self.context_retention}) must be >= "
                f"context_window ({self.context_window})"
            )
        if self.think_delay_min > self.think_delay_max:
            raise ValueError("think_delay_min must be <= think_delay_max")
        if self.reply_delay_min > self.reply_delay_max:
            raise ValueError("reply_delay_min must be <= reply_delay_max")
        if self.draw_presence_interval <= 0:
            raise ValueError("draw_presence_interval must be positive")
        return self
