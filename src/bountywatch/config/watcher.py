"""Watcher configuration file models."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_CONFIG_PATH: Final[str] = "config.json"
TELEGRAM_ENV_VARS: Final = ("TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID")


class WatcherBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class NotificationFlags(WatcherBaseModel):
    """Per-platform subscription flags.

    ``granular`` switches update events from "any change" gating to per-kind
    gating on the remaining flags.
    """

    new_program: bool = False
    removed_program: bool = False
    new_scope: bool = False
    removed_scope: bool = False
    changed_scope: bool = False
    new_type: bool = False
    granular: bool = False


class PlatformConfig(WatcherBaseModel):
    url: str
    monitor: bool = False
    notifications: NotificationFlags = Field(default_factory=NotificationFlags)
    allow_empty_snapshot: bool = False


class TelegramSettings(WatcherBaseModel):
    bot_token: str = ""
    chat_id: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)


class DatabaseSettings(WatcherBaseModel):
    path: str | None = None


class WatcherConfig(WatcherBaseModel):
    platforms: dict[str, PlatformConfig] = Field(default_factory=dict)
    discord_webhook: str | None = Field(default=None, alias="DiscordWebhook")
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    # greeting before and sample notification after the first run
    first_run_announcements: bool = True

    def platform(self, name: str) -> PlatformConfig | None:
        return self.platforms.get(name)

    def with_env_overrides(self) -> WatcherConfig:
        """Return a copy with notification secrets taken from the environment."""

        webhook = optional_env_var("DISCORD_WEBHOOK_URL") or self.discord_webhook
        telegram = TelegramSettings(
            bot_token=optional_env_var("TELEGRAM_BOT_TOKEN") or self.telegram.bot_token,
            chat_id=optional_env_var("TELEGRAM_CHAT_ID") or self.telegram.chat_id,
        )
        if bool(telegram.bot_token) != bool(telegram.chat_id):
            # both Telegram credentials or neither
            require_env_vars(TELEGRAM_ENV_VARS)
        return self.model_copy(update={"discord_webhook": webhook or None, "telegram": telegram})


def resolve_config_path(path: str | os.PathLike[str] | None = None) -> Path:
    if path is not None:
        return Path(path)
    return Path(os.getenv("BOUNTYWATCH_CONFIG") or DEFAULT_CONFIG_PATH)


def load_watcher_config(path: str | os.PathLike[str] | None = None) -> WatcherConfig:
    """Read and validate the watcher config file.

    Raises ``ConfigurationError`` when the file is missing, not JSON, or does not
    match the expected shape.
    """

    config_path = resolve_config_path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {config_path} is not valid JSON: {exc}") from exc

    try:
        config = WatcherConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config file {config_path}: {exc}") from exc

    return config.with_env_overrides()
