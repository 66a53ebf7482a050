"""Notification sinks delivering change events."""

from __future__ import annotations

from .discord import DiscordWebhookSink
from .log import LogSink
from .render import describe_event
from .telegram import TelegramSink

__all__ = ["DiscordWebhookSink", "LogSink", "TelegramSink", "describe_event"]
