"""Telegram bot sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Final

from bountywatch.config.http_resilience import notification_resilience
from bountywatch.domain.errors import NotificationError

from .delivery import ClientFactory, default_client_factory, post_json
from .render import describe_event, truncate

if TYPE_CHECKING:
    from bountywatch.config.http_resilience import ResilienceConfig
    from bountywatch.domain.model import ChangeEvent

log = getLogger(__name__)

TELEGRAM_API_URL: Final[str] = "https://api.telegram.org"
TELEGRAM_TEXT_LIMIT = 4096


@dataclass(slots=True)
class TelegramSink:
    bot_token: str
    chat_id: str
    name: str = "telegram"
    api_url: str = TELEGRAM_API_URL
    resilience: ResilienceConfig = field(
        default_factory=partial(notification_resilience, "telegram")
    )
    client_factory: ClientFactory = field(default=default_client_factory)

    def notify(self, event: ChangeEvent) -> None:
        self._send(describe_event(event))
        log.debug(f"Telegram notification sent for {event.program.name!r}")

    def announce(self, text: str) -> None:
        self._send(text)

    def _send(self, text: str) -> None:
        response = post_json(
            f"{self.api_url}/bot{self.bot_token}/sendMessage",
            {
                "chat_id": self.chat_id,
                "text": truncate(text, TELEGRAM_TEXT_LIMIT),
                "disable_web_page_preview": True,
            },
            resilience=self.resilience,
            client_factory=self.client_factory,
        )
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("ok") is False:
            raise NotificationError(f"telegram rejected the message: {payload.get('description')}")
