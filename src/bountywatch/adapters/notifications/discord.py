"""Discord webhook sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from bountywatch.config.http_resilience import notification_resilience

from .delivery import ClientFactory, default_client_factory, post_json
from .render import describe_event, truncate

if TYPE_CHECKING:
    from bountywatch.config.http_resilience import ResilienceConfig
    from bountywatch.domain.model import ChangeEvent

log = getLogger(__name__)

DISCORD_CONTENT_LIMIT = 2000


@dataclass(slots=True)
class DiscordWebhookSink:
    webhook_url: str
    name: str = "discord"
    resilience: ResilienceConfig = field(
        default_factory=partial(notification_resilience, "discord")
    )
    client_factory: ClientFactory = field(default=default_client_factory)

    def notify(self, event: ChangeEvent) -> None:
        self._post(describe_event(event))
        log.debug(f"Discord notification sent for {event.program.name!r}")

    def announce(self, text: str) -> None:
        self._post(text)

    def _post(self, content: str) -> None:
        post_json(
            self.webhook_url,
            {
                "content": truncate(content, DISCORD_CONTENT_LIMIT),
                "allowed_mentions": {"parse": []},
            },
            resilience=self.resilience,
            client_factory=self.client_factory,
        )
