"""Fan change events out to the configured sinks."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from bountywatch.domain.errors import NotificationError

if TYPE_CHECKING:
    from bountywatch.domain.model import ChangeEvent
    from bountywatch.domain.ports import NotificationSink

log = getLogger(__name__)


@dataclass(slots=True)
class NotificationDispatcher:
    """Deliver each event to every sink; delivery problems are only logged."""

    sinks: list[NotificationSink] = field(default_factory=list["NotificationSink"])

    def dispatch(self, event: ChangeEvent) -> int:
        delivered = 0
        for sink in self.sinks:
            try:
                sink.notify(event)
            except NotificationError as exc:
                log.warning(
                    f"{sink.name}: could not deliver event for {event.program.name!r}: {exc}"
                )
                continue
            delivered += 1
        return delivered

    def announce(self, text: str) -> int:
        """Send a plain message, such as the first-run greeting, to every sink."""

        delivered = 0
        for sink in self.sinks:
            try:
                sink.announce(text)
            except NotificationError as exc:
                log.warning(f"{sink.name}: could not deliver announcement: {exc}")
                continue
            delivered += 1
        return delivered
