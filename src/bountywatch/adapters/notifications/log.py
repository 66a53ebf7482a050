"""Sink writing change events to the application log."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .render import describe_event

if TYPE_CHECKING:
    from bountywatch.domain.model import ChangeEvent

log = getLogger(__name__)


@dataclass(slots=True)
class LogSink:
    name: str = "log"

    def notify(self, event: ChangeEvent) -> None:
        log.info(describe_event(event))

    def announce(self, text: str) -> None:
        log.info(text)
