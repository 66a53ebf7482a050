"""Inputs and outcomes of a per-platform reconciliation cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from bountywatch.domain.model import ChangeEvent, Platform

    from .policy import NotificationPreferences


class PlatformSettings(Protocol):
    """What the reconciler needs to know about one monitored platform."""

    @property
    def url(self) -> str: ...

    @property
    def notifications(self) -> NotificationPreferences: ...

    @property
    def allow_empty_snapshot(self) -> bool: ...


@dataclass(slots=True)
class PlatformSyncResult:
    """Counters and events of one platform cycle.

    ``aborted`` holds the reason when the cycle stopped before touching the
    store. ``failed`` counts records whose write or delete could not be
    committed; they are not part of ``new``/``updated``/``removed``.
    """

    platform: Platform
    processed: int = 0
    new: int = 0
    updated: int = 0
    removed: int = 0
    skipped: int = 0
    failed: int = 0
    notified: int = 0
    aborted: str | None = None
    events: list[ChangeEvent] = field(default_factory=list["ChangeEvent"])

    @property
    def completed(self) -> bool:
        return self.aborted is None

    def summary(self) -> str:
        return (
            f"{self.platform}: {self.processed} processed, {self.new} new, "
            f"{self.updated} updated, {self.removed} removed"
        )
