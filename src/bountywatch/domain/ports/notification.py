"""Ports for delivering change events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bountywatch.domain.model import ChangeEvent


@runtime_checkable
class NotificationSink(Protocol):
    """Transport accepting change events and free-form announcements.

    Delivery problems are reported by raising
    ``bountywatch.domain.errors.NotificationError``.
    """

    name: str

    def notify(self, event: ChangeEvent) -> None: ...

    def announce(self, text: str) -> None: ...
