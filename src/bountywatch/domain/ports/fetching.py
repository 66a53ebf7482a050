"""Ports for fetching platform snapshots."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SnapshotFetcher(Protocol):
    """Callable port returning the raw body of a program directory.

    Implementations apply their own timeout/retry handling and raise
    ``bountywatch.domain.errors.FetchError`` when the platform is unavailable.
    """

    def __call__(self, url: str) -> bytes: ...


__all__ = ["SnapshotFetcher"]
