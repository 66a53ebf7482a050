"""Error taxonomy for the watcher core."""

from __future__ import annotations


class WatcherError(RuntimeError):
    """Base class for watcher errors."""


class FetchError(WatcherError):
    """Raised when a platform snapshot cannot be retrieved."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class SnapshotFormatError(FetchError):
    """Raised when a snapshot was downloaded but cannot be decoded into records."""


class EmptySnapshotError(FetchError):
    """Raised when a platform returns no records while programs are still stored."""


class MalformedRecordError(WatcherError):
    """Raised when a raw record lacks the fields required for a canonical program."""


class PersistenceError(WatcherError):
    """Raised when a program write or delete could not be committed."""


class NotificationError(WatcherError):
    """Raised by sinks when a change event could not be delivered."""
