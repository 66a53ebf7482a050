"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import SnapshotFetcher
from .notification import NotificationSink
from .persistence import ProgramRepository
from .unit_of_work import (
    ProgramRepositories,
    ProgramUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "NotificationSink",
    "ProgramRepositories",
    "ProgramRepository",
    "ProgramUnitOfWork",
    "RepositoryCollection",
    "SnapshotFetcher",
    "UnitOfWork",
]
