"""Reconciliation of platform snapshots against the program store."""

from __future__ import annotations

from .contracts import PlatformSettings, PlatformSyncResult
from .engine import ProgramReconciler, compare_programs
from .policy import NotificationPreferences, should_notify
from .scope_diff import ScopeDiff, diff_scopes

__all__ = [
    "NotificationPreferences",
    "PlatformSettings",
    "PlatformSyncResult",
    "ProgramReconciler",
    "ScopeDiff",
    "compare_programs",
    "diff_scopes",
    "should_notify",
]
