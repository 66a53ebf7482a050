"""Compare two scope mappings by scope ID."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bountywatch.domain.model import ScopeChange

if TYPE_CHECKING:
    from bountywatch.domain.model import Scope


@dataclass(frozen=True, slots=True)
class ScopeDiff:
    added: list[str] = field(default_factory=list[str])
    removed: list[str] = field(default_factory=list[str])
    changed: list[ScopeChange] = field(default_factory=list[ScopeChange])

    def __bool__(self) -> bool:
        return bool(self.added or self.removed or self.changed)


def diff_scopes(previous: Scope, current: Scope) -> ScopeDiff:
    """Split the scope delta into added, removed and re-described entries.

    IDs are matched exactly. An ID present on both sides with the same
    description contributes nothing.
    """

    added = [description for scope_id, description in current.items() if scope_id not in previous]
    removed = [description for scope_id, description in previous.items() if scope_id not in current]
    changed = [
        ScopeChange(old=previous[scope_id], new=description)
        for scope_id, description in current.items()
        if scope_id in previous and previous[scope_id] != description
    ]
    return ScopeDiff(added=added, removed=removed, changed=changed)
