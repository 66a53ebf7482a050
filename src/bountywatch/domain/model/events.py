"""Change events produced by reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import ProgramType
    from .program import Program, Reward


@dataclass(frozen=True, slots=True)
class ScopeChange:
    old: str
    new: str


@dataclass(slots=True)
class ChangeEvent:
    """What changed for one program during a polling cycle.

    Update events only carry the deltas that are non-empty; ``reward`` is set when
    the published range differs from the stored one (an emptied range is reported
    as ``Reward("", "")``).
    """

    program: Program
    is_new: bool = False
    is_removed: bool = False
    new_scope: list[str] = field(default_factory=list[str])
    removed_scope: list[str] = field(default_factory=list[str])
    changed_scope: list[ScopeChange] = field(default_factory=list[ScopeChange])
    new_type: ProgramType | None = None
    reward: Reward | None = None

    def __post_init__(self) -> None:
        if self.is_new and self.is_removed:
            raise ValueError("A change event cannot be both new and removed")

    @property
    def has_changes(self) -> bool:
        return bool(
            self.new_scope
            or self.removed_scope
            or self.changed_scope
            or self.new_type is not None
            or self.reward is not None
        )


@dataclass(frozen=True, slots=True)
class RunContext:
    """Process-wide run mode; ``first_run`` is true when the store started empty."""

    first_run: bool
