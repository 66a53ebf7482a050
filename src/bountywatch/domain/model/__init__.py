"""Domain model for canonical program listings."""

from __future__ import annotations

from .enums import Platform, ProgramType
from .events import ChangeEvent, RunContext, ScopeChange
from .program import NO_REWARD, Program, Reward, Scope

__all__ = [
    "NO_REWARD",
    "ChangeEvent",
    "Platform",
    "Program",
    "ProgramType",
    "Reward",
    "RunContext",
    "Scope",
    "ScopeChange",
]
