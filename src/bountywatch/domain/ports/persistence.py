"""Ports for persisting canonical programs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bountywatch.domain.model import Platform, Program


@runtime_checkable
class ProgramRepository(Protocol):
    """Key-indexed store of the last observed snapshot of each program."""

    def get(self, key: str) -> Program | None: ...

    def save(self, program: Program) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys_for_platform(self, platform: Platform) -> list[str]: ...

    def count(self) -> int: ...
