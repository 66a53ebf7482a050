"""Canonical program entity."""

from __future__ import annotations

from dataclasses import dataclass, field

from bountywatch.domain.identity import program_key

from .enums import Platform, ProgramType

type Scope = dict[str, str]


@dataclass(frozen=True, slots=True)
class Reward:
    """Bounty range as published upstream; values are kept verbatim."""

    min: str = ""
    max: str = ""

    def as_pair(self) -> tuple[str, str]:
        return (self.min, self.max)


NO_REWARD = Reward()


@dataclass
class Program:
    """Platform-agnostic snapshot of one bug-bounty program listing.

    ``key`` is derived from ``name`` and ``url`` and cannot be passed in.
    """

    name: str
    url: str
    platform: Platform
    type: ProgramType = ProgramType.VDP
    logo: str = ""
    scope: Scope = field(default_factory=dict[str, str])
    reward: Reward | None = None
    key: str = field(init=False)

    def __post_init__(self) -> None:
        self.key = program_key(self.name, self.url)

    @property
    def scope_descriptions(self) -> list[str]:
        return list(self.scope.values())

    def reward_pair(self) -> tuple[str, str]:
        return (self.reward or NO_REWARD).as_pair()
