"""Reusable fakes and helpers for program reconciliation tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bountywatch.domain.canonicalization import (
    PlatformCanonicalizer,
    build_program,
    decode_records,
)
from bountywatch.domain.errors import FetchError, NotificationError, PersistenceError
from bountywatch.domain.model import Platform, Program, ProgramType, Reward
from bountywatch.domain.ports.unit_of_work import ProgramRepositories

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType

    from bountywatch.domain.model import ChangeEvent, Scope


def make_program(
    name: str = "Acme",
    *,
    url: str | None = None,
    platform: Platform = Platform.HACKERONE,
    scope: Scope | None = None,
    program_type: ProgramType = ProgramType.VDP,
    reward: Reward | None = None,
) -> Program:
    return Program(
        name=name,
        url=url or f"https://example.com/{name.lower()}",
        platform=platform,
        type=program_type,
        logo="https://example.com/logo.png",
        scope=dict(scope or {}),
        reward=reward,
    )


def program_record(program: Program) -> dict[str, object]:
    """Raw record understood by :func:`make_canonicalizer`."""

    return {
        "name": program.name,
        "url": program.url,
        "type": str(program.type),
        "logo": program.logo,
        "scope": dict(program.scope),
        "reward": list(program.reward.as_pair()) if program.reward else None,
    }


def snapshot(*programs: Program | Mapping[str, object]) -> bytes:
    records = [
        program_record(item) if isinstance(item, Program) else dict(item) for item in programs
    ]
    return json.dumps(records).encode("utf-8")


def make_canonicalizer(platform: Platform = Platform.HACKERONE) -> PlatformCanonicalizer:
    """Canonicalizer for flat test records carrying the program fields verbatim."""

    def canonicalize(record: Mapping[str, object]) -> Program:
        reward = record.get("reward")
        scope = record.get("scope") or {}
        return build_program(
            platform=platform,
            name=str(record.get("name") or ""),
            url=str(record.get("url") or ""),
            program_type=ProgramType(str(record.get("type") or "vdp")),
            logo=str(record.get("logo") or ""),
            scope={str(k): str(v) for k, v in dict(scope).items()},  # pyright: ignore[reportUnknownArgumentType]
            reward=Reward(*reward) if isinstance(reward, list) else None,
        )

    return PlatformCanonicalizer(
        platform=platform,
        extract_records=decode_records,
        canonicalize=canonicalize,
    )


class ScriptedFetcher:
    """Fetcher returning canned bodies per URL; exceptions are raised when scripted."""

    def __init__(self, responses: Mapping[str, bytes | Exception] | None = None) -> None:
        self.responses: dict[str, bytes | Exception] = dict(responses or {})
        self.calls: list[str] = []

    def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise FetchError(f"no scripted response for {url}", url=url)
        if isinstance(response, Exception):
            raise response
        return response


class InMemoryProgramRepository:
    """Dict-backed repository; reads of ``unreadable_keys`` and listings fail when asked."""

    def __init__(
        self,
        programs: Iterable[Program] = (),
        *,
        unreadable_keys: Iterable[str] = (),
        listing_fails: bool = False,
    ) -> None:
        self.programs: dict[str, Program] = {program.key: program for program in programs}
        self.touched: set[str] = set()
        self.unreadable_keys = set(unreadable_keys)
        self.listing_fails = listing_fails

    def get(self, key: str) -> Program | None:
        if key in self.unreadable_keys:
            raise PersistenceError(f"cannot read {key}")
        return self.programs.get(key)

    def save(self, program: Program) -> None:
        self.programs[program.key] = program
        self.touched.add(program.key)

    def remove(self, key: str) -> None:
        self.programs.pop(key, None)
        self.touched.add(key)

    def keys_for_platform(self, platform: Platform) -> list[str]:
        if self.listing_fails:
            raise PersistenceError(f"cannot list {platform} programs")
        return [key for key, program in self.programs.items() if program.platform == platform]

    def count(self) -> int:
        return len(self.programs)


class FakeUnitOfWork:
    """Unit of work over a shared in-memory repository.

    Commits touching a key listed in ``failing_keys`` raise ``PersistenceError``
    and roll the repository back to the last committed state.
    """

    def __init__(
        self,
        repository: InMemoryProgramRepository,
        *,
        failing_keys: Iterable[str] = (),
    ) -> None:
        self.repository = repository
        self.failing_keys = set(failing_keys)
        self.commits = 0
        self.rollbacks = 0
        self._committed: dict[str, Program] = dict(repository.programs)

    @property
    def repositories(self) -> ProgramRepositories:
        return ProgramRepositories(programs=self.repository)

    def __enter__(self) -> FakeUnitOfWork:
        self._committed = dict(self.repository.programs)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        touched = self.repository.touched
        self.repository.touched = set()
        if touched & self.failing_keys:
            self.rollback()
            raise PersistenceError(f"commit failed for {sorted(touched & self.failing_keys)}")
        self.commits += 1
        self._committed = dict(self.repository.programs)

    def rollback(self) -> None:
        self.rollbacks += 1
        self.repository.programs = dict(self._committed)
        self.repository.touched = set()


@dataclass
class RecordingSink:
    name: str = "recording"
    fail: bool = False
    events: list[ChangeEvent] = field(default_factory=list["ChangeEvent"])
    announcements: list[str] = field(default_factory=list[str])

    def notify(self, event: ChangeEvent) -> None:
        if self.fail:
            raise NotificationError(f"{self.name} is down")
        self.events.append(event)

    def announce(self, text: str) -> None:
        if self.fail:
            raise NotificationError(f"{self.name} is down")
        self.announcements.append(text)

