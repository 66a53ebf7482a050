from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from bountywatch.adapters.hackerone import CANONICALIZER as HACKERONE
from bountywatch.config import NotificationFlags, PlatformConfig
from bountywatch.domain.errors import FetchError
from bountywatch.domain.model import Platform, ProgramType, Reward, RunContext
from bountywatch.domain.notification import NotificationDispatcher
from bountywatch.domain.reconciliation import ProgramReconciler, compare_programs
from tests.helpers.programs import (
    FakeUnitOfWork,
    InMemoryProgramRepository,
    RecordingSink,
    ScriptedFetcher,
    make_canonicalizer,
    make_program,
    snapshot,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bountywatch.domain.canonicalization import PlatformCanonicalizer
    from bountywatch.domain.model import Program
    from bountywatch.domain.reconciliation import PlatformSyncResult

URL = "https://directory.example/hackerone.json"
STEADY = RunContext(first_run=False)
FIRST_RUN = RunContext(first_run=True)
ALL_FLAGS = NotificationFlags(
    new_program=True,
    removed_program=True,
    new_scope=True,
    removed_scope=True,
    changed_scope=True,
    new_type=True,
)


class Harness:
    def __init__(
        self,
        *stored: Program,
        failing_keys: Iterable[str] = (),
        flags: NotificationFlags = ALL_FLAGS,
        allow_empty: bool = False,
        unreadable_keys: Iterable[str] = (),
        listing_fails: bool = False,
    ) -> None:
        self.repository = InMemoryProgramRepository(
            stored, unreadable_keys=unreadable_keys, listing_fails=listing_fails
        )
        self.uow = FakeUnitOfWork(self.repository, failing_keys=failing_keys)
        self.fetcher = ScriptedFetcher()
        self.sink = RecordingSink()
        self.settings = PlatformConfig(
            url=URL, monitor=True, notifications=flags, allow_empty_snapshot=allow_empty
        )
        self.reconciler = ProgramReconciler(
            fetcher=self.fetcher,
            unit_of_work_factory=lambda: self.uow,
            dispatcher=NotificationDispatcher(sinks=[self.sink]),
        )

    def run(
        self,
        body: bytes | Exception,
        *,
        context: RunContext = STEADY,
        canonicalizer: PlatformCanonicalizer | None = None,
    ) -> PlatformSyncResult:
        self.fetcher.responses[URL] = body
        return self.reconciler.reconcile(
            canonicalizer or make_canonicalizer(), self.settings, context=context
        )


def test_new_programs_are_persisted_and_notified() -> None:
    program = make_program("Acme", scope={"t-0": "api.acme.com (URL)"})
    harness = Harness()

    result = harness.run(snapshot(program))

    assert (result.processed, result.new, result.updated, result.removed) == (1, 1, 0, 0)
    assert harness.repository.get(program.key) is not None
    [event] = harness.sink.events
    assert event.is_new
    assert event.new_scope == ["api.acme.com (URL)"]


def test_first_run_persists_without_notifying() -> None:
    programs = [make_program(name) for name in ("A", "B", "C")]
    harness = Harness(flags=NotificationFlags(new_program=False))

    result = harness.run(snapshot(*programs), context=FIRST_RUN)

    assert result.new == 3
    assert harness.repository.count() == 3
    assert harness.uow.commits == 3
    assert harness.sink.events == []
    assert result.notified == 0


def test_unchanged_snapshot_is_a_no_op() -> None:
    program = make_program("Acme", scope={"t-0": "api.acme.com (URL)"})
    harness = Harness(program)

    result = harness.run(snapshot(program))

    assert result.processed == 1
    assert (result.new, result.updated, result.removed) == (0, 0, 0)
    assert harness.uow.commits == 0
    assert harness.sink.events == []


def test_scope_addition_emits_update_with_only_that_delta() -> None:
    stored = make_program("Acme", scope={"t-0": "api.foo.com (URL)"})
    current = make_program("Acme", scope={"t-0": "api.foo.com (URL)", "t-1": "app.foo.com (URL)"})
    harness = Harness(stored)

    result = harness.run(snapshot(current))

    assert result.updated == 1
    [event] = harness.sink.events
    assert not event.is_new
    assert not event.is_removed
    assert event.new_scope == ["app.foo.com (URL)"]
    assert event.removed_scope == []
    assert event.changed_scope == []
    assert event.new_type is None
    assert event.reward is None
    assert harness.repository.get(current.key).scope == current.scope  # pyright: ignore[reportOptionalMemberAccess]


def test_type_and_reward_changes_are_reported() -> None:
    stored = make_program("Acme")
    current = make_program("Acme", program_type=ProgramType.RDP, reward=Reward("100", "5000"))
    harness = Harness(stored)

    harness.run(snapshot(current))

    [event] = harness.sink.events
    assert event.new_type is ProgramType.RDP
    assert event.reward == Reward("100", "5000")


def test_removed_program_is_reported_and_deleted() -> None:
    a, b, c = (make_program(name) for name in ("A", "B", "C"))
    harness = Harness(a, b, c)

    result = harness.run(snapshot(a, c))

    assert result.removed == 1
    assert harness.repository.get(b.key) is None
    [event] = harness.sink.events
    assert event.is_removed
    assert event.program.name == "B"


def test_rename_is_a_removal_plus_a_creation() -> None:
    old = make_program("Acme")
    renamed = make_program("Acme Corp", url=old.url)
    harness = Harness(old)

    result = harness.run(snapshot(renamed))

    assert (result.new, result.removed) == (1, 1)
    kinds = sorted(("new" if e.is_new else "removed", e.program.name) for e in harness.sink.events)
    assert kinds == [("new", "Acme Corp"), ("removed", "Acme")]


def test_fetch_failure_aborts_without_writes() -> None:
    stored = make_program("Acme")
    harness = Harness(stored)

    result = harness.run(FetchError("boom", url=URL))

    assert not result.completed
    assert "boom" in (result.aborted or "")
    assert harness.repository.get(stored.key) is not None
    assert harness.uow.commits == 0


def test_undecodable_snapshot_aborts_the_platform() -> None:
    harness = Harness(make_program("Acme"))

    result = harness.run(b"<html>maintenance</html>")

    assert not result.completed
    assert harness.repository.count() == 1


def test_empty_snapshot_with_stored_programs_aborts() -> None:
    harness = Harness(make_program("A"), make_program("B"))

    result = harness.run(snapshot())

    assert not result.completed
    assert harness.repository.count() == 2
    assert harness.sink.events == []


def test_empty_snapshot_can_be_allowed() -> None:
    harness = Harness(make_program("A"), make_program("B"), allow_empty=True)

    result = harness.run(snapshot())

    assert result.completed
    assert result.removed == 2
    assert harness.repository.count() == 0


def test_empty_snapshot_on_empty_store_is_fine() -> None:
    harness = Harness()

    result = harness.run(snapshot())

    assert result.completed
    assert result.processed == 0


def test_malformed_records_are_skipped() -> None:
    good = make_program("Acme")
    harness = Harness()

    result = harness.run(snapshot({"name": "", "url": "https://x"}, good))

    assert result.skipped == 1
    assert result.new == 1


def test_persistence_failure_skips_record_and_its_notification() -> None:
    broken = make_program("Broken")
    fine = make_program("Fine")
    harness = Harness(failing_keys={broken.key})

    result = harness.run(snapshot(broken, fine))

    assert result.failed == 1
    assert result.new == 1
    assert harness.repository.get(broken.key) is None
    assert [event.program.name for event in harness.sink.events] == ["Fine"]


def test_failed_removal_is_not_counted_or_notified() -> None:
    kept = make_program("Kept")
    gone = make_program("Gone")
    harness = Harness(kept, gone, failing_keys={gone.key})

    result = harness.run(snapshot(kept))

    assert result.removed == 0
    assert result.failed == 1
    assert harness.repository.get(gone.key) is not None
    assert harness.sink.events == []



def test_unreadable_store_aborts_only_the_listing_platform() -> None:
    stored = make_program("Acme")
    harness = Harness(stored, listing_fails=True)

    result = harness.run(snapshot(make_program("Globex")))

    assert not result.completed
    assert "cannot list" in (result.aborted or "")
    assert harness.uow.commits == 0
    assert set(harness.repository.programs) == {stored.key}
    assert harness.sink.events == []


def test_unreadable_record_is_counted_as_failed_and_processing_continues() -> None:
    unreadable = make_program("Unreadable")
    fine = make_program("Fine")
    harness = Harness(unreadable, unreadable_keys={unreadable.key})

    result = harness.run(snapshot(unreadable, fine))

    assert result.completed
    assert result.failed == 1
    assert result.new == 1
    assert [event.program.name for event in harness.sink.events] == ["Fine"]


def test_record_with_odd_scope_shape_is_kept_not_removed() -> None:
    acme = make_program("Acme", url="https://hackerone.com/acme")
    other = make_program("Other", url="https://hackerone.com/other")
    harness = Harness(acme, other)
    body = json.dumps(
        [
            {"name": "Acme", "handle": "acme", "targets": {"in_scope": None}},
            {"name": "Other", "handle": "other", "targets": "n/a"},
        ]
    ).encode()

    result = harness.run(body, canonicalizer=HACKERONE)

    assert (result.processed, result.skipped, result.removed) == (2, 0, 0)
    assert set(harness.repository.programs) == {acme.key, other.key}
    assert not any(event.is_removed for event in result.events)


def test_events_are_recorded_even_when_not_notified() -> None:
    harness = Harness(flags=NotificationFlags())

    result = harness.run(snapshot(make_program("Acme")))

    assert len(result.events) == 1
    assert result.notified == 0
    assert harness.sink.events == []


def test_summary_line_lists_counters() -> None:
    harness = Harness()

    result = harness.run(snapshot(make_program("Acme")))

    assert result.summary() == "hackerone: 1 processed, 1 new, 0 updated, 0 removed"
    assert result.platform is Platform.HACKERONE


@pytest.mark.parametrize(
    ("stored_reward", "current_reward", "expected"),
    [
        (None, None, None),
        (Reward("1", "2"), Reward("1", "2"), None),
        (Reward("1", "2"), None, Reward("", "")),
        (None, Reward("", ""), None),
    ],
)
def test_compare_programs_reward_delta(
    stored_reward: Reward | None, current_reward: Reward | None, expected: Reward | None
) -> None:
    stored = make_program("Acme", reward=stored_reward, scope={"a": "x"})
    current = make_program("Acme", reward=current_reward, scope={"a": "x", "b": "y"})

    event = compare_programs(stored, current)

    assert event is not None
    assert event.reward == expected
