"""Per-platform reconciliation of a directory snapshot against the store.

One cycle reads the platform snapshot, canonicalizes its records, compares each
program with the stored copy and commits every creation, update and removal on
its own. Events are handed to the dispatcher only after their transition was
committed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from bountywatch.domain.errors import (
    EmptySnapshotError,
    FetchError,
    MalformedRecordError,
    PersistenceError,
)
from bountywatch.domain.model import NO_REWARD, ChangeEvent

from .contracts import PlatformSyncResult
from .policy import should_notify
from .scope_diff import diff_scopes

if TYPE_CHECKING:
    from collections.abc import Callable

    from bountywatch.domain.canonicalization import PlatformCanonicalizer
    from bountywatch.domain.model import Program, RunContext
    from bountywatch.domain.notification import NotificationDispatcher
    from bountywatch.domain.ports import ProgramUnitOfWork, SnapshotFetcher

    from .contracts import PlatformSettings

log = getLogger(__name__)


def compare_programs(previous: Program, current: Program) -> ChangeEvent | None:
    """Return an update event carrying the non-empty deltas, or ``None``."""

    scope = diff_scopes(previous.scope, current.scope)
    event = ChangeEvent(
        program=current,
        new_scope=scope.added,
        removed_scope=scope.removed,
        changed_scope=scope.changed,
    )
    if previous.type != current.type:
        event.new_type = current.type
    if previous.reward_pair() != current.reward_pair():
        event.reward = current.reward or NO_REWARD
    return event if event.has_changes else None


@dataclass(slots=True)
class ProgramReconciler:
    """Reconcile one platform at a time against the program store."""

    fetcher: SnapshotFetcher
    unit_of_work_factory: Callable[[], ProgramUnitOfWork]
    dispatcher: NotificationDispatcher

    def reconcile(
        self,
        canonicalizer: PlatformCanonicalizer,
        settings: PlatformSettings,
        *,
        context: RunContext,
    ) -> PlatformSyncResult:
        platform = canonicalizer.platform
        result = PlatformSyncResult(platform=platform)
        log.info(f"{platform}: fetching {settings.url}")

        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.programs
            try:
                programs = self._current_programs(canonicalizer, settings.url, result)
                stored_keys = repository.keys_for_platform(platform)
                if not programs and stored_keys and not settings.allow_empty_snapshot:
                    raise EmptySnapshotError(
                        f"{platform} returned no programs while {len(stored_keys)} are stored",
                        url=settings.url,
                    )
            except FetchError as exc:
                log.warning(f"{platform}: cycle aborted: {exc}")
                result.aborted = str(exc)
                return result
            except PersistenceError as exc:
                log.error(f"{platform}: cycle aborted, stored programs unreadable: {exc}")
                uow.rollback()
                result.aborted = str(exc)
                return result

            current_keys: set[str] = set()
            for program in programs:
                result.processed += 1
                current_keys.add(program.key)
                self._reconcile_program(uow, program, settings, context, result)

            for key in stored_keys:
                if key not in current_keys:
                    self._remove_program(uow, key, settings, context, result)

        log.info(result.summary())
        return result

    def _current_programs(
        self,
        canonicalizer: PlatformCanonicalizer,
        url: str,
        result: PlatformSyncResult,
    ) -> list[Program]:
        body = self.fetcher(url)
        programs: list[Program] = []
        for record in canonicalizer.extract_records(body):
            try:
                programs.append(canonicalizer.canonicalize(record))
            except MalformedRecordError as exc:
                result.skipped += 1
                log.warning(f"{canonicalizer.platform}: skipping record: {exc}")
        return programs

    def _reconcile_program(
        self,
        uow: ProgramUnitOfWork,
        program: Program,
        settings: PlatformSettings,
        context: RunContext,
        result: PlatformSyncResult,
    ) -> None:
        try:
            previous = uow.repositories.programs.get(program.key)
        except PersistenceError:
            self._read_failed(uow, program.key, result)
            return
        if previous is None:
            event = ChangeEvent(program=program, is_new=True, new_scope=program.scope_descriptions)
        else:
            event = compare_programs(previous, program)
            if event is None:
                return

        if not self._commit(uow, lambda: uow.repositories.programs.save(program), program):
            result.failed += 1
            return

        if previous is None:
            result.new += 1
        else:
            result.updated += 1
        self._emit(
            event,
            is_new_record=previous is None,
            settings=settings,
            context=context,
            result=result,
        )

    def _remove_program(
        self,
        uow: ProgramUnitOfWork,
        key: str,
        settings: PlatformSettings,
        context: RunContext,
        result: PlatformSyncResult,
    ) -> None:
        try:
            stored = uow.repositories.programs.get(key)
        except PersistenceError:
            self._read_failed(uow, key, result)
            return
        if stored is None:
            return
        # the event outlives the deleted row
        event = ChangeEvent(program=replace(stored), is_removed=True)
        if not self._commit(uow, lambda: uow.repositories.programs.remove(key), stored):
            result.failed += 1
            return

        result.removed += 1
        self._emit(event, is_new_record=False, settings=settings, context=context, result=result)

    @staticmethod
    def _read_failed(uow: ProgramUnitOfWork, key: str, result: PlatformSyncResult) -> None:
        log.exception(f"{result.platform}: could not load stored program {key}")
        uow.rollback()
        result.failed += 1

    @staticmethod
    def _commit(uow: ProgramUnitOfWork, change: Callable[[], None], program: Program) -> bool:
        try:
            change()
            uow.commit()
        except PersistenceError:
            log.exception(f"{program.platform}: could not persist {program.name!r}")
            uow.rollback()
            return False
        return True

    def _emit(
        self,
        event: ChangeEvent,
        *,
        is_new_record: bool,
        settings: PlatformSettings,
        context: RunContext,
        result: PlatformSyncResult,
    ) -> None:
        result.events.append(event)
        if not should_notify(
            is_new_record=is_new_record,
            event=event,
            flags=settings.notifications,
            first_run=context.first_run,
        ):
            return
        self.dispatcher.dispatch(event)
        result.notified += 1
