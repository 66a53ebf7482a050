"""Application orchestration entry points."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from bountywatch.adapters.http_fetcher import HttpSnapshotFetcher
from bountywatch.adapters.notifications import DiscordWebhookSink, LogSink, TelegramSink
from bountywatch.adapters.platforms import DEFAULT_CANONICALIZERS
from bountywatch.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from bountywatch.config.http_resilience import directory_resilience
from bountywatch.config.storage import get_database_config
from bountywatch.domain.errors import FetchError
from bountywatch.domain.model import ChangeEvent, Platform, Program, RunContext
from bountywatch.domain.notification import NotificationDispatcher
from bountywatch.domain.ports.unit_of_work import ProgramUnitOfWork
from bountywatch.domain.reconciliation import PlatformSyncResult, ProgramReconciler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bountywatch.config.watcher import PlatformConfig, WatcherConfig
    from bountywatch.domain.canonicalization import PlatformCanonicalizer
    from bountywatch.domain.ports import NotificationSink, SnapshotFetcher

UnitOfWorkFactory = Callable[[], ProgramUnitOfWork]

STARTUP_MESSAGE = (
    "bountywatch started.\n"
    "Watching bug bounty directories for new programs, scope changes, removals "
    "and type or reward updates."
)
TEST_NOTIFICATION_URL = "https://example.com/bountywatch-test"

log = getLogger(__name__)


@dataclass(slots=True)
class WatchResult:
    """Outcome of one polling cycle over all monitored platforms."""

    first_run: bool
    platforms: list[PlatformSyncResult] = field(default_factory=list[PlatformSyncResult])

    @property
    def monitored(self) -> int:
        return len(self.platforms)

    @property
    def aborted(self) -> list[Platform]:
        return [result.platform for result in self.platforms if not result.completed]


@dataclass(frozen=True, slots=True)
class ProbeOutcome:
    platform: Platform
    reachable: bool
    detail: str


def build_sinks(config: WatcherConfig) -> list[NotificationSink]:
    """Create the sinks enabled by ``config``; the log sink is always present."""

    sinks: list[NotificationSink] = [LogSink()]
    if config.discord_webhook:
        sinks.append(DiscordWebhookSink(webhook_url=config.discord_webhook))
    if config.telegram.enabled:
        sinks.append(
            TelegramSink(bot_token=config.telegram.bot_token, chat_id=config.telegram.chat_id)
        )
    return sinks


def first_run_test_event() -> ChangeEvent:
    """Sample new-program event sent once after the first run to check the sinks."""

    program = Program(
        name="bountywatch test notification",
        url=TEST_NOTIFICATION_URL,
        platform=Platform.HACKERONE,
        scope={"test-0": "*.example.com (wildcard)", "test-1": "api.example.com (url)"},
    )
    return ChangeEvent(program=program, is_new=True, new_scope=program.scope_descriptions)


def build_fetcher(*, cache_ttl_seconds: float | None = None) -> HttpSnapshotFetcher:
    return HttpSnapshotFetcher(resilience=directory_resilience(cache_ttl_seconds=cache_ttl_seconds))


def detect_run_context(unit_of_work_factory: UnitOfWorkFactory) -> RunContext:
    with unit_of_work_factory() as uow:
        stored = uow.repositories.programs.count()
    return RunContext(first_run=stored == 0)


def monitored_platforms(
    config: WatcherConfig,
    canonicalizers: Sequence[PlatformCanonicalizer] = DEFAULT_CANONICALIZERS,
) -> list[tuple[PlatformCanonicalizer, PlatformConfig]]:
    """Pair each known platform with its settings, skipping absent or disabled ones."""

    selected: list[tuple[PlatformCanonicalizer, PlatformConfig]] = []
    for canonicalizer in canonicalizers:
        settings = config.platform(canonicalizer.platform)
        if settings is None or not settings.monitor:
            log.info(f"{canonicalizer.platform}: not monitored, skipping")
            continue
        selected.append((canonicalizer, settings))
    return selected


def probe_platforms(
    config: WatcherConfig,
    *,
    fetcher: SnapshotFetcher | None = None,
    canonicalizers: Sequence[PlatformCanonicalizer] = DEFAULT_CANONICALIZERS,
) -> list[ProbeOutcome]:
    """Fetch every monitored directory once and log whether it answered.

    Failures are reported, never raised.
    """

    effective_fetcher = fetcher or build_fetcher()
    outcomes: list[ProbeOutcome] = []
    for canonicalizer, settings in monitored_platforms(config, canonicalizers):
        platform = canonicalizer.platform
        try:
            body = effective_fetcher(settings.url)
        except FetchError as exc:
            log.warning(f"{platform}: probe failed: {exc}")
            outcomes.append(ProbeOutcome(platform=platform, reachable=False, detail=str(exc)))
            continue
        log.info(f"{platform}: probe ok, {len(body)} bytes")
        outcomes.append(
            ProbeOutcome(platform=platform, reachable=True, detail=f"{len(body)} bytes")
        )
    return outcomes


def run_watch(
    config: WatcherConfig,
    *,
    fetcher: SnapshotFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    sinks: Sequence[NotificationSink] | None = None,
    canonicalizers: Sequence[PlatformCanonicalizer] = DEFAULT_CANONICALIZERS,
    probe: bool = True,
    cache_ttl_seconds: float | None = None,
) -> WatchResult:
    """Run one reconciliation cycle for every monitored platform."""

    started = time.perf_counter()
    if unit_of_work_factory is None:
        if not is_started():
            startup(database_uri=get_database_config(database_path=config.database.path).uri)
        unit_of_work_factory = SqlAlchemyUnitOfWork
    effective_fetcher = fetcher or build_fetcher(cache_ttl_seconds=cache_ttl_seconds)
    effective_sinks = list(sinks) if sinks is not None else build_sinks(config)

    dispatcher = NotificationDispatcher(sinks=effective_sinks)

    context = detect_run_context(unit_of_work_factory)
    announce = context.first_run and config.first_run_announcements
    if context.first_run:
        log.info("Store is empty: first run, only new-program notifications can be sent")
    if announce:
        log.info("Sending startup message")
        dispatcher.announce(STARTUP_MESSAGE)

    if probe:
        probe_platforms(config, fetcher=effective_fetcher, canonicalizers=canonicalizers)

    reconciler = ProgramReconciler(
        fetcher=effective_fetcher,
        unit_of_work_factory=unit_of_work_factory,
        dispatcher=dispatcher,
    )
    result = WatchResult(first_run=context.first_run)
    for canonicalizer, settings in monitored_platforms(config, canonicalizers):
        result.platforms.append(reconciler.reconcile(canonicalizer, settings, context=context))

    if announce:
        log.info("Sending test notification after first run")
        dispatcher.dispatch(first_run_test_event())

    if result.monitored == 0:
        log.warning("No platform is monitored; enable one with \"monitor\": true")
    log.info(
        f"Finished watch cycle: platforms={result.monitored}, aborted={len(result.aborted)}, "
        f"duration={time.perf_counter() - started:.1f}s"
    )
    return result
