"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

ResponseHook = Callable[[httpx.Response], Awaitable[None] | None]
ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS", "POST"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "sqlite"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    response_hooks: tuple[ResponseHook, ...] = field(default_factory=tuple)
    default_headers: Mapping[str, str] | None = None


DIRECTORY_TIMEOUT_SECONDS = 30.0
DIRECTORY_CACHE_TTL_SECONDS = 300.0
DIRECTORY_USER_AGENT = "bountywatch (+https://github.com/bountywatch/bountywatch)"


def _is_non_empty_snapshot(payload: object) -> bool:
    if isinstance(payload, dict):
        payload = payload.get("data", payload)
    return bool(payload)


def directory_resilience(*, cache_ttl_seconds: float | None = None) -> ResilienceConfig:
    """Settings used when downloading program directories."""

    return ResilienceConfig(
        name="directory",
        timeout_seconds=DIRECTORY_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3, allowed_methods=frozenset({"GET"})),
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        cache=CacheConfig(
            backend="sqlite",
            default_ttl_seconds=cache_ttl_seconds or DIRECTORY_CACHE_TTL_SECONDS,
            should_cache=_is_non_empty_snapshot,
        ),
        default_headers={"User-Agent": DIRECTORY_USER_AGENT},
    )


def notification_resilience(name: str) -> ResilienceConfig:
    """Settings used by notification sinks; responses are never cached."""

    return ResilienceConfig(
        name=name,
        timeout_seconds=15.0,
        retry=RetryPolicy(total=0),
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        cache=None,
    )
