"""HTTP implementation of the snapshot fetch port."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from bountywatch.adapters.http_resilience import ResilientClient
from bountywatch.config.http_resilience import directory_resilience
from bountywatch.domain.errors import FetchError

if TYPE_CHECKING:
    from collections.abc import Callable

    from bountywatch.config.http_resilience import ResilienceConfig
    from bountywatch.domain.ports.fetching import SnapshotFetcher

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpSnapshotFetcher:
    resilience: ResilienceConfig = field(default_factory=directory_resilience)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, url: str) -> bytes:
        return asyncio.run(self._fetch_async(url))

    async def _fetch_async(self, url: str) -> bytes:
        try:
            async with self.client_factory(self.resilience) as client:
                response = await client.get(url)
                await response.aread()
        except httpx.HTTPError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        if not response.is_success:
            raise FetchError(f"{url} answered with HTTP {response.status_code}", url=url)

        body = response.content
        log.debug(f"Fetched {len(body)} bytes from {url}")
        return body


if TYPE_CHECKING:
    _fetcher_check: SnapshotFetcher = HttpSnapshotFetcher()
