"""Shared HTTP delivery for notification sinks."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx

from bountywatch.adapters.http_resilience import ResilientClient
from bountywatch.domain.errors import NotificationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from bountywatch.config.http_resilience import ResilienceConfig

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def post_json(
    url: str,
    payload: dict[str, object],
    *,
    resilience: ResilienceConfig,
    client_factory: ClientFactory,
) -> httpx.Response:
    """POST ``payload`` and return the response, raising ``NotificationError`` on failure.

    Error messages name the sink, never the URL, since webhook and bot URLs
    embed credentials.
    """

    return asyncio.run(
        _post_json_async(url, payload, resilience=resilience, client_factory=client_factory)
    )


async def _post_json_async(
    url: str,
    payload: dict[str, object],
    *,
    resilience: ResilienceConfig,
    client_factory: ClientFactory,
) -> httpx.Response:
    try:
        async with client_factory(resilience) as client:
            response = await client.post(url, json=payload)
    except httpx.HTTPError as exc:
        raise NotificationError(f"{resilience.name} request failed: {type(exc).__name__}") from exc
    if not response.is_success:
        raise NotificationError(f"{resilience.name} answered with HTTP {response.status_code}")
    return response
