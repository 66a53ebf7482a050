"""Canonicalization contract and shared resolution rules.

Every platform adapter turns one raw directory record into a :class:`Program`.
The rules shared by all platforms live here:

- URL: explicit field first, then a platform URL template filled with a slug;
  no URL means the record is skipped.
- Logo: explicit logo unless it contains a known "unset" marker, else the
  platform default.
- Type: ``rdp`` when any bounty indicator is truthy, else ``vdp``.
- Scope: strategies are tried in order and the first one yielding entries wins.

Scope IDs are assigned positionally per strategy (``<prefix>-<index>``). They are
the diff key used by :mod:`bountywatch.domain.reconciliation.scope_diff`, so a
reshuffled upstream list shows up as changed descriptions rather than as
identical scopes.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast

from bountywatch.domain.errors import MalformedRecordError, SnapshotFormatError
from bountywatch.domain.model import Program, ProgramType, Reward

if TYPE_CHECKING:
    from bountywatch.domain.model import Platform, Scope

log = getLogger(__name__)

type RawRecord = Mapping[str, object]
type ScopeStrategy = Callable[[], Scope]


@dataclass(frozen=True, slots=True)
class PlatformCanonicalizer:
    """Strategy bundle turning one platform's snapshot into canonical programs."""

    platform: Platform
    extract_records: Callable[[bytes], list[RawRecord]]
    canonicalize: Callable[[RawRecord], Program]


def decode_records(body: bytes, *, wrapper_keys: Iterable[str] = ()) -> list[RawRecord]:
    """Decode a JSON snapshot into its list of raw records.

    The records are expected in a root array; when the root is an object the
    ``wrapper_keys`` are consulted in order. Non-object entries are dropped.
    """

    try:
        payload: object = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotFormatError(f"Snapshot is not valid JSON: {exc}") from exc

    if isinstance(payload, list):
        return _mapping_items(cast(list[object], payload))
    if isinstance(payload, Mapping):
        wrapped = cast(Mapping[str, object], payload)
        for key in wrapper_keys:
            candidate = wrapped.get(key)
            if isinstance(candidate, list):
                return _mapping_items(cast(list[object], candidate))
    raise SnapshotFormatError("Snapshot does not contain a list of programs")


def _mapping_items(items: list[object]) -> list[RawRecord]:
    return [cast(RawRecord, item) for item in items if isinstance(item, Mapping)]


def resolve_url(explicit: str | None, slug: str | None, template: str | None) -> str:
    if explicit:
        return explicit
    if slug and template:
        return template.format(slug=slug)
    return ""


def resolve_logo(candidate: str | None, *, default: str, unset_markers: Iterable[str] = ()) -> str:
    if not candidate:
        return default
    if any(marker in candidate for marker in unset_markers):
        return default
    return candidate


def classify_type(*indicators: object) -> ProgramType:
    return ProgramType.RDP if any(indicators) else ProgramType.VDP


def scope_description(name: str, kind: str) -> str:
    return f"{name} ({kind})"


def first_non_empty_scope(strategies: Iterable[ScopeStrategy]) -> Scope:
    for strategy in strategies:
        scope = strategy()
        if scope:
            return scope
    return {}


def opaque_text(value: object) -> str:
    """Render an upstream value as an opaque string without interpreting it."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def build_reward(min_value: object, max_value: object) -> Reward:
    return Reward(min=opaque_text(min_value), max=opaque_text(max_value))


def build_program(
    *,
    platform: Platform,
    name: str | None,
    url: str,
    program_type: ProgramType,
    logo: str,
    scope: Scope,
    reward: Reward | None = None,
    context: str = "",
) -> Program:
    """Create a canonical program, rejecting records without name or URL."""

    if not name or not url:
        raise MalformedRecordError(
            f"{platform} record missing name/url: name={name!r}, url={url!r} {context}".rstrip()
        )
    return Program(
        name=name,
        url=url,
        platform=platform,
        type=program_type,
        logo=logo,
        scope=scope,
        reward=reward,
    )
