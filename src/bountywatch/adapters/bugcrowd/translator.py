"""Translate Bugcrowd directory records into canonical programs."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from bountywatch.domain.canonicalization import (
    PlatformCanonicalizer,
    build_program,
    build_reward,
    classify_type,
    decode_records,
    first_non_empty_scope,
    resolve_logo,
    resolve_url,
    scope_description,
)
from bountywatch.domain.errors import MalformedRecordError
from bountywatch.domain.model import Platform, Program, ProgramType

from .schema import BugcrowdProgram, BugcrowdRecordInput, BugcrowdTarget, BugcrowdTargetsByScope

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bountywatch.domain.canonicalization import RawRecord
    from bountywatch.domain.model import Scope

BRIEF_URL_TEMPLATE: Final[str] = "https://bugcrowd.com{slug}"
DEFAULT_LOGO: Final[str] = "https://asset.brandfetch.io/idZPL+3f8a/idw6hFgY3p.png"


def _ensure_program_payload(record: BugcrowdRecordInput) -> BugcrowdProgram:
    if isinstance(record, BugcrowdProgram):
        return record
    try:
        return BugcrowdProgram.model_validate(record)
    except ValidationError as exc:
        raise MalformedRecordError(f"Unreadable Bugcrowd record: {exc}") from exc


def extract_records(body: bytes) -> list[RawRecord]:
    return decode_records(body, wrapper_keys=("programs", "data"))


def translate_program(record: BugcrowdRecordInput) -> Program:
    payload = _ensure_program_payload(record)
    program_type = classify_type(
        payload.offers_bounties, payload.bounty, payload.max_bounty is not None
    )
    reward = None
    if program_type is ProgramType.RDP:
        reward = build_reward(payload.min_bounty, payload.max_bounty)

    return build_program(
        platform=Platform.BUGCROWD,
        name=payload.name,
        url=resolve_url(payload.url, payload.brief_url, BRIEF_URL_TEMPLATE),
        program_type=program_type,
        logo=resolve_logo(payload.logo or payload.logo_url, default=DEFAULT_LOGO),
        scope=first_non_empty_scope(
            (partial(_target_scope, payload), partial(_target_group_scope, payload))
        ),
        reward=reward,
        context=f"(brief_url={payload.brief_url!r})",
    )


def _target_scope(payload: BugcrowdProgram) -> Scope:
    targets = payload.targets
    if isinstance(targets, BugcrowdTargetsByScope):
        targets = targets.in_scope
    if not targets:
        return {}
    return _scope_from_targets(targets)


def _target_group_scope(payload: BugcrowdProgram) -> Scope:
    grouped = (target for group in payload.target_groups for target in group.targets)
    return _scope_from_targets(grouped)


def _scope_from_targets(targets: Iterable[BugcrowdTarget | str]) -> Scope:
    # Positions are counted over non-empty targets only, across groups.
    scope: Scope = {}
    for target in targets:
        if isinstance(target, str):
            label, kind = target.strip(), None
        else:
            label, kind = target.label, target.type
        if not label:
            continue
        scope[f"target-{len(scope)}"] = scope_description(label, kind or "unknown")
    return scope


CANONICALIZER = PlatformCanonicalizer(
    platform=Platform.BUGCROWD,
    extract_records=extract_records,
    canonicalize=translate_program,
)
