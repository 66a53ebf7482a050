"""Translate Intigriti directory records into canonical programs."""

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

from .schema import IntigritiProgram, IntigritiRecordInput, IntigritiTarget

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bountywatch.domain.canonicalization import RawRecord
    from bountywatch.domain.model import Scope

PROGRAM_URL_TEMPLATE: Final[str] = "https://app.intigriti.com/programs/{slug}/detail"
DEFAULT_LOGO: Final[str] = (
    "https://api.intigriti.com/file/api/file/public_bucket_d23a1f29-c2fe-4d03-8daf-"
    "df24d1e076ea-c2449aa2-3a08-4bf5-a430-441a11020851"
)


def _ensure_program_payload(record: IntigritiRecordInput) -> IntigritiProgram:
    if isinstance(record, IntigritiProgram):
        return record
    try:
        return IntigritiProgram.model_validate(record)
    except ValidationError as exc:
        raise MalformedRecordError(f"Unreadable Intigriti record: {exc}") from exc


def extract_records(body: bytes) -> list[RawRecord]:
    return decode_records(body, wrapper_keys=("records", "data"))


def translate_program(record: IntigritiRecordInput) -> Program:
    payload = _ensure_program_payload(record)
    program_type = classify_type(payload.declares_max_bounty, payload.bounty)
    reward = None
    if program_type is ProgramType.RDP:
        reward = build_reward(payload.min_bounty, payload.max_bounty)

    return build_program(
        platform=Platform.INTIGRITI,
        name=payload.name,
        url=resolve_url(payload.url, payload.slug, PROGRAM_URL_TEMPLATE),
        program_type=program_type,
        logo=resolve_logo(payload.logo, default=DEFAULT_LOGO),
        scope=first_non_empty_scope(
            (
                partial(_nested_in_scope, payload),
                partial(_flat_in_scope, payload),
                partial(_domain_scope, payload),
            )
        ),
        reward=reward,
        context=f"(handle={payload.handle!r})",
    )


def _nested_in_scope(payload: IntigritiProgram) -> Scope:
    if payload.targets is None:
        return {}
    return _scope_from_targets(payload.targets.in_scope)


def _flat_in_scope(payload: IntigritiProgram) -> Scope:
    return _scope_from_targets(payload.in_scope)


def _domain_scope(payload: IntigritiProgram) -> Scope:
    return {
        f"domain-{index}": scope_description(domain, "domain")
        for index, domain in enumerate(payload.domains)
        if domain
    }


def _scope_from_targets(targets: Sequence[IntigritiTarget | str]) -> Scope:
    scope: Scope = {}
    for index, target in enumerate(targets):
        if isinstance(target, str):
            label, kind = target.strip(), None
        else:
            label, kind = target.label, target.type
        if not label:
            continue
        scope[f"inscope-{index}"] = scope_description(label, kind or "unknown")
    return scope


CANONICALIZER = PlatformCanonicalizer(
    platform=Platform.INTIGRITI,
    extract_records=extract_records,
    canonicalize=translate_program,
)
