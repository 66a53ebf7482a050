"""Translate HackerOne directory records into canonical programs."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from bountywatch.domain.canonicalization import (
    PlatformCanonicalizer,
    build_program,
    classify_type,
    decode_records,
    first_non_empty_scope,
    resolve_logo,
    resolve_url,
    scope_description,
)
from bountywatch.domain.errors import MalformedRecordError
from bountywatch.domain.model import Platform, Program

from .schema import HackerOneProgram, HackerOneRecordInput, HackerOneTarget, HackerOneTargets

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bountywatch.domain.canonicalization import RawRecord
    from bountywatch.domain.model import Scope

PROGRAM_URL_TEMPLATE: Final[str] = "https://hackerone.com/{slug}"
DEFAULT_LOGO: Final[str] = "https://asset.brandfetch.io/idhUp0l1vN/id7Vk4WqZc.png"
# Placeholder avatars are served from the default asset bucket.
UNSET_LOGO_MARKERS: Final[tuple[str, ...]] = ("hackerone-us-west-2-p",)


def _ensure_program_payload(record: HackerOneRecordInput) -> HackerOneProgram:
    if isinstance(record, HackerOneProgram):
        return record
    try:
        return HackerOneProgram.model_validate(record)
    except ValidationError as exc:
        raise MalformedRecordError(f"Unreadable HackerOne record: {exc}") from exc


def extract_records(body: bytes) -> list[RawRecord]:
    return decode_records(body, wrapper_keys=("data",))


def translate_program(record: HackerOneRecordInput) -> Program:
    payload = _ensure_program_payload(record)
    handle = payload.handle or ""
    return build_program(
        platform=Platform.HACKERONE,
        name=payload.name,
        url=resolve_url(payload.url, payload.handle, PROGRAM_URL_TEMPLATE),
        program_type=classify_type(payload.offers_bounties),
        logo=resolve_logo(
            payload.profile_picture, default=DEFAULT_LOGO, unset_markers=UNSET_LOGO_MARKERS
        ),
        scope=first_non_empty_scope(
            (
                partial(_structured_scope, payload, handle),
                partial(_eligible_scope, payload, handle),
            )
        ),
        context=f"(handle={handle!r})",
    )


def _structured_scope(payload: HackerOneProgram, handle: str) -> Scope:
    if not isinstance(payload.targets, HackerOneTargets):
        return {}
    return _scope_from_targets(enumerate(payload.targets.in_scope), handle)


def _eligible_scope(payload: HackerOneProgram, handle: str) -> Scope:
    if not isinstance(payload.targets, list):
        return {}
    eligible = (
        (index, target)
        for index, target in enumerate(payload.targets)
        if target.eligible_for_submission
    )
    return _scope_from_targets(eligible, handle)


def _scope_from_targets(targets: Iterable[tuple[int, HackerOneTarget]], handle: str) -> Scope:
    # HackerOne entries are kept verbatim, blanks included, so positions stay stable.
    return {
        f"{handle}-{index}": scope_description(target.identifier or "", target.type or "")
        for index, target in targets
    }


CANONICALIZER = PlatformCanonicalizer(
    platform=Platform.HACKERONE,
    extract_records=extract_records,
    canonicalize=translate_program,
)
