"""Pydantic models describing HackerOne directory records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated

from pydantic import AliasChoices, Field

from bountywatch.adapters.directory_schema import (
    NONE_ON_ERROR,
    DirectoryBaseModel,
    Flag,
    LenientItems,
    LenientList,
    OptionalText,
)


class HackerOneTarget(DirectoryBaseModel):
    asset_identifier: OptionalText = None
    asset: OptionalText = None
    type: OptionalText = Field(default=None, validation_alias=AliasChoices("type", "asset_type"))
    eligible_for_submission: Flag = False

    @property
    def identifier(self) -> str | None:
        return self.asset_identifier or self.asset


class HackerOneTargets(DirectoryBaseModel):
    in_scope: LenientList[HackerOneTarget] = Field(default_factory=list["HackerOneTarget"])


class HackerOneProgram(DirectoryBaseModel):
    name: OptionalText = None
    handle: OptionalText = None
    url: OptionalText = None
    profile_picture: OptionalText = None
    offers_bounties: Flag = False
    targets: Annotated[
        HackerOneTargets | LenientItems[HackerOneTarget] | None, NONE_ON_ERROR
    ] = None


HackerOneRecordInput = HackerOneProgram | Mapping[str, object]
