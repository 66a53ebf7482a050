"""Pydantic models describing Bugcrowd directory records."""

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


class BugcrowdTarget(DirectoryBaseModel):
    name: OptionalText = None
    target: OptionalText = None
    type: OptionalText = Field(default=None, validation_alias=AliasChoices("type", "category"))

    @property
    def label(self) -> str | None:
        return self.name or self.target


class BugcrowdTargetsByScope(DirectoryBaseModel):
    in_scope: LenientList[BugcrowdTarget | str] = Field(
        default_factory=list["BugcrowdTarget | str"]
    )


class BugcrowdTargetGroup(DirectoryBaseModel):
    targets: LenientList[BugcrowdTarget | str] = Field(default_factory=list["BugcrowdTarget | str"])


class BugcrowdProgram(DirectoryBaseModel):
    name: OptionalText = None
    url: OptionalText = None
    brief_url: OptionalText = Field(
        default=None, validation_alias=AliasChoices("briefUrl", "brief_url")
    )
    logo: OptionalText = None
    logo_url: OptionalText = Field(
        default=None, validation_alias=AliasChoices("logoUrl", "logo_url")
    )
    offers_bounties: Flag = False
    bounty: Flag = False
    min_bounty: object = None
    max_bounty: object = None
    targets: Annotated[
        LenientItems[BugcrowdTarget | str] | BugcrowdTargetsByScope | None, NONE_ON_ERROR
    ] = None
    target_groups: LenientList[BugcrowdTargetGroup] = Field(
        default_factory=list["BugcrowdTargetGroup"]
    )


BugcrowdRecordInput = BugcrowdProgram | Mapping[str, object]
