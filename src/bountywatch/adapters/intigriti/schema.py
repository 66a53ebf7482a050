"""Pydantic models describing Intigriti directory records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated

from pydantic import AliasChoices, Field

from bountywatch.adapters.directory_schema import (
    NONE_ON_ERROR,
    DirectoryBaseModel,
    Flag,
    LenientList,
    OptionalText,
)


class IntigritiTarget(DirectoryBaseModel):
    name: OptionalText = None
    endpoint: OptionalText = None
    target: OptionalText = None
    type: OptionalText = None

    @property
    def label(self) -> str | None:
        return self.name or self.endpoint or self.target


class IntigritiTargets(DirectoryBaseModel):
    in_scope: LenientList[IntigritiTarget | str] = Field(
        default_factory=list["IntigritiTarget | str"]
    )


class IntigritiProgram(DirectoryBaseModel):
    name: OptionalText = None
    url: OptionalText = None
    handle: OptionalText = None
    company_handle: OptionalText = Field(
        default=None, validation_alias=AliasChoices("companyHandle", "company_handle")
    )
    logo: OptionalText = None
    bounty: Flag = False
    min_bounty: object = Field(
        default=None, validation_alias=AliasChoices("minBounty", "min_bounty")
    )
    max_bounty: object = Field(
        default=None, validation_alias=AliasChoices("maxBounty", "max_bounty")
    )
    targets: Annotated[IntigritiTargets | None, NONE_ON_ERROR] = None
    in_scope: LenientList[IntigritiTarget | str] = Field(
        default_factory=list["IntigritiTarget | str"]
    )
    domains: LenientList[OptionalText] = Field(default_factory=list["str | None"])

    @property
    def declares_max_bounty(self) -> bool:
        # a present key counts even when its value is null
        return "max_bounty" in self.model_fields_set

    @property
    def slug(self) -> str | None:
        if self.company_handle and self.handle:
            return f"{self.company_handle}/{self.handle}"
        return None


IntigritiRecordInput = IntigritiProgram | Mapping[str, object]
