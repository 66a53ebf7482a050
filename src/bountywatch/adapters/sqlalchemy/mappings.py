"""SQLAlchemy mapping metadata for canonical programs."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import Any, cast

from sqlalchemy import Column, DateTime, Dialect, Enum, String, Table, Text, TypeDecorator, orm
from sqlalchemy.orm import configure_mappers

from bountywatch.domain.model import Platform, Program, ProgramType, Reward, Scope

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class ScopeType(TypeDecorator[Scope]):
    """Scope mapping stored as a JSON object with sorted keys."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Scope | None, dialect: Dialect) -> str:
        _ = dialect
        return json.dumps(value or {}, sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Scope:
        _ = dialect
        if not value:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        items = cast(dict[Any, Any], loaded)
        return {str(scope_id): str(description) for scope_id, description in items.items()}


class RewardType(TypeDecorator[Reward]):
    """Reward stored as ``{"min": ..., "max": ...}``; ``NULL`` means no reward."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Reward | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps({"min": value.min, "max": value.max})

    def process_result_value(self, value: str | None, dialect: Dialect) -> Reward | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return None
        payload = cast(dict[str, Any], loaded)
        return Reward(min=str(payload.get("min", "")), max=str(payload.get("max", "")))


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

program_table = Table(
    "program",
    mapper_registry.metadata,
    Column("key", String(64), primary_key=True),
    Column("name", String, nullable=False),
    Column("url", String, nullable=False),
    Column(
        "platform",
        Enum(Platform, native_enum=False, values_callable=_enum_values, length=32),
        nullable=False,
        index=True,
    ),
    Column(
        "type",
        Enum(ProgramType, native_enum=False, values_callable=_enum_values, length=8),
        nullable=False,
    ),
    Column("logo", String, nullable=False, default=""),
    Column("scope", ScopeType, nullable=False),
    Column("reward", RewardType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False, default=_utcnow),
    Column("updated_at", UTCDateTime, nullable=False, default=_utcnow, onupdate=_utcnow),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        Program,
        program_table,
        exclude_properties=["created_at", "updated_at"],
    )

    configure_mappers()
    return mapper_registry
