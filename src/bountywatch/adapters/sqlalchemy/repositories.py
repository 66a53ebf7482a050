"""Repository implementations backed by SQLAlchemy sessions.

Every operation reports database failures as ``PersistenceError`` so the
reconciler can treat them per record or per platform.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from bountywatch.adapters.sqlalchemy.mappings import program_table
from bountywatch.domain.errors import PersistenceError
from bountywatch.domain.model import Program

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from bountywatch.domain.model import Platform


class SqlAlchemyProgramRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> Program | None:
        try:
            return self.session.get(Program, key)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load program {key}: {exc}") from exc

    def save(self, program: Program) -> None:
        try:
            self.session.merge(program)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not stage {program.name!r}: {exc}") from exc

    def remove(self, key: str) -> None:
        stored = self.get(key)
        if stored is None:
            return
        try:
            self.session.delete(stored)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not stage removal of {key}: {exc}") from exc

    def keys_for_platform(self, platform: Platform) -> list[str]:
        stmt = (
            select(program_table.c.key)
            .where(program_table.c.platform == platform)
            .order_by(program_table.c.created_at, program_table.c.key)
        )
        try:
            return list(self.session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not list {platform} programs: {exc}") from exc

    def count(self) -> int:
        stmt = select(func.count()).select_from(program_table)
        try:
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not count programs: {exc}") from exc
