"""SQLAlchemy adapter package for bountywatch."""

from __future__ import annotations

from .mappings import mapper_registry, program_table, start_mappers
from .repositories import SqlAlchemyProgramRepository
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyProgramRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "mapper_registry",
    "program_table",
    "shutdown",
    "start_mappers",
    "startup",
]
