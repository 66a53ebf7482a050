"""Lenient Pydantic building blocks shared by the program directory schemas.

Directory dumps are loosely typed: the same field may arrive as a string, a
number, a boolean or ``null`` depending on the platform and the day. These
annotated types coerce such values the way a permissive JSON reader would.

Only ``name`` and the program URL decide whether a record is usable, so the
scope containers never fail validation: a list field that is not a list reads
as empty, list items that do not fit are dropped, and a nested container of the
wrong shape reads as absent.
"""

from __future__ import annotations

from logging import getLogger
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)

log = getLogger(__name__)

T = TypeVar("T")

_TRUE_STRINGS = frozenset({"true", "1", "yes"})


def _to_text(value: object) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    # null, objects and arrays carry no usable text
    return None


def _to_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _list_or_empty(value: object) -> object:
    return value if isinstance(value, list) else []


def _drop_invalid_items(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    if not isinstance(value, list):
        return handler(value)
    kept: list[Any] = []
    for item in value:
        try:
            kept.extend(handler([item]))
        except ValidationError as exc:
            log.debug(f"Dropping unreadable directory entry {item!r}: {exc.error_count()} errors")
    return kept


def _none_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        log.debug(f"Ignoring directory field of unexpected shape: {type(value).__name__}")
        return None


OptionalText = Annotated[str | None, BeforeValidator(_to_text)]
Flag = Annotated[bool, BeforeValidator(_to_flag)]

# Items that fail validation are dropped; a non-list value is still rejected so
# that unions can try their other members.
LenientItems = Annotated[list[T], WrapValidator(_drop_invalid_items)]
# Like ``LenientItems`` but anything that is not a list reads as ``[]``.
LenientList = Annotated[
    list[T], BeforeValidator(_list_or_empty), WrapValidator(_drop_invalid_items)
]
# Attach to optional containers: a value of the wrong shape reads as ``None``.
NONE_ON_ERROR = WrapValidator(_none_on_error)


class DirectoryBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
