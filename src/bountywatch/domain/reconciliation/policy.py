"""Decide whether a change event is worth a notification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from bountywatch.domain.model import ChangeEvent


class NotificationPreferences(Protocol):
    """Per-platform notification switches."""

    @property
    def new_program(self) -> bool: ...

    @property
    def removed_program(self) -> bool: ...

    @property
    def new_scope(self) -> bool: ...

    @property
    def removed_scope(self) -> bool: ...

    @property
    def changed_scope(self) -> bool: ...

    @property
    def new_type(self) -> bool: ...

    @property
    def granular(self) -> bool: ...


def should_notify(
    *,
    is_new_record: bool,
    event: ChangeEvent,
    flags: NotificationPreferences,
    first_run: bool,
) -> bool:
    """Return whether ``event`` should be handed to the sinks.

    During the first run only new programs can notify, and only when the
    platform opted into ``new_program``. Updates notify whenever they carry a
    delta unless ``granular`` is set, in which case each kind of delta is gated
    by its own flag. Reward changes have no flag and always qualify.
    """

    if first_run:
        return is_new_record and flags.new_program
    if event.is_removed:
        return flags.removed_program
    if is_new_record:
        return flags.new_program
    if not flags.granular:
        return event.has_changes
    return _granular_update(event, flags)


def _granular_update(event: ChangeEvent, flags: NotificationPreferences) -> bool:
    return (
        (bool(event.new_scope) and flags.new_scope)
        or (bool(event.removed_scope) and flags.removed_scope)
        or (bool(event.changed_scope) and flags.changed_scope)
        or (event.new_type is not None and flags.new_type)
        or event.reward is not None
    )
