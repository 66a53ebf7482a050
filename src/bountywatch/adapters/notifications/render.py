"""Plain-text summaries of change events."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bountywatch.domain.model import ChangeEvent

TRUNCATION_MARKER = "\n…"


def event_title(event: ChangeEvent) -> str:
    program = event.program
    if event.is_new:
        kind = "New program"
    elif event.is_removed:
        kind = "Program removed"
    else:
        kind = "Program updated"
    return f"{kind}: {program.name} [{program.platform}]"


def describe_event(event: ChangeEvent) -> str:
    """Render ``event`` as a few lines of text, listing only non-empty deltas."""

    program = event.program
    lines = [event_title(event), program.url]
    if event.is_new or event.new_type is not None:
        lines.append(f"Type: {program.type}")
    if event.reward is not None:
        lines.append(f"Reward: {event.reward.min or '?'} - {event.reward.max or '?'}")
    lines.extend(_section("Scope added", event.new_scope))
    lines.extend(_section("Scope removed", event.removed_scope))
    lines.extend(_section("Scope changed", [f"{c.old} -> {c.new}" for c in event.changed_scope]))
    return "\n".join(lines)


def _section(heading: str, entries: list[str]) -> list[str]:
    if not entries:
        return []
    return [f"{heading} ({len(entries)}):", *(f"- {entry}" for entry in entries)]


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
