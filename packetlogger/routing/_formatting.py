"""Shared line formatting for the game and file sinks.

Keeps the raw pipeline and the dedicated handlers producing identical
timestamps, fake markers and field layouts.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from packetlogger.models.records import MessageRecord

FAKE_PREFIX = "[FAKE] "
FIELD_SEPARATOR = " | "


def format_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix.

    Examples
    --------
    >>> format_timestamp(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    '2024-05-01T12:00:00.000Z'
    """
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def format_value(value: Any) -> str:
    """Render a field value for a log line (lowercase booleans, ``-`` for missing)."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def fake_prefix(is_fake: bool) -> str:
    return FAKE_PREFIX if is_fake else ""


def format_game_summary(record: MessageRecord) -> str:
    """One-line chat summary: ``[FAKE ]<dir> | <name> (<code>)``."""
    return f"{fake_prefix(record.is_fake)}{record.direction.arrow} | {record.name} ({record.code})"


def format_file_line(record: MessageRecord, payload: str) -> str:
    """Message log line: ``ts | [FAKE ]dir | code | name | payload``."""
    return FIELD_SEPARATOR.join([
        format_timestamp(record.timestamp),
        f"{fake_prefix(record.is_fake)}{record.direction.arrow}",
        str(record.code),
        record.name,
        payload,
    ])


def format_event_line(
    name: str,
    fields: Iterable[tuple[str, Any]],
    moment: datetime | None = None,
) -> str:
    """Item/skill log line: ``ts | NAME | key: value | …``.

    A field with an empty key is written as its bare value.
    """
    parts = [format_timestamp(moment), name]
    for key, value in fields:
        parts.append(f"{key}: {format_value(value)}" if key else format_value(value))
    return FIELD_SEPARATOR.join(parts)
