"""Narrates one decoded message type to chat and to the item/skill log."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from packetlogger.core.diagnostics import debug_log
from packetlogger.core.rendering import describe_event
from packetlogger.handlers.base import HandlerSpec, LabelSource, base_skill_id
from packetlogger.host import GameChannel, NameLookup
from packetlogger.models.settings import LoggerSettings
from packetlogger.routing._formatting import format_event_line, format_value
from packetlogger.routing.sinks import LineSink

logger = logging.getLogger(__name__)


class _EventContext(dict):
    """Template namespace; unknown keys render as ``-``."""

    def __missing__(self, key: str) -> str:
        return format_value(None)


def _lookup_name(table: NameLookup, key: Any) -> str | None:
    entry = table.get(key)
    if entry is None:
        return None
    if isinstance(entry, str):
        return entry or None
    if isinstance(entry, Mapping):
        name = entry.get("name")
    else:
        name = getattr(entry, "name", None)
    return str(name) if name else None


def extract_skill_id(event: Mapping[str, Any]) -> int:
    """Read the full skill id from ``event["skill"]`` (object, mapping or int)."""
    skill = event["skill"]
    if isinstance(skill, Mapping):
        return int(skill["id"])
    return int(getattr(skill, "id", skill))


class TypedEventLogger:
    """Callable installed as the host hook for one ``HandlerSpec``.

    Parameters
    ----------
    spec:
        The handler table row.
    settings:
        Shared operator settings, read on every event.
    game:
        The interactive channel.
    stream:
        The session's item/skill log.
    items / skills:
        Optional name tables for label resolution.
    """

    def __init__(
        self,
        spec: HandlerSpec,
        *,
        settings: LoggerSettings,
        game: GameChannel | None,
        stream: LineSink | None,
        items: NameLookup | None = None,
        skills: NameLookup | None = None,
    ) -> None:
        self.spec = spec
        self._settings = settings
        self._game = game
        self._stream = stream
        self._items = items
        self._skills = skills

    # ------------------------------------------------------------------
    # Label resolution
    # ------------------------------------------------------------------

    def _item_label(self, event: Mapping[str, Any]) -> str:
        item_id = event.get(self.spec.id_field)
        if self._items is None:
            return self.spec.placeholder
        try:
            return _lookup_name(self._items, item_id) or self.spec.placeholder
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to get item name for ID %s: %s", item_id, exc)
            return self.spec.placeholder

    def _skill_label(self, skill_id: int | None, base_id: int | None) -> str:
        if base_id is None:
            return self.spec.placeholder
        if self._skills is not None:
            try:
                name = _lookup_name(self._skills, base_id)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to get skill name for ID %s: %s", skill_id, exc)
                return self.spec.placeholder
            if name:
                return name
        return f"{self.spec.label_kind} {base_id}"

    def build_context(self, event: Mapping[str, Any]) -> _EventContext:
        """Template namespace for *event*: its fields plus derived keys."""
        context = _EventContext(
            {str(key): format_value(value) for key, value in event.items()}
        )
        source = self.spec.label_source

        if source is LabelSource.SKILL:
            skill_id: int | None = None
            base_id: int | None = None
            try:
                skill_id = extract_skill_id(event)
                base_id = base_skill_id(skill_id)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Failed to read skill id from %s: %s", self.spec.name, exc)
            context["skill_id"] = format_value(skill_id)
            context["base_id"] = format_value(base_id)
            context["label"] = self._skill_label(skill_id, base_id)
        elif source is LabelSource.ITEM:
            context["label"] = self._item_label(event)
        else:
            context["label"] = ""

        if "success" in event:
            context["outcome"] = "Success" if event["success"] else "Failed"
        return context

    # ------------------------------------------------------------------
    # Hook entry point
    # ------------------------------------------------------------------

    def __call__(self, event: Mapping[str, Any]) -> bool:
        """Log *event*; always returns ``True`` so the host keeps the message."""
        spec = self.spec
        fake_status = "FAKE" if event.get("fake") else "REAL"
        if self._settings.debug:
            debug_log(
                self._settings, logger,
                "Received %s %s packet: %s", fake_status, spec.name, describe_event(event),
            )

        to_game = getattr(self._settings, spec.category.game_toggle)
        to_file = getattr(self._settings, spec.category.file_toggle)
        if not (to_game or to_file):
            return True

        context = self.build_context(event)

        if to_game and self._game is not None:
            try:
                text = spec.game_template.format_map(context)
                self._game.send(f"{fake_status} {spec.name}: {text}")
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to log %s to chat: %s", spec.name, exc)

        if to_file and self._stream is not None and self._stream.is_open:
            try:
                fields = [
                    (key, template.format_map(context))
                    for key, template in spec.file_fields
                ]
                self._stream.write_line(format_event_line(spec.name, fields))
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to write %s to log file: %s", spec.name, exc)

        return True
