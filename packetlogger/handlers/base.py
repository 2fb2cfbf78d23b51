"""Handler specifications — the declarative shape of a dedicated message logger.

Every dedicated handler is the same typed event logger configured by a
``HandlerSpec``: which message and definition version to hook, which
pair of operator toggles governs it, how to label the embedded item or
skill, and how to lay out its chat and file lines.

Templates are ``str.format_map`` strings over the decoded event's fields
plus a few derived keys:

* ``label``: resolved item/skill label (or its ``Unknown …`` placeholder)
* ``skill_id`` / ``base_id``: for skill handlers
* ``outcome``: ``Success``/``Failed`` when the event has a ``success`` flag

Fields missing from an event render as ``-``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# Skill ids carry a fixed type prefix; the rest encodes base skill * 10000 + level
SKILL_ID_OFFSET = 0x4000000
SKILL_ID_STRIDE = 10000


def base_skill_id(skill_id: int) -> int:
    """Strip the skill prefix and level from a full skill id.

    Out-of-range ids are not validated and simply produce negative bases.

    Examples
    --------
    >>> base_skill_id(0x4000000 + 25 * 10000)
    25
    """
    return (skill_id - SKILL_ID_OFFSET) // SKILL_ID_STRIDE


class EventCategory(str, Enum):
    """Which pair of operator toggles governs a handler."""

    ITEM_SKILL = "item_skill"
    EQUIPMENT = "equipment"

    @property
    def game_toggle(self) -> str:
        """Name of the ``LoggerSettings`` field enabling chat output."""
        return f"log_{self.value}_to_game"

    @property
    def file_toggle(self) -> str:
        """Name of the ``LoggerSettings`` field enabling file output."""
        return f"log_{self.value}_to_file"


class LabelSource(str, Enum):
    """Where a handler's human-readable label comes from."""

    NONE = "none"
    ITEM = "item"  # item data table, keyed by the event's id field
    SKILL = "skill"  # skill table keyed by base id, else "<kind> <base id>"


class HandlerSpec(BaseModel):
    """One row of the handler table.

    Attributes
    ----------
    name:
        Protocol message name, e.g. ``"C_START_SKILL"``.
    category:
        Toggle pair deciding chat/file output.
    version:
        Pinned definition version.  ``None`` asks the host for its
        preferred version and falls back to ``fallback_version``.
    label_source / label_kind / id_field:
        How the ``label`` template key is resolved.  The placeholder on a
        miss is ``"Unknown <label_kind>"``.
    game_template:
        Chat text following ``"<REAL|FAKE> <NAME>: "``.
    file_fields:
        ``(key, template)`` pairs for the item/skill log line.  An empty
        key writes the rendered template alone.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: EventCategory
    version: int | None = None
    fallback_version: int = 1
    label_source: LabelSource = LabelSource.NONE
    label_kind: str = "Item"
    id_field: str = "id"
    game_template: str
    file_fields: tuple[tuple[str, str], ...] = ()

    @property
    def placeholder(self) -> str:
        return f"Unknown {self.label_kind}"
