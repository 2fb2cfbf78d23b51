"""Operator settings — the mutable configuration every component reads.

The persisted document uses camelCase keys (``packetFilters``,
``logPktToGame`` …); the model exposes snake_case attributes and accepts
either spelling.  Unlike most models in this package the settings are
*mutable*: operator commands flip toggles in place during a session, and
every component holds a reference to the same instance.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from packetlogger.core.migration import (
    CURRENT_SETTINGS_VERSION,
    SettingsVersion,
    migrate_settings,
)


class LoggerSettings(BaseModel):
    """Runtime toggles and packet-name filters.

    Keys that a legacy document carried but the current schema does not
    know are kept as model extras so they survive a save/load cycle.

    Examples
    --------
    >>> settings = LoggerSettings.model_validate({"logFakePackets": True})
    >>> settings.log_fake_packets
    True
    >>> settings.to_document()["packetFilters"]
    []
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="allow",
    )

    packet_filters: set[str] = Field(default_factory=set)
    log_fake_packets: bool = False
    log_pkt_to_game: bool = True
    log_pkt_to_file: bool = True
    log_item_skill_to_game: bool = True
    log_item_skill_to_file: bool = True
    log_equipment_to_game: bool = True
    log_equipment_to_file: bool = True
    log_only_hooked_packets: bool = False
    debug: bool = False

    @field_validator("packet_filters", mode="before")
    @classmethod
    def _normalize_filters(cls, value: Any) -> set[str]:
        if value is None:
            return set()
        if isinstance(value, str):
            value = [value]
        return {
            str(entry).strip().upper()
            for entry in value
            if str(entry).strip()
        }

    # ------------------------------------------------------------------
    # Document conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_document(
        cls,
        document: dict[str, Any] | None,
        from_version: SettingsVersion,
        to_version: int = CURRENT_SETTINGS_VERSION,
    ) -> LoggerSettings:
        """Migrate a stored settings document and validate the result."""
        migrated = migrate_settings(from_version, to_version, document)
        return cls.model_validate(migrated)

    def to_document(self) -> dict[str, Any]:
        """Dump to the persisted camelCase form, filters as a sorted list."""
        document = self.model_dump(by_alias=True)
        document["packetFilters"] = sorted(self.packet_filters)
        return document

    # ------------------------------------------------------------------
    # Mutation helpers used by operator commands
    # ------------------------------------------------------------------

    def toggle(self, field_name: str) -> bool:
        """Flip a boolean toggle and return its new value."""
        current = getattr(self, field_name)
        if not isinstance(current, bool):
            raise TypeError(f"{field_name} is not a boolean toggle")
        setattr(self, field_name, not current)
        return not current

    def toggle_filter(self, entry: str) -> bool:
        """Add *entry* (uppercased) if absent, remove it if present.

        Returns ``True`` when the filter was added.
        """
        key = entry.strip().upper()
        if key in self.packet_filters:
            self.packet_filters.discard(key)
            return False
        self.packet_filters.add(key)
        return True

    def clear_filters(self) -> None:
        self.packet_filters = set()

    def replace_filters(self, entries: Iterable[str]) -> None:
        self.packet_filters = set(entries)
