"""Operator chat commands — mutate the shared settings during a session.

``pktlog <text>`` toggles a packet-name filter (no argument clears all
filters); every other command flips one boolean toggle.  Each command
answers in chat with the new state.
"""

from __future__ import annotations

import logging
from functools import partial

from packetlogger.host import CommandRegistry, GameChannel
from packetlogger.models.settings import LoggerSettings

logger = logging.getLogger(__name__)

FILTER_COMMAND = "pktlog"

# command -> (settings field, chat label)
TOGGLE_COMMANDS: dict[str, tuple[str, str]] = {
    "pktlogfake": ("log_fake_packets", "Logging of fake packets"),
    "pktloggame": ("log_pkt_to_game", "Logging packets to in-game text"),
    "pktlogfile": ("log_pkt_to_file", "Logging packets to file"),
    "itemskillgame": ("log_item_skill_to_game", "Logging item/skill to in-game text"),
    "itemskillfile": ("log_item_skill_to_file", "Logging item/skill to file"),
    "equipgame": ("log_equipment_to_game", "Logging equipment to in-game text"),
    "equipfile": ("log_equipment_to_file", "Logging equipment to file"),
    "pktdebug": ("debug", "Debug logging"),
    "pkthookedonly": ("log_only_hooked_packets", "Logging only hooked packets"),
}


class OperatorCommands:
    """Registers and implements the operator commands.

    Parameters
    ----------
    settings:
        Shared settings mutated in place.
    game:
        Channel for command replies.
    registry:
        The host's command registry.
    """

    def __init__(
        self,
        settings: LoggerSettings,
        game: GameChannel | None,
        registry: CommandRegistry,
    ) -> None:
        self._settings = settings
        self._game = game
        self._registry = registry
        self._installed: list[str] = []

    @property
    def installed(self) -> list[str]:
        return list(self._installed)

    def _reply(self, text: str) -> None:
        if self._game is None:
            logger.info("%s", text)
            return
        try:
            self._game.send(text)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to send command reply: %s", exc)

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    def filter_command(self, argument: str = "") -> None:
        """``pktlog [text]``: toggle one filter, or clear all."""
        entry = (argument or "").strip().upper()
        if not entry:
            self._settings.clear_filters()
            self._reply("All packet filters removed.")
            return

        if self._settings.toggle_filter(entry):
            self._reply(f"Added packet filter: {entry}")
        else:
            self._reply(f"Removed packet filter: {entry}")

        if self._settings.packet_filters:
            current = ", ".join(sorted(self._settings.packet_filters))
            self._reply(f"Current packet filters: {current}")
        else:
            self._reply("All packet filters removed.")

    def toggle_command(self, command: str, argument: str = "") -> bool:
        """Flip the toggle bound to *command*; trailing text is ignored."""
        field_name, label = TOGGLE_COMMANDS[command]
        enabled = self._settings.toggle(field_name)
        self._reply(f"{label} {'enabled' if enabled else 'disabled'}.")
        return enabled

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def install(self) -> list[str]:
        """Register every command with the host."""
        self._registry.add(FILTER_COMMAND, self.filter_command)
        self._installed.append(FILTER_COMMAND)
        for command in TOGGLE_COMMANDS:
            self._registry.add(command, partial(self.toggle_command, command))
            self._installed.append(command)
        return self.installed

    def uninstall(self) -> None:
        """Remove every command this instance registered."""
        while self._installed:
            command = self._installed.pop()
            try:
                self._registry.remove(command)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to remove command %s: %s", command, exc)
