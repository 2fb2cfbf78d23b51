"""Unit tests for the operator chat commands."""

from __future__ import annotations

import logging

import pytest

from packetlogger.commands import FILTER_COMMAND, TOGGLE_COMMANDS, OperatorCommands
from packetlogger.models import LoggerSettings
from packetlogger.offline import InMemoryCommandRegistry


@pytest.fixture
def commands(settings: LoggerSettings, channel, command_registry) -> OperatorCommands:
    operator = OperatorCommands(settings, channel, command_registry)
    operator.install()
    return operator


class TestRegistration:
    """install()/uninstall() against the host registry."""

    def test_all_commands_registered(self, commands, command_registry) -> None:
        expected = {FILTER_COMMAND, *TOGGLE_COMMANDS}
        assert set(command_registry.handlers) == expected
        assert set(commands.installed) == expected
        assert len(expected) == 10

    def test_uninstall_removes_everything(self, commands, command_registry) -> None:
        commands.uninstall()
        assert command_registry.handlers == {}
        assert commands.installed == []

    def test_uninstall_tolerates_registry_errors(self, settings, channel, caplog) -> None:
        class _StubbornRegistry(InMemoryCommandRegistry):
            def remove(self, name: str) -> None:
                raise RuntimeError("busy")

        operator = OperatorCommands(settings, channel, _StubbornRegistry())
        operator.install()
        with caplog.at_level(logging.WARNING):
            operator.uninstall()
        assert operator.installed == []
        assert "Failed to remove command pktlog" in caplog.text

    def test_unknown_command(self, commands, command_registry) -> None:
        with pytest.raises(KeyError):
            command_registry.run("pktnope")


class TestFilterCommand:
    """pktlog <text> toggles a filter; no text clears them all."""

    def test_add_filter(self, commands, command_registry, settings, channel) -> None:
        command_registry.run("pktlog skill")
        assert settings.packet_filters == {"SKILL"}
        assert channel.lines == ["Added packet filter: SKILL", "Current packet filters: SKILL"]

    def test_remove_filter(self, commands, command_registry, settings, channel) -> None:
        command_registry.run("pktlog skill")
        channel.lines.clear()
        command_registry.run("pktlog SKILL")
        assert settings.packet_filters == set()
        assert channel.lines == ["Removed packet filter: SKILL", "All packet filters removed."]

    def test_lists_current_filters_sorted(self, commands, command_registry, channel) -> None:
        command_registry.run("pktlog s_")
        command_registry.run("pktlog c_")
        assert channel.lines[-1] == "Current packet filters: C_, S_"

    def test_empty_argument_clears(self, commands, command_registry, settings, channel) -> None:
        settings.replace_filters(["A", "B"])
        command_registry.run("pktlog")
        assert settings.packet_filters == set()
        assert channel.lines == ["All packet filters removed."]

    def test_whitespace_argument_clears(self, commands, settings) -> None:
        settings.replace_filters(["A"])
        commands.filter_command("   ")
        assert settings.packet_filters == set()


class TestToggleCommands:
    """Each toggle command flips one settings field."""

    @pytest.mark.parametrize("command", sorted(TOGGLE_COMMANDS))
    def test_flips_field(self, commands, command_registry, settings, command: str) -> None:
        field_name, _ = TOGGLE_COMMANDS[command]
        before = getattr(settings, field_name)
        command_registry.run(command)
        assert getattr(settings, field_name) is (not before)
        command_registry.run(command)
        assert getattr(settings, field_name) is before

    def test_reply_text(self, commands, command_registry, channel) -> None:
        command_registry.run("pktlogfake")
        command_registry.run("pktlogfake")
        assert channel.lines == [
            "Logging of fake packets enabled.",
            "Logging of fake packets disabled.",
        ]

    def test_trailing_text_ignored(self, commands, command_registry, settings) -> None:
        command_registry.run("pktdebug please")
        assert settings.debug is True

    def test_returns_new_value(self, commands) -> None:
        assert commands.toggle_command("pkthookedonly") is True

    def test_reply_without_channel_goes_to_log(self, settings, command_registry, caplog) -> None:
        operator = OperatorCommands(settings, None, command_registry)
        with caplog.at_level(logging.INFO, logger="packetlogger.commands"):
            operator.toggle_command("equipgame")
        assert "Logging equipment to in-game text disabled." in caplog.text

    def test_failing_channel_reply_is_logged(self, settings, failing_channel, command_registry, caplog) -> None:
        operator = OperatorCommands(settings, failing_channel, command_registry)
        with caplog.at_level(logging.ERROR):
            assert operator.toggle_command("pktlogfile") is False
        assert settings.log_pkt_to_file is False
        assert "Failed to send command reply" in caplog.text
