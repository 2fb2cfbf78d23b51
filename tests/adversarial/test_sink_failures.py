"""Adversarial tests — logging resilience under sink and host failures.

These tests verify that:
1. A throwing chat channel does not prevent the file line
2. A throwing file sink does not prevent the chat line
3. Various exception types from sinks are handled gracefully
4. A broken protocol map degrades to UNKNOWN instead of raising
5. A session whose log directory cannot be created keeps running
6. A log that fails to close does not leave the rest of the session running
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from packetlogger.config import LoggerConfig
from packetlogger.core.classifier import MessageClassifier
from packetlogger.core.filtering import FilterEngine
from packetlogger.core.pipeline import PacketPipeline
from packetlogger.core.registry import HookedNameRegistry
from packetlogger.core.rendering import PayloadRenderer
from packetlogger.models import LoggerSettings
from packetlogger.offline import InMemoryCommandRegistry, OfflineHost
from packetlogger.routing import SinkRouter
from packetlogger.routing.router import FILE_SINK, GAME_SINK
from packetlogger.session import PacketLoggerSession

# ---------------------------------------------------------------------------
# Test sinks
# ---------------------------------------------------------------------------


class ExplodingChannel:
    """A chat channel that always throws."""

    def __init__(self, exc_type: type = RuntimeError):
        self._exc_type = exc_type

    def send(self, text: str) -> None:
        raise self._exc_type("chat closed")


class ExplodingStream:
    """A file sink that reports open but fails every write."""

    is_open = True

    def write_line(self, line: str) -> None:
        raise OSError("disk full")


class RecordingStream:
    is_open = True

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)


class ExplodingResolver:
    def code_to_name(self, code: int) -> str | None:
        raise MemoryError("protocol map corrupted")


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestRouterResilience:
    """One failing sink never blocks the other."""

    @pytest.mark.parametrize(
        "exc_type", [RuntimeError, ValueError, TypeError, KeyError, OSError, UnicodeError]
    )
    def test_chat_failure_still_writes_file(self, renderer, make_record, exc_type, caplog):
        stream = RecordingStream()
        with caplog.at_level(logging.ERROR):
            delivered = SinkRouter(renderer).emit(
                make_record(), to_game=True, to_file=True,
                game_sink=ExplodingChannel(exc_type), file_stream=stream,
            )
        assert delivered == [FILE_SINK]
        assert len(stream.lines) == 1
        assert "Failed to log C_USE_ITEM to game" in caplog.text

    def test_file_failure_still_reaches_chat(self, renderer, make_record, channel, caplog):
        with caplog.at_level(logging.ERROR):
            delivered = SinkRouter(renderer).emit(
                make_record(), to_game=True, to_file=True,
                game_sink=channel, file_stream=ExplodingStream(),
            )
        assert delivered == [GAME_SINK]
        assert len(channel.lines) == 1
        assert "Failed to write C_USE_ITEM to log file" in caplog.text

    def test_both_sinks_fail_without_raising(self, renderer, make_record):
        delivered = SinkRouter(renderer).emit(
            make_record(), to_game=True, to_file=True,
            game_sink=ExplodingChannel(), file_stream=ExplodingStream(),
        )
        assert delivered == []

    def test_renderer_failure_is_contained(self, make_record, caplog):
        class _ExplodingRenderer:
            def render(self, name, is_known_name, data):
                raise RuntimeError("renderer bug")

        stream = RecordingStream()
        with caplog.at_level(logging.ERROR):
            delivered = SinkRouter(_ExplodingRenderer()).emit(
                make_record(), to_game=False, to_file=True,
                game_sink=None, file_stream=stream,
            )
        assert delivered == []
        assert stream.lines == []


class TestPipelineResilience:
    """The raw hook never raises into the host."""

    def test_broken_resolver(self, settings: LoggerSettings):
        stream = RecordingStream()
        pipeline = PacketPipeline(
            settings=settings,
            classifier=MessageClassifier(ExplodingResolver()),
            filters=FilterEngine(settings, HookedNameRegistry()),
            router=SinkRouter(PayloadRenderer(OfflineHost(), settings)),
            game=ExplodingChannel(),
            stream=stream,
        )
        settings.toggle_filter("UNKNOWN")
        assert pipeline.handle_raw(7, b"\x01", True, False) is None
        assert stream.lines[0].endswith(" | 7 | UNKNOWN | RAW: 01")

    @pytest.mark.parametrize(
        "error", [ValueError("short read"), IndexError("offset"), RecursionError("deep")]
    )
    def test_decoder_errors_fall_back_to_raw(self, settings: LoggerSettings, error):
        def _decoder(data: bytes):
            raise error

        host = OfflineHost(names={5: "S_CHAT"}, decoders={"S_CHAT": (2, _decoder)})
        stream = RecordingStream()
        pipeline = PacketPipeline(
            settings=settings,
            classifier=MessageClassifier(host),
            filters=FilterEngine(settings, HookedNameRegistry()),
            router=SinkRouter(PayloadRenderer(host, settings)),
            game=None,
            stream=stream,
        )
        pipeline.handle_raw(5, b"\x10\x20", True, False)
        assert stream.lines[0].endswith(" | S_CHAT | RAW: 1020")


class TestSessionResilience:
    """Startup failures degrade logging instead of stopping the session."""

    def test_unwritable_log_dir(self, tmp_path: Path, offline_host, command_registry, channel, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        session = PacketLoggerSession(
            offline_host,
            commands=command_registry,
            game=channel,
            config=LoggerConfig(log_dir=blocker / "logs"),
            session_id=1,
        )
        with caplog.at_level(logging.ERROR):
            report = session.start()
        assert report.ok
        assert not session.packet_stream.is_open
        assert not session.item_skill_stream.is_open
        assert caplog.text.count("Failed to create") == 2

        offline_host.feed(101, b"\x01\x00\x00\x00", incoming=False)
        assert channel.lines == [
            "REAL C_USE_ITEM: Unknown Item (ID: 1, GameID: 7, DBID: 4611686018427387904)"
        ]
        session.stop()

    def test_raw_hook_rejected(self, tmp_path: Path, command_registry, channel, caplog):
        class _NoRawHost(OfflineHost):
            def hook(self, name, version, options, callback):
                if version == "raw":
                    raise NotImplementedError("raw hooks unsupported")
                return super().hook(name, version, options, callback)

        host = _NoRawHost(names={101: "C_USE_ITEM"})
        session = PacketLoggerSession(
            host,
            commands=command_registry,
            game=channel,
            config=LoggerConfig(log_dir=tmp_path),
            session_id=1,
        )
        with caplog.at_level(logging.ERROR):
            report = session.start()
        assert "Could not install raw packet hook" in caplog.text
        assert len(report.installed) == 27
        assert set(command_registry.handlers)
        session.stop()

    def test_failing_command_registry(self, tmp_path: Path, offline_host, channel):
        class _Registry(InMemoryCommandRegistry):
            def remove(self, name: str) -> None:
                raise RuntimeError("host shutting down")

        session = PacketLoggerSession(
            offline_host,
            commands=_Registry(),
            game=channel,
            config=LoggerConfig(log_dir=tmp_path),
            session_id=1,
        )
        session.start()
        session.stop()
        assert not session.packet_stream.is_open

    def test_close_error_still_tears_down(self, tmp_path: Path, offline_host, command_registry, channel, caplog):
        class _FullDiskHandle:
            def __init__(self, handle) -> None:
                self._handle = handle

            def close(self) -> None:
                self._handle.close()
                raise OSError("No space left on device")

        session = PacketLoggerSession(
            offline_host,
            commands=command_registry,
            game=channel,
            config=LoggerConfig(log_dir=tmp_path),
            session_id=1,
        )
        session.start()
        session.packet_stream._handle = _FullDiskHandle(session.packet_stream._handle)
        with caplog.at_level(logging.ERROR):
            session.stop()
        assert "Failed to close Packet log file" in caplog.text
        assert not session.packet_stream.is_open
        assert not session.item_skill_stream.is_open
        assert command_registry.handlers == {}

    def test_unexpected_close_error_still_tears_down(self, tmp_path: Path, offline_host, command_registry, channel):
        session = PacketLoggerSession(
            offline_host,
            commands=command_registry,
            game=channel,
            config=LoggerConfig(log_dir=tmp_path),
            session_id=1,
        )
        session.start()
        detached_close = session.packet_stream.close

        def _close() -> None:
            raise RuntimeError("stream already detached")

        session.packet_stream.close = _close
        with pytest.raises(RuntimeError):
            session.stop()
        assert not session.item_skill_stream.is_open
        assert command_registry.handlers == {}
        session.stop()
        detached_close()
