"""Shared test fixtures for packetlogger."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

import pytest

from packetlogger.config import LoggerConfig
from packetlogger.core.registry import HookedNameRegistry
from packetlogger.core.rendering import PayloadRenderer
from packetlogger.models.records import Direction, MessageRecord
from packetlogger.models.settings import LoggerSettings
from packetlogger.offline import InMemoryCommandRegistry, OfflineHost
from packetlogger.routing.sinks import LogStream


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class RecordingChannel:
    """A game channel that keeps every line it is sent."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def send(self, text: str) -> None:
        self.lines.append(text)


class FailingChannel:
    """A game channel whose send always raises."""

    def __init__(self, exc_type: type[Exception] = RuntimeError) -> None:
        self._exc_type = exc_type
        self.attempts = 0

    def send(self, text: str) -> None:
        self.attempts += 1
        raise self._exc_type("chat is unavailable")


class MemoryStream:
    """An in-memory line sink."""

    def __init__(self, is_open: bool = True) -> None:
        self._open = is_open
        self.lines: list[str] = []

    @property
    def is_open(self) -> bool:
        return self._open

    def write_line(self, line: str) -> None:
        self.lines.append(line)


class StaticDecoders:
    """Decoder registry backed by ``{name: (version, decoder)}``."""

    def __init__(
        self, decoders: Mapping[str, tuple[int, Callable[[bytes], Any]]] | None = None
    ) -> None:
        self._decoders = dict(decoders or {})
        self.decode_calls: list[tuple[str, int]] = []

    def latest_schema_version(self, name: str) -> int | None:
        entry = self._decoders.get(name)
        return entry[0] if entry else None

    def decode(self, name: str, version: int, data: bytes) -> Any:
        self.decode_calls.append((name, version))
        return self._decoders[name][1](data)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> LoggerSettings:
    """Fresh default operator settings."""
    return LoggerSettings()


@pytest.fixture
def hooked() -> HookedNameRegistry:
    return HookedNameRegistry()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def memory_stream() -> MemoryStream:
    return MemoryStream()


@pytest.fixture
def closed_stream() -> MemoryStream:
    """A line sink whose destination never opened."""
    return MemoryStream(is_open=False)


@pytest.fixture
def failing_channel() -> FailingChannel:
    return FailingChannel()


@pytest.fixture
def decoders() -> StaticDecoders:
    """Decoders for C_USE_ITEM (v3) and S_ACTION_STAGE (v9)."""
    return StaticDecoders({
        "C_USE_ITEM": (3, lambda data: {"id": int.from_bytes(data[:4], "little"), "amount": 1}),
        "S_ACTION_STAGE": (9, lambda data: {"gameId": 2**60, "stage": data[0] if data else 0}),
    })


@pytest.fixture
def renderer(decoders: StaticDecoders, settings: LoggerSettings) -> PayloadRenderer:
    return PayloadRenderer(decoders, settings)


@pytest.fixture
def offline_host() -> OfflineHost:
    """An offline host knowing a handful of opcodes and decoders."""
    return OfflineHost(
        names={
            101: "C_USE_ITEM",
            102: "C_START_SKILL",
            103: "S_ACTION_STAGE",
            104: "S_CHAT",
            105: "C_EQUIP_ITEM",
        },
        decoders={
            "C_USE_ITEM": (3, lambda data: {
                "id": int.from_bytes(data[:4], "little"),
                "gameId": 7,
                "dbid": 2**62,
            }),
            "C_START_SKILL": (7, lambda data: {
                "skill": {"id": int.from_bytes(data[:4], "little")},
            }),
            "C_EQUIP_ITEM": (2, lambda data: {
                "id": int.from_bytes(data[:4], "little"),
                "slot": 3,
                "gameId": 7,
                "unk": 0,
            }),
        },
    )


@pytest.fixture
def command_registry() -> InMemoryCommandRegistry:
    return InMemoryCommandRegistry()


@pytest.fixture
def logger_config(tmp_path: Path) -> LoggerConfig:
    """Process config writing session logs under a temp directory."""
    return LoggerConfig(log_dir=tmp_path / "logs")


@pytest.fixture
def file_stream(tmp_path: Path) -> Iterator[LogStream]:
    """An opened LogStream in a temp directory, closed after the test."""
    stream = LogStream(tmp_path / "logs" / "packets_1.log", label="Packet")
    stream.open()
    yield stream
    stream.close()


@pytest.fixture
def make_record() -> Callable[..., MessageRecord]:
    """Factory fixture: build a MessageRecord with sensible defaults."""

    def _factory(
        name: str = "C_USE_ITEM",
        code: int = 101,
        **overrides: Any,
    ) -> MessageRecord:
        defaults: dict[str, Any] = {
            "direction": Direction.OUTBOUND,
            "code": code,
            "name": name,
            "payload": b"\x01\x00\x00\x00",
        }
        defaults.update(overrides)
        return MessageRecord(**defaults)

    return _factory
