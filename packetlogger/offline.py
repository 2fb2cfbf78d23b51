"""Offline host — replays captured traffic through a logger session.

Implements the host interfaces in memory: hooks are kept in order, names
come from a ``{code: name}`` map, and decoders are optional callables
registered per message name.  Used by the ``replay`` CLI command and by
the integration tests.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, field_validator
from rich.console import Console

from packetlogger.host import RAW, WILDCARD, CommandHandler, HookOptions

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], Mapping[str, Any]]


class CapturedMessage(BaseModel):
    """One line of a JSON-lines capture file."""

    model_config = ConfigDict(frozen=True)

    code: int
    data: bytes = b""
    incoming: bool = True
    fake: bool = False

    @field_validator("data", mode="before")
    @classmethod
    def _from_hex(cls, value: Any) -> Any:
        if isinstance(value, str):
            return bytes.fromhex(value)
        return value


def read_capture(path: Path) -> Iterator[CapturedMessage]:
    """Yield messages from a JSON-lines capture, skipping blank lines."""
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if line:
                yield CapturedMessage.model_validate(json.loads(line))


class _Hook(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    version: int | str
    options: HookOptions
    callback: Callable[..., Any]


class OfflineHost:
    """In-memory ``ProtocolHost``.

    Parameters
    ----------
    names:
        Opcode to message name map.
    decoders:
        ``{name: (version, decoder)}``; names without an entry have no
        known definition and render raw.
    """

    def __init__(
        self,
        names: Mapping[int, str] | None = None,
        decoders: Mapping[str, tuple[int, Decoder]] | None = None,
    ) -> None:
        self._names = dict(names or {})
        self._decoders = dict(decoders or {})
        self._hooks: list[_Hook] = []

    @classmethod
    def from_names_file(cls, path: Path) -> OfflineHost:
        """Build from a JSON object mapping opcodes (as strings) to names."""
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls({int(code): name for code, name in raw.items()})

    # -- ProtocolHost ----------------------------------------------------

    def code_to_name(self, code: int) -> str | None:
        return self._names.get(code)

    def latest_schema_version(self, name: str) -> int | None:
        entry = self._decoders.get(name)
        return entry[0] if entry else None

    def protocol_version(self, name: str) -> int | None:
        return self.latest_schema_version(name)

    def decode(self, name: str, version: int, data: bytes) -> Mapping[str, Any]:
        entry = self._decoders.get(name)
        if entry is None or entry[0] != version:
            raise KeyError(f"No definition for {name}.{version}")
        return entry[1](data)

    def hook(
        self,
        name: str,
        version: int | str,
        options: HookOptions,
        callback: Callable[..., Any],
    ) -> _Hook:
        hook = _Hook(name=name, version=version, options=options, callback=callback)
        self._hooks.append(hook)
        self._hooks.sort(key=lambda h: h.options.order)
        return hook

    @property
    def hooks(self) -> list[_Hook]:
        return list(self._hooks)

    # -- Delivery ----------------------------------------------------------

    def feed(self, code: int, data: bytes, incoming: bool = True, fake: bool = False) -> None:
        """Deliver one message to every matching hook, in hook order."""
        name = self.code_to_name(code)
        for hook in list(self._hooks):
            if hook.options.fake is not None and hook.options.fake != fake:
                continue
            if hook.version == RAW:
                if hook.name in (WILDCARD, name):
                    hook.callback(code, data, incoming, fake)
                continue
            if name is None or hook.name != name:
                continue
            try:
                event = dict(self.decode(name, int(hook.version), data))
            except Exception as exc:  # noqa: BLE001
                logger.debug("Offline host could not decode %s: %s", name, exc)
                continue
            event["fake"] = fake
            hook.callback(event)

    def replay(self, messages: Iterator[CapturedMessage]) -> int:
        """Feed every captured message; returns how many were delivered."""
        count = 0
        for message in messages:
            self.feed(message.code, message.data, message.incoming, message.fake)
            count += 1
        return count


class InMemoryCommandRegistry:
    """``CommandRegistry`` that keeps handlers in a dict."""

    def __init__(self) -> None:
        self.handlers: dict[str, CommandHandler] = {}

    def add(self, name: str, handler: CommandHandler) -> None:
        self.handlers[name] = handler

    def remove(self, name: str) -> None:
        self.handlers.pop(name, None)

    def run(self, line: str) -> None:
        """Dispatch ``"<command> [argument text]"`` to its handler."""
        command, _, argument = line.strip().partition(" ")
        handler = self.handlers.get(command)
        if handler is None:
            raise KeyError(f"Unknown command: {command}")
        handler(argument)


class ConsoleChannel:
    """``GameChannel`` printing chat lines to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def send(self, text: str) -> None:
        self._console.print(text, markup=False, highlight=False)
