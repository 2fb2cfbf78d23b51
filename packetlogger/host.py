"""Host collaborator interfaces.

The logger runs inside a proxy host that owns the actual connection,
the protocol definitions and the in-game chat.  Everything the logger
needs from it is expressed here as a ``Protocol`` so that the real host
adapter, the offline replay host and test doubles are interchangeable.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

# Hook name matching every message
WILDCARD = "*"
# Hook version requesting undecoded (code, data, incoming, fake) callbacks
RAW = "raw"

RawCallback = Callable[[int, bytes, bool, bool], Any]
EventCallback = Callable[[Mapping[str, Any]], Any]
CommandHandler = Callable[[str], None]


class HookOptions(BaseModel):
    """Options passed alongside a hook registration.

    Attributes
    ----------
    order:
        Position in the host's hook chain; higher runs later.
    fake:
        ``False`` for real messages only, ``True`` for fake only,
        ``None`` for both.
    """

    model_config = ConfigDict(frozen=True)

    order: int = 0
    fake: bool | None = False


@runtime_checkable
class NameResolver(Protocol):
    def code_to_name(self, code: int) -> str | None:
        """Return the protocol name for *code*, or ``None``."""
        ...


@runtime_checkable
class DecoderRegistry(Protocol):
    def latest_schema_version(self, name: str) -> int | None:
        """Return the newest known definition version for *name*."""
        ...

    def decode(self, name: str, version: int, data: bytes) -> Mapping[str, Any]:
        """Decode *data* against *name* v*version*.  May raise."""
        ...


@runtime_checkable
class ProtocolHost(NameResolver, DecoderRegistry, Protocol):
    """The interception host: hooks plus the protocol registry."""

    def hook(
        self,
        name: str,
        version: int | str,
        options: HookOptions,
        callback: Callable[..., Any],
    ) -> Any:
        """Register *callback* for *name* (or ``WILDCARD``) at *version*."""
        ...

    def protocol_version(self, name: str) -> int | None:
        """Return the host's preferred definition version for *name*."""
        ...


@runtime_checkable
class GameChannel(Protocol):
    """The interactive in-game text sink."""

    def send(self, text: str) -> None:
        ...


@runtime_checkable
class CommandRegistry(Protocol):
    """Registers chat commands; handlers receive the trailing argument text."""

    def add(self, name: str, handler: CommandHandler) -> None:
        ...

    def remove(self, name: str) -> None:
        ...


@runtime_checkable
class NameLookup(Protocol):
    """Item/skill data table lookup; entries expose a ``name`` attribute."""

    def get(self, key: int) -> Any:
        ...
