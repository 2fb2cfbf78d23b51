"""Sink protocol for packetlogger file routing.

File sinks implement the ``LineSink`` protocol: an ``is_open`` property
and a ``write_line(line)`` method.  The interactive sink is the host's
``GameChannel`` (see :mod:`packetlogger.host`).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from packetlogger.routing.sinks.log_stream import LogStream, session_timestamp


@runtime_checkable
class LineSink(Protocol):
    """Protocol that every append-only line destination implements."""

    @property
    def is_open(self) -> bool:
        """Whether writes currently reach the destination."""
        ...

    def write_line(self, line: str) -> None:
        """Append one line; the newline is added by the sink."""
        ...


__all__ = ["LineSink", "LogStream", "session_timestamp"]
