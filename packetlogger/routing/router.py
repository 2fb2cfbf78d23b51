"""SinkRouter — routes one intercepted message to the game and file sinks.

Each requested sink is attempted independently.  Failures are logged and
swallowed so the host's message flow is never interrupted by logging.
"""

from __future__ import annotations

import logging

from packetlogger.core.rendering import PayloadRenderer
from packetlogger.host import GameChannel
from packetlogger.models.records import MessageRecord
from packetlogger.routing._formatting import format_file_line, format_game_summary
from packetlogger.routing.sinks import LineSink

logger = logging.getLogger(__name__)

GAME_SINK = "game"
FILE_SINK = "file"


class SinkRouter:
    """Fans a message record out to zero, one or two sinks.

    Parameters
    ----------
    renderer:
        Produces the decoded-or-raw payload text for file lines.  It is
        only invoked when a file line is actually written.

    Usage
    -----
    >>> router = SinkRouter(renderer)
    >>> router.emit(record, to_game=True, to_file=True,
    ...             game_sink=channel, file_stream=stream)
    ['game', 'file']
    """

    def __init__(self, renderer: PayloadRenderer) -> None:
        self._renderer = renderer

    def emit(
        self,
        record: MessageRecord,
        *,
        to_game: bool,
        to_file: bool,
        game_sink: GameChannel | None,
        file_stream: LineSink | None,
    ) -> list[str]:
        """Deliver *record*; returns the names of the sinks that received it.

        An unreachable sink (no channel, stream not open) is skipped
        silently.  Never raises.
        """
        delivered: list[str] = []

        if to_game and game_sink is not None:
            try:
                game_sink.send(format_game_summary(record))
                delivered.append(GAME_SINK)
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to log %s to game: %s", record.name, exc)

        if to_file and file_stream is not None and file_stream.is_open:
            try:
                payload = self._renderer.render(record.name, record.is_known, record.payload)
                file_stream.write_line(format_file_line(record, payload))
                delivered.append(FILE_SINK)
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to write %s to log file: %s", record.name, exc)

        return delivered
