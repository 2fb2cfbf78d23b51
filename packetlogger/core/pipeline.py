"""Raw interception pipeline — classify, filter, then route every message.

Installed as a wildcard raw hook, so it sees every message in both
directions whether or not the host has a definition for it.  The host
calls ``handle_raw`` once per message and waits for it to return, which
keeps log lines in arrival order.
"""

from __future__ import annotations

from packetlogger.core.classifier import MessageClassifier
from packetlogger.core.filtering import FilterEngine
from packetlogger.host import GameChannel
from packetlogger.models.records import Direction, MessageRecord
from packetlogger.models.settings import LoggerSettings
from packetlogger.routing.router import SinkRouter
from packetlogger.routing.sinks import LineSink


class PacketPipeline:
    """The generic message logger.

    Parameters
    ----------
    settings:
        Shared operator settings, read on every message.
    classifier:
        Resolves opcodes to names.
    filters:
        Decides inclusion.
    router:
        Delivers the record to the game and file sinks.
    game:
        The interactive channel.
    stream:
        The session's packet log.
    """

    def __init__(
        self,
        *,
        settings: LoggerSettings,
        classifier: MessageClassifier,
        filters: FilterEngine,
        router: SinkRouter,
        game: GameChannel | None,
        stream: LineSink | None,
    ) -> None:
        self._settings = settings
        self._classifier = classifier
        self._filters = filters
        self._router = router
        self._game = game
        self._stream = stream

    def game_enabled(self) -> bool:
        """Whether raw messages go to chat.

        Chat output additionally requires at least one packet filter, so
        that enabling it cannot flood the chat with every message.
        """
        return self._settings.log_pkt_to_game and bool(self._settings.packet_filters)

    def handle_raw(self, code: int, data: bytes, incoming: bool, fake: bool) -> None:
        """Raw hook callback.

        Returns ``None`` so the host forwards the message unchanged.
        """
        name, known = self._classifier.classify(code)
        if not self._filters.should_log(name, fake, known):
            return None

        record = MessageRecord(
            direction=Direction.from_incoming(incoming),
            code=code,
            name=name,
            is_fake=fake,
            payload=bytes(data),
        )
        self._router.emit(
            record,
            to_game=self.game_enabled(),
            to_file=self._settings.log_pkt_to_file,
            game_sink=self._game,
            file_stream=self._stream,
        )
        return None
