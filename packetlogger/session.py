"""Logger session — wires the pipeline, handlers and commands into a host.

The session is the unit of lifecycle: ``start()`` opens the two session
logs, installs the raw hook, the handler table and the operator
commands; ``stop()`` closes the logs and removes the commands.  Nothing
that goes wrong during startup is fatal; the session runs with whatever
sinks and handlers could be set up.
"""

from __future__ import annotations

import logging
from typing import Iterable

from packetlogger.commands import OperatorCommands
from packetlogger.config import LoggerConfig
from packetlogger.core.classifier import MessageClassifier
from packetlogger.core.filtering import FilterEngine
from packetlogger.core.pipeline import PacketPipeline
from packetlogger.core.registry import HookedNameRegistry
from packetlogger.core.rendering import PayloadRenderer
from packetlogger.handlers.base import HandlerSpec
from packetlogger.handlers.catalog import HANDLER_TABLE
from packetlogger.handlers.installer import HandlerInstaller, InstallReport
from packetlogger.handlers.typed_logger import TypedEventLogger
from packetlogger.host import (
    RAW,
    WILDCARD,
    CommandRegistry,
    GameChannel,
    HookOptions,
    NameLookup,
    ProtocolHost,
)
from packetlogger.models.settings import LoggerSettings
from packetlogger.routing.router import SinkRouter
from packetlogger.routing.sinks import LogStream, session_timestamp

logger = logging.getLogger(__name__)


class PacketLoggerSession:
    """One logging session inside a host.

    Parameters
    ----------
    host:
        The interception host.
    commands:
        The host's command registry.
    game:
        The interactive chat channel.
    settings:
        Loaded (already migrated) operator settings.  Defaults if omitted.
    items / skills:
        Optional name tables for handler labels.
    config:
        Process configuration.  Read from the environment if omitted.
    handlers:
        The handler table to install.
    session_id:
        Identifier used in log file names; defaults to the current time
        in milliseconds.

    Usage
    -----
    >>> with PacketLoggerSession(host, commands=registry, game=chat) as session:
    ...     host.run()
    """

    def __init__(
        self,
        host: ProtocolHost,
        *,
        commands: CommandRegistry,
        game: GameChannel | None,
        settings: LoggerSettings | None = None,
        items: NameLookup | None = None,
        skills: NameLookup | None = None,
        config: LoggerConfig | None = None,
        handlers: Iterable[HandlerSpec] = HANDLER_TABLE,
        session_id: int | None = None,
    ) -> None:
        self.host = host
        self.game = game
        self.settings = settings or LoggerSettings()
        self.config = config or LoggerConfig()
        self.session_id = session_id or session_timestamp()
        self._items = items
        self._skills = skills
        self._handlers = tuple(handlers)

        self.hooked = HookedNameRegistry()
        self.packet_stream = LogStream.for_session(
            self.config.log_dir, self.config.packet_log_prefix, self.session_id,
            label="Packet",
        )
        self.item_skill_stream = LogStream.for_session(
            self.config.log_dir, self.config.item_skill_log_prefix, self.session_id,
            label="Item/Skill",
        )

        self.pipeline = PacketPipeline(
            settings=self.settings,
            classifier=MessageClassifier(host),
            filters=FilterEngine(self.settings, self.hooked),
            router=SinkRouter(PayloadRenderer(host, self.settings)),
            game=game,
            stream=self.packet_stream,
        )
        self.installer = HandlerInstaller(host, self.hooked, order=self.config.handler_order)
        self.commands = OperatorCommands(self.settings, game, commands)

        self._started = False
        self._stopped = False
        self.report = InstallReport()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def make_handler(self, spec: HandlerSpec) -> TypedEventLogger:
        return TypedEventLogger(
            spec,
            settings=self.settings,
            game=self.game,
            stream=self.item_skill_stream,
            items=self._items,
            skills=self._skills,
        )

    def start(self) -> InstallReport:
        """Open logs and install hooks and commands.  Runs once."""
        if self._started:
            return self.report
        self._started = True

        self.packet_stream.open()
        self.item_skill_stream.open()

        try:
            self.host.hook(
                WILDCARD,
                RAW,
                HookOptions(order=self.config.raw_hook_order, fake=None),
                self.pipeline.handle_raw,
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Could not install raw packet hook: %s", exc)

        self.report = self.installer.install(self._handlers, self.make_handler)
        self.commands.install()
        logger.info(
            "Packet logger session %s started: %d handlers installed, %d failed",
            self.session_id,
            len(self.report.installed),
            len(self.report.failures),
        )
        return self.report

    def stop(self) -> None:
        """Close both logs and remove the commands.  Runs once."""
        if self._stopped:
            return
        self._stopped = True
        try:
            self.packet_stream.close()
        finally:
            try:
                self.item_skill_stream.close()
            finally:
                self.commands.uninstall()

    def __enter__(self) -> PacketLoggerSession:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
