"""``packetlogger replay`` — run a capture through a logger session offline.

The capture is a JSON-lines file of ``{"code", "data", "incoming",
"fake"}`` objects, ``data`` being hex.  Names come from a JSON object
mapping opcodes to message names.  No decoders are available offline,
so file payloads are written in raw form.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from packetlogger.config import LoggerConfig
from packetlogger.core.migration import LEGACY
from packetlogger.models.settings import LoggerSettings
from packetlogger.offline import (
    ConsoleChannel,
    InMemoryCommandRegistry,
    OfflineHost,
    read_capture,
)
from packetlogger.session import PacketLoggerSession

console = Console()


def replay_cmd(
    capture: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON-lines capture file."
    ),
    names: Path = typer.Option(
        ..., "--names", "-n", exists=True, dir_okay=False,
        help="JSON object mapping opcodes to message names.",
    ),
    log_dir: Path = typer.Option(
        Path("logs"), "--log-dir", "-o", help="Directory for the session logs."
    ),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", "-s", exists=True, dir_okay=False,
        help="Stored settings document to start from.",
    ),
    settings_version: Optional[int] = typer.Option(
        None, "--settings-version",
        help="Schema version of --settings (omit for an unversioned document).",
    ),
    filters: Optional[List[str]] = typer.Option(
        None, "--filter", "-F", help="Packet-name filter (repeatable)."
    ),
    fake: bool = typer.Option(False, "--fake", help="Also log fake messages."),
) -> None:
    """Replay CAPTURE through the packet logger and report the log files."""
    if settings_file is not None:
        document = json.loads(settings_file.read_text(encoding="utf-8"))
        declared = settings_version if settings_version is not None else LEGACY
        try:
            settings = LoggerSettings.from_document(document, declared)
        except (ValueError, ValidationError) as exc:
            console.print(f"[red]Unusable settings:[/red] {exc}")
            raise typer.Exit(code=1)
    else:
        settings = LoggerSettings()

    if filters:
        settings.replace_filters(filters)
    if fake:
        settings.log_fake_packets = True

    host = OfflineHost.from_names_file(names)
    session = PacketLoggerSession(
        host,
        commands=InMemoryCommandRegistry(),
        game=ConsoleChannel(console),
        settings=settings,
        config=LoggerConfig(log_dir=log_dir),
    )
    with session:
        count = host.replay(read_capture(capture))

    console.print(
        Panel(
            "\n".join([
                f"[bold]Messages replayed:[/bold] {count}",
                f"[bold]Packet log:[/bold]        {session.packet_stream.path}",
                f"[bold]Item/skill log:[/bold]    {session.item_skill_stream.path}",
            ]),
            title="[bold]packetlogger replay[/bold]",
            border_style="green",
        )
    )
