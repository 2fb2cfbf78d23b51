"""``packetlogger migrate`` / ``packetlogger defaults`` — inspect settings migrations.

Reads a stored settings document and prints the upgraded document.  The
stored file is never rewritten; saving settings is the host's job.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.json import JSON

from packetlogger.core.migration import (
    CURRENT_SETTINGS_VERSION,
    LEGACY,
    MigrationError,
    migrate_settings,
    schema_defaults,
)

console = Console()


def migrate_cmd(
    settings_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Stored settings document (JSON).",
    ),
    from_version: Optional[int] = typer.Option(
        None,
        "--from",
        "-f",
        help="Declared schema version of the document.",
    ),
    legacy: bool = typer.Option(
        False,
        "--legacy",
        help="Treat the document as unversioned (pre-versioning format).",
    ),
    to_version: int = typer.Option(
        CURRENT_SETTINGS_VERSION,
        "--to",
        "-t",
        help="Target schema version.",
    ),
) -> None:
    """Upgrade a stored settings document and print the result."""
    if legacy and from_version is not None:
        console.print("[red]--from and --legacy are mutually exclusive.[/red]")
        raise typer.Exit(code=2)
    if not legacy and from_version is None:
        console.print("[red]Give the document's version with --from, or pass --legacy.[/red]")
        raise typer.Exit(code=2)

    try:
        document = json.loads(settings_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON in {settings_file}:[/red] {exc}")
        raise typer.Exit(code=1)
    if not isinstance(document, dict):
        console.print(f"[red]{settings_file} does not hold a JSON object.[/red]")
        raise typer.Exit(code=1)

    declared = LEGACY if legacy else from_version
    try:
        migrated = migrate_settings(
            declared,
            to_version,
            document,
            notify=lambda message: console.print(f"[yellow]{message}[/yellow]"),
        )
    except MigrationError as exc:
        console.print(f"[red]Migration failed:[/red] {exc}")
        raise typer.Exit(code=1)

    console.print(JSON(json.dumps(migrated)))


def defaults_cmd(
    version: int = typer.Option(
        CURRENT_SETTINGS_VERSION,
        "--version",
        "-v",
        help="Schema version whose defaults to show.",
    ),
) -> None:
    """Print the default settings document for a schema version."""
    try:
        defaults = schema_defaults(version)
    except MigrationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    console.print(JSON(json.dumps(defaults)))
