"""Main Typer application — imports and registers all CLI commands.

Entry point: ``packetlogger`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer

from packetlogger.cli.commands.migrate import defaults_cmd, migrate_cmd
from packetlogger.cli.commands.replay import replay_cmd
from packetlogger.config import config

app = typer.Typer(
    name="packetlogger",
    help="packetlogger: filter and log intercepted client/server messages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="migrate", help="Upgrade a stored settings document.")(migrate_cmd)
app.command(name="defaults", help="Show the default settings document.")(defaults_cmd)
app.command(name="replay", help="Replay a capture file through the logger.")(replay_cmd)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Override PACKETLOGGER_LOG_LEVEL."
    ),
) -> None:
    """Configure logging for every subcommand."""
    level = (log_level or config.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO))


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
