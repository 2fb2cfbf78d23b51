"""packetlogger CLI — Typer-based command-line interface.

Provides the ``packetlogger`` command with subcommands for inspecting
settings migrations and replaying captured traffic offline.

All output uses Rich for formatted terminal display.
"""
