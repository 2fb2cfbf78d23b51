"""Per-message records built by the raw interception pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Name given to codes the host's protocol map cannot resolve
UNKNOWN_NAME = "UNKNOWN"


class Direction(str, Enum):
    """Which peer a message travels towards."""

    INBOUND = "inbound"  # server -> client
    OUTBOUND = "outbound"  # client -> server

    @classmethod
    def from_incoming(cls, incoming: bool) -> Direction:
        return cls.INBOUND if incoming else cls.OUTBOUND

    @property
    def arrow(self) -> str:
        """Compact label used in log lines (``S->C`` / ``C->S``)."""
        return "S->C" if self is Direction.INBOUND else "C->S"


class MessageRecord(BaseModel):
    """One intercepted message, alive only for the duration of its routing.

    The payload is kept as raw bytes; the decoded-or-raw rendering is
    produced by the router only when a file line is actually written.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    direction: Direction
    code: int
    name: str = UNKNOWN_NAME
    is_fake: bool = False
    payload: bytes = b""

    @property
    def is_known(self) -> bool:
        """Whether the code resolved to a real protocol name."""
        return self.name != UNKNOWN_NAME
