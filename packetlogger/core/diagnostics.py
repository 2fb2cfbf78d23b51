"""Debug-gated diagnostics.

The host's diagnostic channel is the standard ``logging`` tree.  Chatty
per-message diagnostics are additionally gated on the operator's
``debug`` toggle so they can be switched on mid-session with ``pktdebug``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from packetlogger.models.settings import LoggerSettings


def debug_log(
    settings: LoggerSettings, log: logging.Logger, message: str, *args: Any
) -> None:
    """Log *message* at INFO, but only while ``settings.debug`` is on."""
    if settings.debug:
        log.info(message, *args)
