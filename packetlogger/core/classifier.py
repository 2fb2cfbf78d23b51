"""Message classifier: numeric wire code to protocol name."""

from __future__ import annotations

import logging

from packetlogger.host import NameResolver
from packetlogger.models.records import UNKNOWN_NAME

logger = logging.getLogger(__name__)


class MessageClassifier:
    """Resolves opcodes through the host's protocol map.

    Parameters
    ----------
    resolver:
        Anything exposing ``code_to_name(code) -> str | None``.
    """

    def __init__(self, resolver: NameResolver) -> None:
        self._resolver = resolver

    def classify(self, code: int) -> tuple[str, bool]:
        """Return ``(name, is_known)``; unresolved codes map to ``UNKNOWN``."""
        try:
            name = self._resolver.code_to_name(code)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Protocol map lookup failed for code %s: %s", code, exc)
            name = None
        if not name:
            return UNKNOWN_NAME, False
        return name, True
