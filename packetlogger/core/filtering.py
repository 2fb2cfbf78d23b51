"""Decides whether an intercepted message is logged.

Rules, first match decides:

1. fake message while fake logging is off -> reject
2. hooked-only mode, known name, no dedicated handler -> reject
3. non-empty filter set -> accept iff the name contains some filter
4. otherwise accept
"""

from __future__ import annotations

from typing import Iterable

from packetlogger.core.registry import HookedNameRegistry
from packetlogger.models.settings import LoggerSettings


def matches_filters(name: str, filters: Iterable[str]) -> bool:
    """Case-insensitive substring match of *name* against any filter.

    An empty filter collection matches everything.
    """
    entries = [entry.upper() for entry in filters]
    if not entries:
        return True
    name_upper = name.upper()
    return any(entry in name_upper for entry in entries)


class FilterEngine:
    """Applies the operator's filter settings to candidate messages.

    Reads the shared settings on every call, so command-driven changes
    take effect on the next message.
    """

    def __init__(self, settings: LoggerSettings, hooked: HookedNameRegistry) -> None:
        self._settings = settings
        self._hooked = hooked

    def should_log(self, name: str, is_fake: bool, is_known_name: bool) -> bool:
        settings = self._settings
        if is_fake and not settings.log_fake_packets:
            return False
        if settings.log_only_hooked_packets and is_known_name and name not in self._hooked:
            return False
        return matches_filters(name, settings.packet_filters)
