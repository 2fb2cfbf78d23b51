"""Hooked-name registry — which message names have a dedicated handler.

Populated once at startup while handlers are installed and only read
afterwards, by the "only hooked packets" filter mode.
"""

from __future__ import annotations

import logging
from typing import Iterator

from packetlogger.host import WILDCARD

logger = logging.getLogger(__name__)


class HookedNameRegistry:
    """Append-only set of uppercase message names.

    Examples
    --------
    >>> registry = HookedNameRegistry()
    >>> registry.register("c_use_item")
    True
    >>> "C_USE_ITEM" in registry
    True
    >>> registry.register("*")
    False
    """

    def __init__(self) -> None:
        self._names: set[str] = set()

    def register(self, name: str) -> bool:
        """Record *name*; returns ``True`` if it was not already present.

        The wildcard and empty names are never recorded.
        """
        if not name or name == WILDCARD:
            return False
        key = name.upper()
        if key in self._names:
            return False
        self._names.add(key)
        logger.debug("Registered hooked packet: %s", key)
        return True

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.upper() in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    @property
    def names(self) -> frozenset[str]:
        """Return a snapshot of the registered names."""
        return frozenset(self._names)
