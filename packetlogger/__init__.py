"""packetlogger: filtered, dual-sink logging of intercepted client/server messages.

Every message crossing the proxy is classified by name, filtered against
the operator's settings, rendered (decoded JSON or raw hex) and routed to
the in-game chat and/or a per-session log file.  Dedicated handlers
narrate item, skill and equipment messages to a second log.  Stored
operator settings are upgraded across schema versions at load time.
"""

__version__ = "0.3.0"
__description__ = "Filtered, dual-sink logging of intercepted client/server messages"

from packetlogger.core.migration import LEGACY, migrate_settings
from packetlogger.models.settings import LoggerSettings
from packetlogger.session import PacketLoggerSession

__all__ = [
    "LEGACY",
    "LoggerSettings",
    "PacketLoggerSession",
    "migrate_settings",
    "__version__",
]
