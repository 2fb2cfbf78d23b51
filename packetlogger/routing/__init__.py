"""packetlogger routing — fans rendered lines out to the interactive and file sinks.

Two sink types exist: the in-game text channel provided by the host and
the session's append-only log streams.  Each is switched independently
by the operator settings.  A failing or unavailable sink never stops
delivery to the other one, and never stops message processing.
"""

from packetlogger.routing.router import SinkRouter

__all__ = ["SinkRouter"]
