"""packetlogger core — classification, filtering, rendering and migration.

Every component here is synchronous and runs to completion per message;
the host's event loop guarantees no two messages are processed at once.
"""
