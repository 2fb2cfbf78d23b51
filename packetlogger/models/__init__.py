"""packetlogger data models — Pydantic v2."""

from packetlogger.models.records import UNKNOWN_NAME, Direction, MessageRecord
from packetlogger.models.settings import LoggerSettings

__all__ = [
    # records
    "UNKNOWN_NAME",
    "Direction",
    "MessageRecord",
    # settings
    "LoggerSettings",
]
