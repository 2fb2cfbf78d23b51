"""Dedicated per-message handlers.

Each handler is a ``TypedEventLogger`` configured by one row of
``HANDLER_TABLE``; ``HandlerInstaller`` hooks the whole table at startup.
"""

from packetlogger.handlers.base import (
    EventCategory,
    HandlerSpec,
    LabelSource,
    base_skill_id,
)
from packetlogger.handlers.catalog import (
    EQUIPMENT_HANDLERS,
    HANDLER_TABLE,
    ITEM_SKILL_HANDLERS,
    handler_names,
)
from packetlogger.handlers.installer import (
    HandlerInstaller,
    HandlerInstallError,
    InstallFailure,
    InstallReport,
)
from packetlogger.handlers.typed_logger import TypedEventLogger

__all__ = [
    "EventCategory",
    "HandlerSpec",
    "LabelSource",
    "base_skill_id",
    "EQUIPMENT_HANDLERS",
    "HANDLER_TABLE",
    "ITEM_SKILL_HANDLERS",
    "handler_names",
    "HandlerInstaller",
    "HandlerInstallError",
    "InstallFailure",
    "InstallReport",
    "TypedEventLogger",
]
