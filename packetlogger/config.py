"""Process configuration — env-driven via pydantic-settings.

Reads from a .env file and PACKETLOGGER_* environment variables.  These
settings describe the logger process itself (where log files go, hook
ordering, log level).  The operator toggles that change during a session
live in :class:`packetlogger.models.settings.LoggerSettings`.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from packetlogger.core.migration import CURRENT_SETTINGS_VERSION


class LoggerConfig(BaseSettings):
    """Process configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PACKETLOGGER_LOG_DIR=/var/log/packets
        export PACKETLOGGER_LOG_LEVEL=DEBUG

    Or via .env file::

        PACKETLOGGER_RAW_HOOK_ORDER=20000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PACKETLOGGER_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Session log files: {log_dir}/{prefix}_{session_id}.log
    log_dir: Path = Path("logs")
    packet_log_prefix: str = "packets"
    item_skill_log_prefix: str = "item_skill_log"

    # Schema version the operator settings are migrated to at load time
    settings_version: int = CURRENT_SETTINGS_VERSION

    # Hook chain positions; higher runs later, so the raw hook follows every handler
    raw_hook_order: int = 10000
    handler_order: int = 1000

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton, import as `from packetlogger.config import config`
config = LoggerConfig()
