"""Session log stream — an append-only text file owned by one session.

Layout: {log_dir}/{prefix}_{session_id}.log

The stream is opened once at startup and closed once at shutdown.  If
opening fails the stream stays closed for the whole session and every
write is a silent no-op, so a missing log directory degrades logging
instead of stopping the logger.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)


def session_timestamp() -> int:
    """Milliseconds since the epoch; names the log files of one session."""
    return int(time.time() * 1000)


class LogStream:
    """Buffered append-mode writer for one session log.

    Parameters
    ----------
    path:
        The log file.  Parent directories are created on ``open()``.
    label:
        Human-readable name used in diagnostics (e.g. ``"Packet"``).
    """

    def __init__(self, path: Path | str, *, label: str = "Log") -> None:
        self._path = Path(path)
        self._label = label
        self._handle: TextIO | None = None
        self._closed = False

    @classmethod
    def for_session(
        cls, log_dir: Path | str, prefix: str, session_id: int, *, label: str = "Log"
    ) -> LogStream:
        return cls(Path(log_dir) / f"{prefix}_{session_id}.log", label=label)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def label(self) -> str:
        return self._label

    @property
    def is_open(self) -> bool:
        return self._handle is not None and not self._closed

    def open(self) -> bool:
        """Open the file for appending; returns ``False`` if that failed.

        Calling ``open()`` on an open or already-closed stream does nothing.
        """
        if self._handle is not None or self._closed:
            return self.is_open
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self._path.open("a", encoding="utf-8")
        except OSError as exc:
            logger.error(
                "Failed to create %s log file %s: %s", self._label, self._path, exc
            )
            self._handle = None
            return False
        logger.info("%s log file created: %s", self._label, self._path)
        return True

    def write_line(self, line: str) -> None:
        if not self.is_open or self._handle is None:
            return
        self._handle.write(line + "\n")

    def close(self) -> None:
        """Flush and close.  Safe to call on a stream that never opened."""
        if self._closed:
            return
        self._closed = True
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as exc:
            logger.error("Failed to close %s log file %s: %s", self._label, self._path, exc)
            return
        logger.info("%s log stream closed.", self._label)
