"""Payload rendering — structured decode with a raw-hex fallback.

A message payload is rendered for the file log in one of three forms:

* ``RAW: <hex>``: the name is unknown, has no definition, or decoding
  raised;
* compact JSON of the decoded event;
* ``PARSED (Stringify Error: …)``: decoding worked but the event could
  not be serialized.

Rendering never raises.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from packetlogger.core.diagnostics import debug_log
from packetlogger.host import DecoderRegistry
from packetlogger.models.settings import LoggerSettings

logger = logging.getLogger(__name__)

RAW_PREFIX = "RAW: "
STRINGIFY_ERROR = "PARSED (Stringify Error: {error})"

# Largest integer a double represents exactly; wider values go out as strings
MAX_SAFE_INTEGER = 2**53 - 1


def render_raw(data: bytes) -> str:
    """Fixed raw rendering: ``RAW: `` followed by lowercase hex."""
    return RAW_PREFIX + bytes(data).hex()


def to_jsonable(value: Any) -> Any:
    """Convert a decoded event into JSON-safe primitives.

    64-bit integers beyond the double-precision safe range become decimal
    strings so readers parsing the log as JSON do not lose precision.

    Raises
    ------
    TypeError
        For value shapes with no JSON form.
    """
    if value is None or isinstance(value, (bool, str, float)):
        return value
    if isinstance(value, int):
        return str(value) if abs(value) > MAX_SAFE_INTEGER else value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, BaseModel):
        return to_jsonable(value.model_dump())
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_event(event: Any) -> str:
    """Serialize a decoded event to compact JSON.

    Raises ``TypeError``/``ValueError``/``RecursionError`` on failure.
    """
    return json.dumps(
        to_jsonable(event),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def describe_event(event: Any) -> str:
    """Best-effort serialization for diagnostics; never raises."""
    try:
        return serialize_event(event)
    except (TypeError, ValueError, RecursionError) as exc:
        return STRINGIFY_ERROR.format(error=exc)


class PayloadRenderer:
    """Decode-or-fallback renderer bound to the host's decoder registry.

    Parameters
    ----------
    decoders:
        The host registry providing ``latest_schema_version`` and ``decode``.
    settings:
        Shared operator settings; only ``debug`` is read, to gate
        decode-failure diagnostics.
    """

    def __init__(self, decoders: DecoderRegistry, settings: LoggerSettings) -> None:
        self._decoders = decoders
        self._settings = settings

    def decode(self, name: str, data: bytes) -> Any | None:
        """Decode against the newest definition, or ``None`` on any failure."""
        try:
            version = self._decoders.latest_schema_version(name)
            if version is None:
                return None
            return self._decoders.decode(name, version, data)
        except Exception as exc:  # noqa: BLE001
            debug_log(self._settings, logger, "Failed to parse %s: %s", name, exc)
            return None

    def render(self, name: str, is_known_name: bool, data: bytes) -> str:
        if not is_known_name:
            return render_raw(data)

        event = self.decode(name, data)
        if event is None:
            return render_raw(data)

        try:
            return serialize_event(event)
        except (TypeError, ValueError, RecursionError) as exc:
            return STRINGIFY_ERROR.format(error=exc)
