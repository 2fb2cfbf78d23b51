"""Settings migration — upgrades a stored settings document across schema versions.

The engine is a pure function over plain dicts.  A stored document is in
one of three states:

* no document at all (``from_version is None``): start from defaults;
* a legacy, unversioned document (``from_version is LEGACY``): merge it
  over the defaults;
* a versioned document (``from_version`` is an int): upgrade one version
  at a time until the target is reached.

Each single step is looked up in ``STEP_RULES`` by target version.  Steps
without a bespoke rule reconcile the document against that version's
defaults: known keys are carried forward, unknown keys are dropped, new
keys appear at their default value.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Union

logger = logging.getLogger(__name__)


class MigrationError(ValueError):
    """Raised when a declared or target schema version is not usable."""


class _Legacy:
    """Marker for a settings document written before versioning existed."""

    _instance: _Legacy | None = None

    def __new__(cls) -> _Legacy:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "LEGACY"


LEGACY = _Legacy()

SettingsVersion = Union[int, None, _Legacy]
StepRule = Callable[[dict[str, Any]], dict[str, Any]]

CURRENT_SETTINGS_VERSION = 3

# ---------------------------------------------------------------------------
# Schema history
# ---------------------------------------------------------------------------

SCHEMA_DEFAULTS: dict[int, dict[str, Any]] = {
    1: {
        "packetFilters": [],
        "logFakePackets": False,
        "logToGame": True,
        "logToFile": True,
        "debug": False,
    },
    2: {
        "packetFilters": [],
        "logFakePackets": False,
        "logPktToGame": True,
        "logPktToFile": True,
        "logItemSkillToGame": True,
        "logItemSkillToFile": True,
        "debug": False,
    },
    3: {
        "packetFilters": [],
        "logFakePackets": False,
        "logPktToGame": True,
        "logPktToFile": True,
        "logItemSkillToGame": True,
        "logItemSkillToFile": True,
        "logEquipmentToGame": True,
        "logEquipmentToFile": True,
        "logOnlyHookedPackets": False,
        "debug": False,
    },
}

UPGRADE_NOTICE = (
    "Your settings have been updated to version {version}. "
    "You can edit the new config file after the next relog."
)


def _check_version(version: Any, role: str) -> int:
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise MigrationError(f"{role} version must be a positive integer, got {version!r}")
    return version


def schema_defaults(version: int = CURRENT_SETTINGS_VERSION) -> dict[str, Any]:
    """Return a fresh copy of the default document for *version*.

    Versions newer than the last recorded schema share its defaults.
    """
    _check_version(version, "Schema")
    known = max(v for v in SCHEMA_DEFAULTS if v <= version)
    return copy.deepcopy(SCHEMA_DEFAULTS[known])


# ---------------------------------------------------------------------------
# Single-step rules
# ---------------------------------------------------------------------------

_MISSING = object()


def _coerce(value: Any, default: Any) -> Any:
    """Return *value* if it has the default's shape, else ``_MISSING``."""
    if isinstance(default, bool):
        return value if isinstance(value, bool) else _MISSING
    if isinstance(default, list):
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(value)
        return _MISSING
    if isinstance(value, type(default)) and not isinstance(value, bool):
        return value
    return _MISSING


def _reconcile(settings: dict[str, Any], version: int) -> dict[str, Any]:
    """Rebuild from *version*'s defaults, carrying over matching keys."""
    result = schema_defaults(version)
    for key, default in result.items():
        if key not in settings:
            continue
        value = _coerce(settings[key], default)
        if value is not _MISSING:
            result[key] = copy.deepcopy(value)
    return result


def _step_to_v2(settings: dict[str, Any]) -> dict[str, Any]:
    """v1 -> v2: packet toggles renamed, item/skill toggles introduced."""
    defaults = schema_defaults(2)
    upgraded = dict(settings)

    for old_key, new_key in (("logToGame", "logPktToGame"), ("logToFile", "logPktToFile")):
        value = _coerce(upgraded.pop(old_key, _MISSING), defaults[new_key])
        upgraded[new_key] = defaults[new_key] if value is _MISSING else value

    upgraded["logItemSkillToGame"] = defaults["logItemSkillToGame"]
    upgraded["logItemSkillToFile"] = defaults["logItemSkillToFile"]

    for key, default in defaults.items():
        if key in upgraded:
            value = _coerce(upgraded[key], default)
            if value is not _MISSING:
                continue
        upgraded[key] = default
    return upgraded


STEP_RULES: dict[int, StepRule] = {
    2: _step_to_v2,
}


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def _upgrade(
    from_version: int, to_version: int, settings: dict[str, Any]
) -> tuple[dict[str, Any], bool]:
    """Walk ``from_version -> to_version`` one step at a time.

    Returns the upgraded document and whether any step reconciled
    against defaults while moving forward (which warrants a notice).
    """
    if from_version + 1 < to_version:
        settings, noticed_a = _upgrade(from_version, from_version + 1, settings)
        settings, noticed_b = _upgrade(from_version + 1, to_version, settings)
        return settings, noticed_a or noticed_b

    if from_version >= to_version:
        return _reconcile(settings, to_version), False

    rule = STEP_RULES.get(to_version)
    if rule is not None:
        return rule(settings), False
    return _reconcile(settings, to_version), True


def migrate_settings(
    from_version: SettingsVersion,
    to_version: int = CURRENT_SETTINGS_VERSION,
    settings: dict[str, Any] | None = None,
    *,
    notify: Callable[[str], None] | None = None,
) -> dict[str, Any]:
    """Convert a stored settings document to the *to_version* schema.

    Parameters
    ----------
    from_version:
        Declared version of *settings*: ``None`` when no document exists,
        ``LEGACY`` for an unversioned document, otherwise an int.
    to_version:
        Target schema version.
    settings:
        The stored document.  Never mutated.
    notify:
        Optional callback receiving the one-time upgrade notice, in
        addition to the INFO log record.

    Returns
    -------
    dict
        A new document holding every key of the target schema.

    Raises
    ------
    MigrationError
        If either version is not a positive integer.
    """
    _check_version(to_version, "Target")

    if from_version is None:
        return schema_defaults(to_version)

    if from_version is LEGACY:
        merged = schema_defaults(to_version)
        merged.update(copy.deepcopy(settings or {}))
        return merged

    _check_version(from_version, "Declared")
    document = copy.deepcopy(settings or {})
    result, upgraded = _upgrade(from_version, to_version, document)

    if upgraded and from_version < to_version:
        message = UPGRADE_NOTICE.format(version=to_version)
        logger.info(message)
        if notify is not None:
            notify(message)
    return result
