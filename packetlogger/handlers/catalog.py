"""The handler table — every message that gets a dedicated narration.

Built once at import time and iterated by the installer at startup.
Rows with ``version=None`` follow the host's preferred definition
version, falling back to ``fallback_version`` when the host has none.
"""

from __future__ import annotations

from packetlogger.handlers.base import EventCategory, HandlerSpec, LabelSource

ITEM_SKILL = EventCategory.ITEM_SKILL
EQUIPMENT = EventCategory.EQUIPMENT

_SKILL_FILE_FIELDS = (("ID", "{skill_id}"), ("Base ID", "{base_id}"), ("Name", "{label}"))


def _skill(name: str, version: int, kind: str, game: str = "{label} (ID: {skill_id})",
           extra: tuple[tuple[str, str], ...] = ()) -> HandlerSpec:
    return HandlerSpec(
        name=name,
        category=ITEM_SKILL,
        version=version,
        label_source=LabelSource.SKILL,
        label_kind=kind,
        game_template=game,
        file_fields=_SKILL_FILE_FIELDS + extra,
    )


def _item(name: str, game: str, fields: tuple[tuple[str, str], ...], *,
          version: int | None = None, fallback: int = 1, kind: str = "Item",
          id_field: str = "itemId", category: EventCategory = EQUIPMENT) -> HandlerSpec:
    return HandlerSpec(
        name=name,
        category=category,
        version=version,
        fallback_version=fallback,
        label_source=LabelSource.ITEM,
        label_kind=kind,
        id_field=id_field,
        game_template=game,
        file_fields=fields,
    )


def _notice(name: str, game: str, fields: tuple[tuple[str, str], ...], *,
            version: int | None = None) -> HandlerSpec:
    return HandlerSpec(
        name=name,
        category=EQUIPMENT,
        version=version,
        game_template=game,
        file_fields=fields,
    )


ITEM_SKILL_HANDLERS: tuple[HandlerSpec, ...] = (
    _item(
        "C_USE_ITEM",
        "{label} (ID: {id}, GameID: {gameId}, DBID: {dbid})",
        (("ID", "{id}"), ("Name", "{label}"), ("GameID", "{gameId}"), ("DBID", "{dbid}")),
        version=3, id_field="id", category=ITEM_SKILL,
    ),
    _skill("C_START_SKILL", 7, "Skill"),
    _skill("C_PRESS_SKILL", 4, "Press Skill"),
    _skill("C_START_TARGETED_SKILL", 7, "Targeted Skill"),
    _skill("C_START_COMBO_INSTANT_SKILL", 6, "Combo Skill"),
    _skill("C_NOTIMELINE_SKILL", 3, "NoTimeline Skill"),
    _skill(
        "S_EACH_SKILL_RESULT", 14, "Skill Result",
        game="{label} (ID: {skill_id}) from {source} to {target}",
        extra=(("Source", "{source}"), ("Target", "{target}")),
    ),
    _skill(
        "S_ACTION_END", 5, "Action End",
        game="{label} (ID: {skill_id}) by {gameId}",
        extra=(("GameId", "{gameId}"),),
    ),
    _skill(
        "S_ACTION_STAGE", 9, "Action Stage",
        game="{label} (ID: {skill_id}) by {gameId} stage {stage}",
        extra=(("GameId", "{gameId}"), ("Stage", "{stage}")),
    ),
    _skill(
        "S_START_COOLTIME_SKILL", 3, "Skill Cooldown",
        game="{label} (ID: {skill_id}) cooldown: {cooldown}ms",
        extra=(("Cooldown", "{cooldown}ms"),),
    ),
)

EQUIPMENT_HANDLERS: tuple[HandlerSpec, ...] = (
    _item(
        "C_EQUIP_ITEM",
        "{label} (ID: {id}) to slot {slot} | GameID: {gameId} | Unk: {unk}",
        (("ID", "{id}"), ("Name", "{label}"), ("Slot", "{slot}"),
         ("GameID", "{gameId}"), ("Unk", "{unk}")),
        fallback=2, id_field="id",
    ),
    _item(
        "C_EQUIP_SERVANT_ITEM",
        "{label} (ID: {itemId}) on servant {servantId}",
        (("ID", "{itemId}"), ("Name", "{label}"), ("ServantId", "{servantId}")),
    ),
    _item(
        "C_PET_EQUIP",
        "{label} (ID: {itemId}) on pet {petId}",
        (("ID", "{itemId}"), ("Name", "{label}"), ("PetId", "{petId}")),
        fallback=3,
    ),
    HandlerSpec(
        name="C_REQUEST_EQUIPMENT_INHERITANCE",
        category=EQUIPMENT,
        fallback_version=2,
        game_template="Source item ({sourceItemUid}) to Target item ({targetItemUid})",
        file_fields=(("Source", "{sourceItemUid}"), ("Target", "{targetItemUid}")),
    ),
    _item(
        "S_EQUIP_ITEM",
        "{label} (ID: {id}) equipped by CID: {cid}, ItemID: {itemid}",
        (("ID", "{id}"), ("Name", "{label}"), ("CID", "{cid}"), ("ItemID", "{itemid}")),
        version=1, id_field="id",
    ),
    _item(
        "S_EQUIP_SERVANT_ITEM",
        "{label} (ID: {itemId}) on servant {servantId}",
        (("ID", "{itemId}"), ("Name", "{label}"), ("ServantId", "{servantId}")),
    ),
    _notice(
        "S_USER_ITEM_EQUIP_CHANGER",
        "User {gameId} changed equipment",
        (("GameId", "{gameId}"),),
        version=1,
    ),
    _item(
        "S_OBTAIN_TOKEN_ITEM",
        "{label} (ID: {itemId}) amount: {amount}",
        (("ID", "{itemId}"), ("Name", "{label}"), ("Amount", "{amount}")),
        kind="Token Item",
    ),
    _notice(
        "S_PREVIEW_ITEM",
        "Preview item data received",
        (("", "Preview data received"),),
        version=1,
    ),
    _item(
        "S_RECEIVE_TOKEN_TARGET_ITEM",
        "{label} (ID: {itemId})",
        (("ID", "{itemId}"), ("Name", "{label}")),
        kind="Token Target Item",
    ),
    _notice(
        "S_RESULT_COMBINE_ITEM",
        "Item combination result: {outcome}",
        (("Success", "{success}"),),
    ),
    _notice(
        "S_RESULT_REPAIR_ITEM",
        "Item repair result received",
        (("", "Repair result received"),),
    ),
    _notice(
        "S_SEND_QUEST_ITEM_INFO",
        "Quest item info received",
        (("", "Quest item info received"),),
    ),
    _notice(
        "S_SET_SEND_PARCEL_ITEM",
        "Parcel item set",
        (("", "Parcel item set"),),
    ),
    _item(
        "S_SHOW_TRADE_ITEM",
        "{label} (ID: {itemId})",
        (("ID", "{itemId}"), ("Name", "{label}")),
        kind="Trade Item",
    ),
    _notice(
        "S_USE_RIGHT_ITEM",
        "User {gameId} used right item",
        (("GameId", "{gameId}"),),
        version=1,
    ),
    _item(
        "S_START_COOLTIME_ITEM",
        "{label} (ID: {itemId}) cooldown: {cooldown}ms",
        (("ID", "{itemId}"), ("Name", "{label}"), ("Cooldown", "{cooldown}ms")),
        version=1,
    ),
)

HANDLER_TABLE: tuple[HandlerSpec, ...] = ITEM_SKILL_HANDLERS + EQUIPMENT_HANDLERS


def handler_names() -> list[str]:
    """Names of every dedicated handler, in installation order."""
    return [spec.name for spec in HANDLER_TABLE]
