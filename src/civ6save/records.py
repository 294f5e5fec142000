from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from . import tags
from .cursor import ByteCursor, UnexpectedEof
from .debug_log import parse_debug_log
from .errors import TruncatedInput
from .values import Record, TypedNode, ValueType, iter_entries

FULL_CIV_TYPE: Final[str] = "CIVILIZATION_LEVEL_FULL_CIV"

# A slot with none of these set is a placeholder for an unused player slot.
IDENTITY_FIELDS: Final[tuple[str, ...]] = (
    "ACTOR_NAME",
    "LEADER_NAME",
    "PLAYER_NAME",
    "ACTOR_TYPE",
)


@dataclass(slots=True)
class Slot:
    index: int
    offset: int
    fields: Record = field(default_factory=dict)


@dataclass(slots=True)
class AssembledStream:
    tree: dict[str, Any]
    slots: list[Slot]
    compressed_start: int | None = None


def _has_value(node: TypedNode | None) -> bool:
    if node is None:
        return False
    return node.data not in (None, "")


def is_empty_slot(record: Record) -> bool:
    return not any(_has_value(record.get(name)) for name in IDENTITY_FIELDS)


def is_full_civ(record: Record) -> bool:
    actor_type = record.get("ACTOR_TYPE")
    return actor_type is not None and actor_type.data == FULL_CIV_TYPE


def split_slots(slots: list[Slot]) -> tuple[list[Record], list[Record]]:
    """Partition slots into (civs, actors), keeping stream order.

    Inclusion only depends on the slot not being a placeholder and carrying an
    actor name. ACTOR_AI_HUMAN is not looked at: its values changed meaning
    between save versions.
    """
    civs: list[Record] = []
    actors: list[Record] = []
    for slot in slots:
        if is_empty_slot(slot.fields):
            parse_debug_log("empty_slot", slot=slot.index, offset=slot.offset)
            continue
        if not _has_value(slot.fields.get("ACTOR_NAME")):
            parse_debug_log("nameless_slot", slot=slot.index, offset=slot.offset)
            continue
        if is_full_civ(slot.fields):
            civs.append(slot.fields)
        else:
            actors.append(slot.fields)

    current = [i for i, civ in enumerate(civs) if "IS_CURRENT_TURN" in civ and civ["IS_CURRENT_TURN"].data]
    if len(current) > 1:
        parse_debug_log("multiple_current_turn", civs=",".join(str(i) for i in current))
    return civs, actors


def assemble(cursor: ByteCursor) -> AssembledStream:
    """Walk the primary stream and group its entries into the typed tree."""
    top: dict[str, Any] = {}
    mods: list[Record] = []
    slots: list[Slot] = []
    current: Slot | None = None
    compressed_start: int | None = None

    try:
        for node in iter_entries(cursor):
            if node.tag == tags.END_UNCOMPRESSED:
                compressed_start = cursor.pos
                break
            if node.tag == tags.START_ACTOR:
                index = node.data if node.type is ValueType.UINT32 else len(slots)
                current = Slot(index=int(index), offset=node.offset)
                slots.append(current)
                continue
            if node.tag == tags.ACTORS_END:
                current = None
                continue
            if node.type is ValueType.END_MARKER:
                continue
            if current is not None:
                current.fields[node.key] = node
            elif node.tag == tags.MOD_BLOCK and node.type is ValueType.RECORD_ARRAY:
                mods.extend(node.data)  # type: ignore[arg-type]
            else:
                top[node.key] = node
    except UnexpectedEof as exc:
        raise TruncatedInput(str(exc), offset=exc.offset) from exc

    civs, actors = split_slots(slots)
    top["CIVS"] = civs
    top["ACTORS"] = actors
    top["MODS"] = mods
    return AssembledStream(tree=top, slots=slots, compressed_start=compressed_start)


__all__ = [
    "AssembledStream",
    "FULL_CIV_TYPE",
    "IDENTITY_FIELDS",
    "Slot",
    "assemble",
    "is_empty_slot",
    "is_full_civ",
    "split_slots",
]
