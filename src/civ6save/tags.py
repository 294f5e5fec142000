from __future__ import annotations

"""
Field identifiers of the save container.

Tags are 4 raw bytes on the wire; they are read as little-endian u32 so the
table below lists the byte sequence as it appears in a hex dump next to each
value. Identifiers missing from the table are not errors: decoded entries keep
them under `tag_key()`.
"""

from typing import Final

SCHEMA_VERSION: Final[int] = 1


def _tag(raw: bytes) -> int:
    return int.from_bytes(raw, "little")


# Top-level game data.
GAME_TURN: Final[int] = _tag(b"\x9d\x2c\xe6\xbd")
GAME_SPEED: Final[int] = _tag(b"\x99\xb0\xd9\x05")
MAP_SIZE: Final[int] = _tag(b"\x40\x5c\x83\x0b")
MAP_FILE: Final[int] = _tag(b"\x5a\x87\xd8\x63")
MOD_BLOCK: Final[int] = _tag(b"\x5c\xae\x27\x84")
MOD_ID: Final[int] = _tag(b"\x54\x5f\xc4\x04")
MOD_TITLE: Final[int] = _tag(b"\x72\xe1\x34\x30")

# Per-slot actor data.
ACTOR_NAME: Final[int] = _tag(b"\x2f\x5c\x5e\x9d")
LEADER_NAME: Final[int] = _tag(b"\x5f\x5e\xcd\xe8")
ACTOR_TYPE: Final[int] = _tag(b"\xbe\xab\x55\xca")
ACTOR_AI_HUMAN: Final[int] = _tag(b"\x95\xb9\x42\xce")
ACTOR_DESCRIPTION: Final[int] = _tag(b"\x65\x19\x9b\xff")
PLAYER_NAME: Final[int] = _tag(b"\xfd\x6b\xb9\xda")
PLAYER_PASSWORD: Final[int] = _tag(b"\x6c\xd1\x7c\x6e")
PLAYER_ALIVE: Final[int] = _tag(b"\xa6\xdf\xa7\x62")
IS_CURRENT_TURN: Final[int] = _tag(b"\xcb\x21\xb0\x7a")

# Structural markers.
START_ACTOR: Final[int] = _tag(b"\x58\xba\x7f\x4c")
ACTORS_END: Final[int] = _tag(b"\xe9\x3d\x5a\x1f")
END_UNCOMPRESSED: Final[int] = _tag(b"\x00\x00\x01\x00")

TAG_NAMES: Final[dict[int, str]] = {
    GAME_TURN: "GAME_TURN",
    GAME_SPEED: "GAME_SPEED",
    MAP_SIZE: "MAP_SIZE",
    MAP_FILE: "MAP_FILE",
    MOD_BLOCK: "MOD_BLOCK",
    MOD_ID: "MOD_ID",
    MOD_TITLE: "MOD_TITLE",
    ACTOR_NAME: "ACTOR_NAME",
    LEADER_NAME: "LEADER_NAME",
    ACTOR_TYPE: "ACTOR_TYPE",
    ACTOR_AI_HUMAN: "ACTOR_AI_HUMAN",
    ACTOR_DESCRIPTION: "ACTOR_DESCRIPTION",
    PLAYER_NAME: "PLAYER_NAME",
    PLAYER_PASSWORD: "PLAYER_PASSWORD",
    PLAYER_ALIVE: "PLAYER_ALIVE",
    IS_CURRENT_TURN: "IS_CURRENT_TURN",
    START_ACTOR: "START_ACTOR",
    ACTORS_END: "ACTORS_END",
    END_UNCOMPRESSED: "END_UNCOMPRESSED",
}

TAGS_BY_NAME: Final[dict[str, int]] = {name: tag for tag, name in TAG_NAMES.items()}

REQUIRED_NAMES: Final[frozenset[str]] = frozenset(
    {
        "GAME_TURN",
        "GAME_SPEED",
        "MAP_SIZE",
        "MAP_FILE",
        "PLAYER_NAME",
        "PLAYER_ALIVE",
        "IS_CURRENT_TURN",
        "ACTOR_NAME",
        "LEADER_NAME",
        "ACTOR_TYPE",
        "START_ACTOR",
        "ACTORS_END",
        "END_UNCOMPRESSED",
    }
)


def check_schema(names: dict[int, str] = TAG_NAMES) -> None:
    if len(set(names.values())) != len(names):
        raise RuntimeError(f"tag table v{SCHEMA_VERSION} maps several tags to one name")
    missing = sorted(REQUIRED_NAMES - set(names.values()))
    if missing:
        raise RuntimeError(f"tag table v{SCHEMA_VERSION} missing names: {', '.join(missing)}")


check_schema()


def resolve(tag: int) -> str | None:
    return TAG_NAMES.get(int(tag))


def tag_key(tag: int) -> str:
    """Mapping key for a tag: its name when known, else the raw hex identifier."""
    name = TAG_NAMES.get(int(tag))
    if name is not None:
        return name
    return f"0x{int(tag):08X}"


__all__ = [
    "REQUIRED_NAMES",
    "SCHEMA_VERSION",
    "TAGS_BY_NAME",
    "TAG_NAMES",
    "check_schema",
    "resolve",
    "tag_key",
]
