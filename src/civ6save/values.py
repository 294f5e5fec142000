from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, TypeAlias

from construct import Byte, Bytes, Int32ul, Struct

from .cursor import ByteCursor, UnexpectedEof
from .debug_log import parse_debug_log
from .errors import MalformedEntry, MalformedRecord
from .tags import resolve, tag_key


class ValueType(Enum):
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    BOOL = "bool"
    FLOAT = "float"
    STRING = "string"
    STRING_LEN3 = "string_len3"
    RECORD_ARRAY = "record_array"
    END_MARKER = "end_marker"


# Wire type codes. Strings share one code; the width code in the string
# header decides between STRING and STRING_LEN3.
TYPE_CODES: Final[dict[int, ValueType]] = {
    0x00: ValueType.END_MARKER,
    0x01: ValueType.BOOL,
    0x02: ValueType.INT32,
    0x03: ValueType.UINT32,
    0x04: ValueType.INT64,
    0x05: ValueType.STRING,
    0x06: ValueType.FLOAT,
    0x0B: ValueType.RECORD_ARRAY,
}

STRING_WIDTHS: Final[dict[int, ValueType]] = {
    2: ValueType.STRING,
    3: ValueType.STRING_LEN3,
}

ENTRY_HEADER = Struct(
    "tag" / Int32ul,
    "type_code" / Int32ul,
)

STRING_HEADER = Struct(
    "length" / Bytes(3),
    "width_code" / Byte,
)

END_ENTRY_SIZE: Final[int] = ENTRY_HEADER.sizeof()
MAX_RECORD_DEPTH: Final[int] = 64

Record: TypeAlias = dict[str, "TypedNode"]
Value: TypeAlias = "bool | int | float | str | tuple[Record, ...] | None"


@dataclass(frozen=True, slots=True)
class TypedNode:
    tag: int
    name: str | None
    type: ValueType
    data: Value
    offset: int

    @property
    def key(self) -> str:
        return tag_key(self.tag)


def _read_string(cursor: ByteCursor, offset: int) -> tuple[ValueType, str]:
    header = STRING_HEADER.parse(cursor.peek(STRING_HEADER.sizeof()))
    width = int(header.width_code) & 0x0F
    value_type = STRING_WIDTHS.get(width)
    if value_type is None:
        raise MalformedEntry(f"unsupported string length width {width}", offset=offset)
    if value_type is ValueType.STRING_LEN3:
        parse_debug_log("string_len3", offset=offset)
    text = cursor.read_length_prefixed_string(width, header_size=STRING_HEADER.sizeof())
    return value_type, text


def _read_record_array(cursor: ByteCursor, offset: int, depth: int) -> tuple[Record, ...]:
    if depth >= MAX_RECORD_DEPTH:
        raise MalformedRecord(f"record arrays nested deeper than {MAX_RECORD_DEPTH} levels", offset=offset)
    count = cursor.read_u32()
    if count * END_ENTRY_SIZE > cursor.remaining():
        raise MalformedRecord(
            f"record array declares {count} elements, only {cursor.remaining()} bytes remain",
            offset=offset,
        )
    records: list[Record] = []
    try:
        for _ in range(count):
            records.append(read_record(cursor, depth=depth + 1))
    except UnexpectedEof as exc:
        raise MalformedRecord(
            f"record array element {len(records)} of {count} runs past the end of the buffer",
            offset=exc.offset,
        ) from exc
    return tuple(records)


def read_entry(cursor: ByteCursor, *, depth: int = 0) -> TypedNode:
    """Decode one tagged entry at the cursor.

    Raises `UnexpectedEof` when the entry is cut short; the caller decides how
    fatal that is.
    """
    offset = cursor.pos
    header = cursor.parse_struct(ENTRY_HEADER)
    tag = int(header.tag)
    code = int(header.type_code)
    value_type = TYPE_CODES.get(code)
    if value_type is None:
        raise MalformedEntry(f"unknown type code 0x{code:x} for tag {tag_key(tag)}", offset=offset)

    name = resolve(tag)
    if name is None:
        parse_debug_log("unknown_tag", tag=tag_key(tag), type=value_type.value, offset=offset)

    data: Value
    match value_type:
        case ValueType.END_MARKER:
            data = None
        case ValueType.BOOL:
            data = cursor.read_bool()
        case ValueType.INT32:
            data = cursor.read_i32()
        case ValueType.UINT32:
            data = cursor.read_u32()
        case ValueType.INT64:
            data = cursor.read_i64()
        case ValueType.FLOAT:
            data = cursor.read_f32()
        case ValueType.STRING | ValueType.STRING_LEN3:
            value_type, data = _read_string(cursor, offset)
        case ValueType.RECORD_ARRAY:
            data = _read_record_array(cursor, offset, depth)

    return TypedNode(tag=tag, name=name, type=value_type, data=data, offset=offset)


def read_record(cursor: ByteCursor, *, depth: int = 0) -> Record:
    """Read entries up to and including the next end marker."""
    record: Record = {}
    while True:
        node = read_entry(cursor, depth=depth)
        if node.type is ValueType.END_MARKER:
            return record
        record[node.key] = node


def iter_entries(cursor: ByteCursor) -> Iterator[TypedNode]:
    while not cursor.at_end():
        yield read_entry(cursor)


__all__ = [
    "END_ENTRY_SIZE",
    "ENTRY_HEADER",
    "MAX_RECORD_DEPTH",
    "Record",
    "STRING_HEADER",
    "STRING_WIDTHS",
    "TYPE_CODES",
    "TypedNode",
    "Value",
    "ValueType",
    "iter_entries",
    "read_entry",
    "read_record",
]
