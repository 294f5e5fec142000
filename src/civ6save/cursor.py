from __future__ import annotations

import struct
from typing import Any

from construct import Construct


class UnexpectedEof(Exception):
    """A read asked for more bytes than the buffer holds."""

    def __init__(self, offset: int, wanted: int, available: int) -> None:
        super().__init__(f"wanted {wanted} bytes at offset 0x{offset:x}, {available} available")
        self.offset = int(offset)
        self.wanted = int(wanted)
        self.available = int(available)


def truncate_at_null(raw: bytes) -> bytes:
    end = raw.find(b"\x00")
    if end < 0:
        return raw
    return raw[:end]


def decode_text(raw: bytes) -> str:
    return truncate_at_null(raw).decode("utf-8", errors="replace")


class ByteCursor:
    """Sequential little-endian reader over an immutable byte buffer.

    Every read advances by exactly the number of bytes it consumed. Reads that
    would run past the end raise `UnexpectedEof` and leave the position untouched.
    """

    def __init__(self, data: bytes | bytearray | memoryview, pos: int = 0) -> None:
        self._data = bytes(data)
        self._pos = 0
        self.seek(pos)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def pos(self) -> int:
        return self._pos

    def __len__(self) -> int:
        return len(self._data)

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def seek(self, offset: int) -> None:
        offset = int(offset)
        if offset < 0 or offset > len(self._data):
            raise UnexpectedEof(offset, 0, len(self._data))
        self._pos = offset

    def skip(self, count: int) -> None:
        self._require(count)
        self._pos += int(count)

    def _require(self, count: int) -> None:
        available = self.remaining()
        if count < 0 or count > available:
            raise UnexpectedEof(self._pos, count, available)

    def peek(self, count: int = 1) -> bytes:
        self._require(count)
        return self._data[self._pos : self._pos + count]

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        start = self._pos
        self._pos += count
        return self._data[start : self._pos]

    def _unpack(self, fmt: str) -> Any:
        size = struct.calcsize(fmt)
        self._require(size)
        value = struct.unpack_from(fmt, self._data, self._pos)[0]
        self._pos += size
        return value

    def read_u8(self) -> int:
        return self._unpack("<B")

    def read_u16(self) -> int:
        return self._unpack("<H")

    def read_u32(self) -> int:
        return self._unpack("<I")

    def read_u64(self) -> int:
        return self._unpack("<Q")

    def read_i32(self) -> int:
        return self._unpack("<i")

    def read_i64(self) -> int:
        return self._unpack("<q")

    def read_f32(self) -> float:
        return self._unpack("<f")

    def read_uint(self, width: int) -> int:
        return int.from_bytes(self.read_bytes(width), "little")

    def read_bool(self, width: int = 4) -> bool:
        return self.read_uint(width) != 0

    def read_fixed_string(self, length: int) -> str:
        return decode_text(self.read_bytes(length))

    def read_length_prefixed_string(self, prefix_width: int, *, header_size: int | None = None) -> str:
        """Read a `prefix_width`-byte length followed by that many string bytes.

        `header_size` covers headers wider than the length itself; the extra
        header bytes are consumed and ignored. Output stops at the first null.
        """
        size = prefix_width if header_size is None else header_size
        start = self._pos
        header = self.read_bytes(size)
        length = int.from_bytes(header[:prefix_width], "little")
        try:
            return self.read_fixed_string(length)
        except UnexpectedEof:
            self._pos = start
            raise

    def parse_struct(self, fmt: Construct) -> Any:
        size = fmt.sizeof()
        value = fmt.parse(self.peek(size))
        self._pos += size
        return value


__all__ = [
    "ByteCursor",
    "UnexpectedEof",
    "decode_text",
    "truncate_at_null",
]
