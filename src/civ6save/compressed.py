from __future__ import annotations

"""
Embedded compressed segment.

Layout after the END_UNCOMPRESSED marker:
  - u32 size word for the first chunk (ignored)
  - zlib stream split into 64 KiB chunks; each later chunk is preceded by
    another 4-byte size word that is not part of the stream
  - the stream stops at the first sync-flush marker (00 00 FF FF), or at the
    end of the file when the marker is missing

The stream is usually not finished with a final deflate block, so inflation
accepts a truncated tail. Only the data up to the first sync flush is
recovered: a writer that flushes several times leaves later blocks after the
segment end, and they are not inflated.
"""

import zlib
from dataclasses import dataclass
from typing import Final

from .cursor import ByteCursor
from .debug_log import parse_debug_log
from .errors import DecompressionFailure

CHUNK_SIZE: Final[int] = 64 * 1024
CHUNK_PREFIX_SIZE: Final[int] = 4
SYNC_FLUSH_MARKER: Final[bytes] = b"\x00\x00\xff\xff"


@dataclass(frozen=True, slots=True)
class CompressedSegment:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def raw(self, data: bytes) -> bytes:
        return bytes(data[self.start : self.end])


@dataclass(frozen=True, slots=True)
class CompressedBlock:
    segment: CompressedSegment | None
    payload: bytes = b""

    @property
    def present(self) -> bool:
        return self.segment is not None

    def cursor(self) -> ByteCursor:
        return ByteCursor(self.payload)


def _is_zlib_header(cmf: int, flg: int) -> bool:
    return (cmf & 0x0F) == 8 and ((cmf << 8) | flg) % 31 == 0


def locate(data: bytes, start: int) -> CompressedSegment | None:
    body = int(start) + CHUNK_PREFIX_SIZE
    if body + 2 > len(data):
        return None
    if not _is_zlib_header(data[body], data[body + 1]):
        return None
    marker = data.find(SYNC_FLUSH_MARKER, body)
    end = len(data) if marker < 0 else marker + len(SYNC_FLUSH_MARKER)
    return CompressedSegment(start=body, end=end)


def deframe(raw: bytes) -> bytes:
    chunks: list[bytes] = []
    pos = 0
    while pos < len(raw):
        chunks.append(raw[pos : pos + CHUNK_SIZE])
        pos += CHUNK_SIZE + CHUNK_PREFIX_SIZE
    return b"".join(chunks)


def inflate(data: bytes, segment: CompressedSegment) -> bytes:
    stream = deframe(segment.raw(data))
    try:
        return zlib.decompressobj().decompress(stream)
    except zlib.error as exc:
        raise DecompressionFailure(f"cannot inflate compressed segment: {exc}", offset=segment.start) from exc


def read_compressed_block(data: bytes, start: int) -> CompressedBlock:
    segment = locate(data, start)
    if segment is None:
        parse_debug_log("compressed_absent", offset=int(start))
        return CompressedBlock(segment=None)
    payload = inflate(data, segment)
    parse_debug_log(
        "compressed_inflated",
        offset=segment.start,
        compressed_size=len(segment),
        inflated_size=len(payload),
    )
    return CompressedBlock(segment=segment, payload=payload)


__all__ = [
    "CHUNK_PREFIX_SIZE",
    "CHUNK_SIZE",
    "CompressedBlock",
    "CompressedSegment",
    "SYNC_FLUSH_MARKER",
    "deframe",
    "inflate",
    "locate",
    "read_compressed_block",
]
