from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Final

from construct import Const, ConstError, Struct

from .compressed import read_compressed_block
from .cursor import ByteCursor, UnexpectedEof
from .debug_log import parse_debug_log
from .errors import InvalidMagic
from .records import assemble
from .simplify import simplify

MAGIC: Final[bytes] = b"CIV6"

_FILE_HEADER = Struct(
    "magic" / Const(MAGIC),
)


@dataclass(frozen=True, slots=True)
class ParseOptions:
    simple: bool = False
    output_compressed: bool = False


@dataclass(frozen=True, slots=True)
class ParseResult:
    parsed: dict[str, Any]
    simple: dict[str, Any] | None = None
    compressed: bytes | None = None


def _resolve_options(
    options: ParseOptions | None,
    *,
    simple: bool | None,
    output_compressed: bool | None,
) -> ParseOptions:
    opts = options if options is not None else ParseOptions()
    overrides: dict[str, bool] = {}
    if simple is not None:
        overrides["simple"] = bool(simple)
    if output_compressed is not None:
        overrides["output_compressed"] = bool(output_compressed)
    if overrides:
        opts = replace(opts, **overrides)
    return opts


def parse(
    data: bytes | bytearray | memoryview,
    options: ParseOptions | None = None,
    *,
    simple: bool | None = None,
    output_compressed: bool | None = None,
) -> ParseResult:
    """Decode a save buffer into its typed tree.

    With `simple`, the plain-value projection is returned alongside it. With
    `output_compressed`, the inflated embedded payload is returned as well
    (`b""` when the save has none).

    Raises a `SaveParseError` subclass on fatal input problems.
    """
    opts = _resolve_options(options, simple=simple, output_compressed=output_compressed)
    cursor = ByteCursor(data)
    buffer = cursor.data

    try:
        cursor.parse_struct(_FILE_HEADER)
    except UnexpectedEof as exc:
        raise InvalidMagic("file is shorter than the header", offset=0) from exc
    except ConstError as exc:
        raise InvalidMagic(f"bad magic: {buffer[: len(MAGIC)]!r}", offset=0) from exc

    parse_debug_log(
        "parse_begin",
        size=len(buffer),
        simple=opts.simple,
        output_compressed=opts.output_compressed,
    )

    stream = assemble(cursor)

    compressed: bytes | None = None
    if opts.output_compressed:
        if stream.compressed_start is None:
            parse_debug_log("compressed_absent", offset=cursor.pos)
            compressed = b""
        else:
            compressed = read_compressed_block(buffer, stream.compressed_start).payload

    simple_tree = simplify(stream.tree) if opts.simple else None

    parse_debug_log(
        "parse_end",
        slots=len(stream.slots),
        civs=len(stream.tree["CIVS"]),
        actors=len(stream.tree["ACTORS"]),
    )
    return ParseResult(parsed=stream.tree, simple=simple_tree, compressed=compressed)


def parse_file(path: str | Path, options: ParseOptions | None = None, **overrides: Any) -> ParseResult:
    return parse(Path(path).read_bytes(), options, **overrides)


__all__ = [
    "MAGIC",
    "ParseOptions",
    "ParseResult",
    "parse",
    "parse_file",
]
