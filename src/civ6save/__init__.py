from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("civ6save")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

from .errors import (
    DecompressionFailure,
    InvalidMagic,
    MalformedEntry,
    MalformedRecord,
    SaveParseError,
    TruncatedInput,
)
from .parse import ParseOptions, ParseResult, parse, parse_file
from .simplify import simplify
from .values import TypedNode, ValueType

__all__ = [
    "DecompressionFailure",
    "InvalidMagic",
    "MalformedEntry",
    "MalformedRecord",
    "ParseOptions",
    "ParseResult",
    "SaveParseError",
    "TruncatedInput",
    "TypedNode",
    "ValueType",
    "parse",
    "parse_file",
    "simplify",
]
