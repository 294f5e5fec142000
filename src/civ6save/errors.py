from __future__ import annotations


class SaveParseError(ValueError):
    """Fatal decode failure; no partial result is produced."""

    kind = "parse_error"

    def __init__(self, message: str, *, offset: int) -> None:
        super().__init__(message)
        self.message = message
        self.offset = int(offset)

    def __str__(self) -> str:
        return f"{self.kind} at offset 0x{self.offset:x}: {self.message}"


class InvalidMagic(SaveParseError):
    kind = "invalid_magic"


class TruncatedInput(SaveParseError):
    kind = "truncated_input"


class MalformedEntry(SaveParseError):
    kind = "malformed_entry"


class MalformedRecord(SaveParseError):
    kind = "malformed_record"


class DecompressionFailure(SaveParseError):
    kind = "decompression_failure"


__all__ = [
    "DecompressionFailure",
    "InvalidMagic",
    "MalformedEntry",
    "MalformedRecord",
    "SaveParseError",
    "TruncatedInput",
]
