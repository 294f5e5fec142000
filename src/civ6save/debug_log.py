from __future__ import annotations

import datetime as dt
import os
from pathlib import Path
from threading import Lock

from .tags import SCHEMA_VERSION


_TRACE_LOCK = Lock()
_TRACE_PATH: Path | None = None


def _format_value(value: object) -> str:
    text = str(value)
    return text.replace("\n", "\\n")


def _format_fields(fields: dict[str, object]) -> str:
    parts: list[str] = []
    for key in sorted(fields):
        parts.append(f"{key}={_format_value(fields[key])}")
    return " ".join(parts)


def parse_debug_log_path() -> Path | None:
    with _TRACE_LOCK:
        return _TRACE_PATH


def init_parse_debug_log(path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with _TRACE_LOCK:
        global _TRACE_PATH
        _TRACE_PATH = path

    parse_debug_log("init", pid=int(os.getpid()), schema=SCHEMA_VERSION)
    return path


def parse_debug_log(event: str, **fields: object) -> None:
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds")
    payload = _format_fields(fields)
    line = f"{timestamp} event={str(event).strip()}"
    if payload:
        line += f" {payload}"
    line += "\n"

    with _TRACE_LOCK:
        if _TRACE_PATH is None:
            return
        with _TRACE_PATH.open("a", encoding="utf-8") as handle:
            handle.write(line)


def close_parse_debug_log() -> None:
    with _TRACE_LOCK:
        global _TRACE_PATH
        _TRACE_PATH = None


__all__ = [
    "close_parse_debug_log",
    "init_parse_debug_log",
    "parse_debug_log",
    "parse_debug_log_path",
]
