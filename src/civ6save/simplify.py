from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from .values import TypedNode

# Optional record fields that the simplified view always carries.
ARRAY_FIELD_DEFAULTS: Final[dict[str, dict[str, Any]]] = {
    "CIVS": {"IS_CURRENT_TURN": False},
}


def simplify_value(value: Any) -> Any:
    if isinstance(value, TypedNode):
        return simplify_value(value.data)
    if isinstance(value, Mapping):
        return {key: simplify_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [simplify_value(item) for item in value]
    return value


def simplify(parsed: Mapping[str, Any]) -> dict[str, Any]:
    """Project a typed tree onto plain values.

    Nodes become their `.data`, records plain dicts and record arrays lists.
    A civ without IS_CURRENT_TURN gets it as False.
    """
    out: dict[str, Any] = {}
    for key, value in parsed.items():
        simple = simplify_value(value)
        defaults = ARRAY_FIELD_DEFAULTS.get(key)
        if defaults and isinstance(simple, list):
            simple = [{**defaults, **record} for record in simple]
        out[key] = simple
    return out


__all__ = [
    "ARRAY_FIELD_DEFAULTS",
    "simplify",
    "simplify_value",
]
