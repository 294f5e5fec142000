from __future__ import annotations

from civ6save import parse, simplify
from civ6save.simplify import simplify_value
from civ6save.values import TypedNode, ValueType

import save_builder as sb


def test_simplify_matches_parse_simple_view() -> None:
    data = sb.mods_save()
    result = parse(data, simple=True)
    assert simplify(result.parsed) == result.simple


def test_simplify_unwraps_nodes_and_records() -> None:
    record = {"MOD_ID": TypedNode(tag=1, name="MOD_ID", type=ValueType.STRING, data="abc", offset=10)}
    array = TypedNode(tag=2, name="MOD_BLOCK", type=ValueType.RECORD_ARRAY, data=(record,), offset=0)
    assert simplify_value(array) == [{"MOD_ID": "abc"}]
    assert simplify({"X": array, "CIVS": [], "ACTORS": [record]}) == {
        "X": [{"MOD_ID": "abc"}],
        "CIVS": [],
        "ACTORS": [{"MOD_ID": "abc"}],
    }


def test_simplify_fills_missing_current_turn_for_civs_only() -> None:
    simple = parse(sb.cathy_save(), simple=True).simple
    assert simple is not None
    assert [civ["IS_CURRENT_TURN"] for civ in simple["CIVS"]] == [True, False, False, False]
    assert all("IS_CURRENT_TURN" not in actor for actor in simple["ACTORS"])


def test_simplify_does_not_mutate_typed_tree() -> None:
    result = parse(sb.cathy_save(), simple=True)
    assert "IS_CURRENT_TURN" not in result.parsed["CIVS"][1]
    assert isinstance(result.parsed["GAME_TURN"], TypedNode)
