"""Tests for gplay.core.structured helpers."""

import pytest

from gplay.core.structured import (
    as_obj_list,
    as_str_dict,
    get_float,
    get_int,
    get_list,
    get_str,
    get_table,
    is_str_dict,
)


def test_is_str_dict() -> None:
    assert is_str_dict({"a": 1})
    assert not is_str_dict({1: "a"})
    assert not is_str_dict(["a"])


def test_as_str_dict_and_list() -> None:
    assert as_str_dict({"id": "e"}) == {"id": "e"}
    assert as_str_dict("nope") is None
    assert as_obj_list([1, 2]) == [1, 2]
    assert as_obj_list({"a": 1}) is None


def test_get_str_strips_and_rejects_empty() -> None:
    table: dict[str, object] = {"a": "  x ", "b": "   ", "c": 3}
    assert get_str(table, "a") == "x"
    assert get_str(table, "b") is None
    assert get_str(table, "c") is None
    assert get_str(table, "missing") is None


def test_get_int_accepts_int64_strings() -> None:
    table: dict[str, object] = {"n": 5, "s": "42", "neg": "-3", "bad": "4x", "flag": True}
    assert get_int(table, "n") == 5
    assert get_int(table, "s") == 42
    assert get_int(table, "neg") == -3
    assert get_int(table, "bad") is None
    assert get_int(table, "flag") is None


@pytest.mark.parametrize("raw", ["\u00b2", "--5", "1_000", "\u0663", "", "-"])
def test_get_int_rejects_malformed_strings(raw: str) -> None:
    assert get_int({"n": raw}, "n") is None


def test_get_float() -> None:
    table: dict[str, object] = {"i": 300, "f": 1.5, "s": "2", "b": False}
    assert get_float(table, "i") == 300.0
    assert get_float(table, "f") == 1.5
    assert get_float(table, "s") is None
    assert get_float(table, "b") is None


def test_get_table_and_list() -> None:
    table: dict[str, object] = {"t": {"k": "v"}, "l": [1], "x": 1}
    assert get_table(table, "t") == {"k": "v"}
    assert get_table(table, "x") is None
    assert get_list(table, "l") == [1]
    assert get_list(table, "t") is None
