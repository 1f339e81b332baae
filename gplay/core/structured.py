"""Narrowing helpers for untyped JSON and TOML payloads.

The Play API answers with plain JSON objects. These helpers validate shapes
at the boundary so the rest of the code works with typed values.
"""

from __future__ import annotations

import re
from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]

# ASCII digits only: isdigit() admits superscripts, int() admits "_" separators.
_INT64_STRING = re.compile(r"-?[0-9]+")


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    """Get an integer value.

    Google APIs encode int64 fields as decimal strings, so a string made of
    digits is accepted too. Booleans are rejected.
    """
    value = table.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT64_STRING.fullmatch(value.strip()):
        return int(value.strip())
    return None


def get_float(table: Mapping[str, object], key: str) -> float | None:
    value = table.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))
