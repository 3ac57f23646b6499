"""Recursive merge of JSON-shaped state fragments."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, TypeAlias

JsonValue: TypeAlias = dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
JsonObject: TypeAlias = dict[str, JsonValue]


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> JsonObject:
    """Return the deep union of *base* and *patch*.

    Objects merge key by key; any other value in *patch* (arrays included)
    replaces the value in *base*.  Keys absent from *patch* keep their base
    value.  Neither argument is mutated and the result shares no containers
    with them.
    """
    merged: JsonObject = copy.deepcopy(dict(base))
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
