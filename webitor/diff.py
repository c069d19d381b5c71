"""
Webitor: Diff Engine

Pure function: (original, working) → list[ChangeRecord]

Walks the working value depth-first over its own keys. Keys that exist
only in the original are not reported. Arrays are compared whole and
produce a single "array" record; mappings are recursed into; everything
else is compared with JSON strict equality.

Records come out in the working value's key insertion order at each
level (array positions in index order).
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from webitor.paths import compose
from webitor.types import UNDEFINED, ChangeRecord

# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


def strict_equal(a: Any, b: Any) -> bool:
    """
    JSON strict equality for scalars: no coercion between kinds, so
    True != 1 and "1" != 1, while 2 == 2.0.
    """
    if a is UNDEFINED or b is UNDEFINED:
        return a is b
    if a is None or b is None:
        return a is b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality: arrays by position, mappings regardless of key order."""
    if isinstance(a, list) or isinstance(b, list):
        if not (isinstance(a, list) and isinstance(b, list)) or len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) or isinstance(b, dict):
        if not (isinstance(a, dict) and isinstance(b, dict)) or a.keys() != b.keys():
            return False
        return all(deep_equal(a[k], b[k]) for k in a)
    return strict_equal(a, b)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def diff(original: Any, working: Any) -> list[ChangeRecord]:
    """Compare working against original and return the changelist."""
    changes: list[ChangeRecord] = []
    _collect(original, working, "", changes)
    return changes


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _own_items(value: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(value, dict):
        yield from value.items()
    elif isinstance(value, list):
        for i, item in enumerate(value):
            yield str(i), item


def _child(value: Any, key: str) -> Any:
    if isinstance(value, dict):
        return value.get(key, UNDEFINED)
    if isinstance(value, list) and key.isdigit():
        i = int(key)
        return value[i] if i < len(value) else UNDEFINED
    return UNDEFINED


def _collect(original: Any, working: Any, path: str, changes: list[ChangeRecord]) -> None:
    for key, current in _own_items(working):
        current_path = compose(path, key)
        previous = _child(original, key)

        if isinstance(current, list):
            if not deep_equal(previous, current):
                changes.append(ChangeRecord(current_path, previous, current, "array"))
        elif isinstance(current, dict):
            _collect(previous if isinstance(previous, dict) else {}, current, current_path, changes)
        elif not strict_equal(previous, current):
            changes.append(ChangeRecord(current_path, previous, current, "value"))
