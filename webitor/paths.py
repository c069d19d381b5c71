"""
Webitor: Path Resolver

Dotted paths with optional bracket indices over a JSON value tree.

  "title"                   → ["title"]
  "articles[2].headline"    → ["articles", 2, "headline"]
  "articles.2.paragraphs.0" → ["articles", 2, "paragraphs", 0]
  "grid[1][3]"              → ["grid", 1, 3]

A segment made only of digits is always an array index, even when the
container is a mapping that has a key with the same digits.

resolve() never raises: a missing step short-circuits to UNDEFINED.
assign() never creates structure: a missing step raises TraversalError.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Union

from webitor.types import UNDEFINED, WebitorError

Token = Union[str, int]

_BRACKET_SEGMENT = re.compile(r"^([^\[\]]+)((?:\[\d+\])+)$")
_INDEX = re.compile(r"\[(\d+)\]")
_NUMERIC = re.compile(r"^\d+$")


class TraversalError(WebitorError):
    """assign() met a missing or wrongly typed container along the path."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1024)
def _parse(path: str) -> tuple[Token, ...]:
    tokens: list[Token] = []
    for segment in path.split("."):
        match = _BRACKET_SEGMENT.match(segment)
        if match:
            tokens.append(match.group(1))
            tokens.extend(int(i) for i in _INDEX.findall(match.group(2)))
        elif _NUMERIC.match(segment):
            tokens.append(int(segment))
        else:
            tokens.append(segment)
    return tuple(tokens)


def parse_path(path: str) -> list[Token]:
    """Split a path into mapping keys (str) and array indices (int)."""
    return list(_parse(path))


def compose(base: str, path: str) -> str:
    """Join a base path and a relative path: compose("a[0]", "b") → "a[0].b"."""
    if not base:
        return path
    if not path:
        return base
    return f"{base}.{path}"


def item_path(array_path: str, index: int) -> str:
    return f"{array_path}[{index}]"


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def _step(current: Any, token: Token) -> Any:
    if isinstance(token, int):
        if isinstance(current, list) and token < len(current):
            return current[token]
        return UNDEFINED
    if isinstance(current, dict):
        return current.get(token, UNDEFINED)
    return UNDEFINED


def resolve(root: Any, path: str) -> Any:
    """
    Evaluate a path against root. Returns UNDEFINED when any step along
    the way is missing, null, or the wrong shape.
    """
    current = root
    for token in _parse(path):
        if current is None or current is UNDEFINED:
            return UNDEFINED
        current = _step(current, token)
    return current


def _describe(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, dict):
        return "an object"
    return type(value).__name__


def assign(root: Any, path: str, value: Any) -> None:
    """
    Write value at path. Every container along the path must already exist.

    The last step writes by index when it is numeric (the index may equal
    the array length, which appends) and by key otherwise.
    """
    tokens = _parse(path)
    target = root
    for depth, token in enumerate(tokens[:-1]):
        nxt = _step(target, token)
        if nxt is UNDEFINED or nxt is None:
            walked = ".".join(str(t) for t in tokens[: depth + 1])
            raise TraversalError(path, f"cannot read {walked!r} of {_describe(target)}")
        target = nxt

    last = tokens[-1]
    if isinstance(last, int):
        if not isinstance(target, list):
            raise TraversalError(path, f"cannot set index {last} on {_describe(target)}")
        if last < len(target):
            target[last] = value
        elif last == len(target):
            target.append(value)
        else:
            raise TraversalError(path, f"index {last} is past the end (length {len(target)})")
        return

    if not isinstance(target, dict):
        raise TraversalError(path, f"cannot set key {last!r} on {_describe(target)}")
    target[last] = value
