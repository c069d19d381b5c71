"""
Webitor: Shared Types

Data classes and constants used across the path resolver, renderer,
edit tracker, diff engine, and component. These are the contracts that
bind the engine together.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Literal

# ---------------------------------------------------------------------------
# Binding attributes (the page's wire format)
# ---------------------------------------------------------------------------

ATTR_BIND = "data-bind"
ATTR_BIND_HREF = "data-bind-href"
ATTR_BIND_SRC = "data-bind-src"
ATTR_BIND_HTML = "data-bind-html"
ATTR_ID_BIND = "data-id-bind"
ATTR_REPEAT = "data-repeat"
ATTR_TEMPLATE = "data-template"

ATTR_EDITABLE = "data-editable"
ATTR_EDITABLE_IMAGE = "data-editable-image"
ATTR_PATH = "data-path"
ATTR_ITEM_ID = "data-item-id"

EDITABLE_CLASS = "webitor-editable"
ARRAY_EDIT_BUTTON_CLASS = "webitor-array-edit-button"

DATA_URL_PREFIX = "data:"


# ---------------------------------------------------------------------------
# The undefined sentinel
# ---------------------------------------------------------------------------


class _Undefined:
    """
    Marks "no value here", distinct from JSON null (None).
    Returned by resolve() for missing locations and carried as the old value
    of a change record for keys absent from the original.
    """

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict) -> _Undefined:
        return self


UNDEFINED = _Undefined()


def is_undefined(value: Any) -> bool:
    return value is UNDEFINED


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class WebitorError(Exception):
    """Base class for every error the engine raises."""

    pass


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class Snapshot:
    """
    A JSON value plus the identity of the content file it came from.

    `meta` holds every top-level member of the content file other than
    `data`, so the document can be written back intact.
    """

    source_id: str
    data: Any
    meta: dict[str, Any] = field(default_factory=dict)

    def clone(self) -> Snapshot:
        return Snapshot(
            source_id=self.source_id,
            data=copy.deepcopy(self.data),
            meta=copy.deepcopy(self.meta),
        )

    def to_document(self) -> dict[str, Any]:
        """The content-file shape: {...metadata, data}."""
        doc = dict(self.meta)
        doc["data"] = self.data
        return doc

    @classmethod
    def from_document(cls, source_id: str, doc: dict[str, Any]) -> Snapshot:
        meta = {k: v for k, v in doc.items() if k != "data"}
        return cls(source_id=source_id, data=doc.get("data"), meta=meta)


ChangeKind = Literal["value", "array"]


@dataclass
class ChangeRecord:
    """One detected difference between the original and working data."""

    path: str
    old_value: Any
    new_value: Any
    kind: ChangeKind

    def to_dict(self) -> dict[str, Any]:
        """Wire form. Values are copied so the record never aliases snapshot data."""
        # An undefined old value is dropped, the way JSON serialization drops it.
        d: dict[str, Any] = {"path": self.path}
        if not is_undefined(self.old_value):
            d["oldValue"] = copy.deepcopy(self.old_value)
        d["newValue"] = copy.deepcopy(self.new_value)
        d["kind"] = self.kind
        return d


@dataclass
class Warning:
    """A non-fatal issue encountered during rendering."""

    code: str
    message: str
    details: dict[str, Any] | None = None
