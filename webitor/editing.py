"""
Webitor: Edit Tracker

Toggles inline editing on every node the renderer tagged editable and
writes edits back into the working snapshot when a node loses focus.

States: disabled → enabled → disabled. Enabling and disabling both query
the document at the time of the call, so nodes added by container
re-renders in between are covered.
"""

from __future__ import annotations

import logging
from typing import Any

from webitor.document import DocumentAdapter
from webitor.store import SnapshotStore
from webitor.types import ATTR_EDITABLE, ATTR_PATH, EDITABLE_CLASS

logger = logging.getLogger(__name__)

EDITABLE_SELECTOR = f'[{ATTR_EDITABLE}="true"]'
BLUR = "blur"


class EditTracker:
    def __init__(self, document: DocumentAdapter, store: SnapshotStore) -> None:
        self._doc = document
        self._store = store
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> int:
        """Make every editable node content-editable. Returns the node count."""
        self._enabled = True
        nodes = self._doc.find_all(EDITABLE_SELECTOR)
        for el in nodes:
            self._activate(el)
        logger.info("editing: enabled on %d nodes", len(nodes))
        return len(nodes)

    def disable(self) -> int:
        self._enabled = False
        nodes = self._doc.find_all(EDITABLE_SELECTOR)
        for el in nodes:
            self._doc.set_attribute(el, "contenteditable", "false")
            self._doc.remove_class(el, EDITABLE_CLASS)
            self._doc.remove_listener(el, BLUR, self._on_blur)
        logger.info("editing: disabled on %d nodes", len(nodes))
        return len(nodes)

    def activate_within(self, container: Any) -> int:
        """
        After a container re-render, switch on the freshly inserted nodes.
        Only the container's descendants are touched. No-op while disabled.
        """
        if not self._enabled:
            return 0
        nodes = self._doc.find_all(EDITABLE_SELECTOR, container)
        for el in nodes:
            self._activate(el)
        return len(nodes)

    def _activate(self, el: Any) -> None:
        self._doc.set_attribute(el, "contenteditable", "true")
        self._doc.add_class(el, EDITABLE_CLASS)
        self._doc.add_listener(el, BLUR, self._on_blur)

    def _on_blur(self, el: Any) -> None:
        path = self._doc.get_attribute(el, ATTR_PATH)
        if not path:
            return
        value = self._doc.get_text(el).strip()
        self._store.assign(path, value)
        logger.info("editing: updated %s to %r", path, value)
