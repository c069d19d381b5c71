"""
Webitor: Snapshot Store

Holds the pristine original and the mutable working snapshot of one
content file. The working snapshot starts as a deep copy of the original
and the two never share structure. The original is not handed out for
mutation; every write goes to the working data through the path resolver.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from webitor import paths
from webitor.types import Snapshot, WebitorError

logger = logging.getLogger(__name__)


class SnapshotNotLoaded(WebitorError):
    """The store was used before a content file was loaded."""

    pass


class SnapshotStore:
    def __init__(self) -> None:
        self._original: Snapshot | None = None
        self._working: Snapshot | None = None

    @property
    def is_loaded(self) -> bool:
        return self._working is not None

    def load(self, source_id: str, document: dict[str, Any]) -> Snapshot:
        """
        Take a parsed content file ({...metadata, data}) as the new original
        and start a fresh working copy. Returns the working snapshot.
        """
        original = Snapshot.from_document(source_id, copy.deepcopy(document))
        self._original = original
        self._working = original.clone()
        logger.info("store: loaded %s", source_id)
        return self._working

    def require_loaded(self) -> None:
        if self._original is None or self._working is None:
            raise SnapshotNotLoaded("No content file has been loaded")

    @property
    def original(self) -> Snapshot:
        self.require_loaded()
        return self._original

    @property
    def working(self) -> Snapshot:
        self.require_loaded()
        return self._working

    def resolve(self, path: str) -> Any:
        return paths.resolve(self.working.data, path)

    def assign(self, path: str, value: Any) -> None:
        paths.assign(self.working.data, path, value)
