"""
Webitor: Component

One editable page bound to one content file. Coordinates the snapshot
store, renderer, edit tracker, and diff engine, and exposes the
programmatic API the host extension drives:

  initialize, load, get_changes, enable_editing, disable_editing,
  update_value, get_current_snapshot, replace_array, insert_array_item

Each component owns its own state. Several components can live side by
side (one per content file); a failed load only affects its own page.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from webitor.config import Settings
from webitor.config import settings as default_settings
from webitor.diff import diff
from webitor.document import DocumentAdapter
from webitor.editing import EditTracker
from webitor.loader import ContentLoader, LoadFailure
from webitor.models import ChangeSet
from webitor.renderer import NotAnArray, TemplateRenderer
from webitor.store import SnapshotStore
from webitor.types import ChangeRecord, Snapshot, Warning

logger = logging.getLogger(__name__)


class WebitorComponent:
    def __init__(
        self,
        document: DocumentAdapter,
        *,
        settings: Settings | None = None,
        loader: ContentLoader | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._doc = document
        self._store = SnapshotStore()
        self._renderer = TemplateRenderer(document, cache_bust=self._settings.CACHE_BUST, clock=clock)
        self._tracker = EditTracker(document, self._store)
        self._loader = loader or ContentLoader(self._settings, clock=clock)
        self.warnings: list[Warning] = []

    # -- lifecycle --

    async def initialize(self, content_url: str) -> bool:
        """
        Fetch the content file and paint the page.
        On failure the error is logged, nothing is rendered, and False is returned.
        """
        logger.info("component: initializing with data file %s", content_url)
        try:
            document = await self._loader.fetch(content_url)
        except LoadFailure:
            logger.exception("component: error initializing %s", content_url)
            return False
        self.load(content_url, document)
        return True

    def load(self, source_id: str, document: dict[str, Any]) -> list[Warning]:
        """Render from an already parsed content file."""
        self._store.load(source_id, document)
        self.warnings = self._renderer.render_page(self._store.working.data)
        return self.warnings

    @property
    def is_loaded(self) -> bool:
        return self._store.is_loaded

    @property
    def is_editing(self) -> bool:
        return self._tracker.enabled

    # -- editing --

    def enable_editing(self) -> None:
        self._store.require_loaded()
        self._tracker.enable()

    def disable_editing(self) -> None:
        self._store.require_loaded()
        self._tracker.disable()

    def set_editing(self, enabled: bool) -> None:
        if enabled:
            self.enable_editing()
        else:
            self.disable_editing()

    def update_value(self, path: str, value: Any) -> None:
        """Write a value into the working data. The page is not re-rendered."""
        self._store.assign(path, value)
        logger.info("component: programmatically updated %s to %r", path, value)

    def replace_array(self, path: str, new_array: list[Any]) -> list[Warning]:
        """Swap the whole array at path and regenerate its container."""
        if not isinstance(new_array, list):
            raise NotAnArray(path)
        self._store.assign(path, new_array)
        logger.info("component: replaced array at %s (%d items)", path, len(new_array))
        return self._rerender(path)

    def insert_array_item(self, path: str, item: Any) -> list[Warning]:
        """Put item at the front of the array at path and regenerate its container."""
        current = self._store.resolve(path)
        if not isinstance(current, list):
            raise NotAnArray(path)
        current.insert(0, item)
        logger.info("component: inserted item at front of %s", path)
        return self._rerender(path)

    def _rerender(self, path: str) -> list[Warning]:
        container = self._renderer.find_container(path)
        if container is None:
            logger.warning("component: could not find container for array path %s", path)
            return [
                Warning(
                    code="container_not_found",
                    message=f"Could not find container for array path: {path}",
                    details={"path": path},
                )
            ]
        warnings = self._renderer.render_container(container, self._store.working.data)
        self._tracker.activate_within(container)
        return warnings

    # -- reading back --

    def get_current_snapshot(self) -> Snapshot:
        return self._store.working

    def diff(self) -> list[ChangeRecord]:
        return diff(self._store.original.data, self._store.working.data)

    def get_changes(self) -> ChangeSet:
        """The changelist plus a copy of the full working document."""
        changes = self.diff()
        logger.info("component: %d changes detected", len(changes))
        working = self._store.working
        return ChangeSet(
            dataFile=working.source_id,
            changes=[c.to_dict() for c in changes],
            updatedData=copy.deepcopy(working.to_document()),
        )
