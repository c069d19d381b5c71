"""
Webitor: Template Renderer

(document, data) → painted document + list[Warning]

One render pass:
  1. Plain bindings outside repeated containers (data-bind, data-bind-href,
     data-bind-src) are resolved against the root data and written into
     the document. Text and src bindings are tagged editable with their path.
  2. Every repeated container (data-repeat) is expanded: all children but
     the template are removed, then one clone of the template is inserted
     per array element, bound against the element with base path
     "arrayPath[i]".

Nothing is kept between passes. Containers are regenerated from scratch,
never patched. A broken container produces a Warning and is skipped; the
rest of the page still renders.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from webitor.document import DocumentAdapter
from webitor.paths import compose, item_path, resolve
from webitor.types import (
    ARRAY_EDIT_BUTTON_CLASS,
    ATTR_BIND,
    ATTR_BIND_HREF,
    ATTR_BIND_HTML,
    ATTR_BIND_SRC,
    ATTR_EDITABLE,
    ATTR_EDITABLE_IMAGE,
    ATTR_ID_BIND,
    ATTR_ITEM_ID,
    ATTR_PATH,
    ATTR_REPEAT,
    ATTR_TEMPLATE,
    DATA_URL_PREFIX,
    UNDEFINED,
    Warning,
    WebitorError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class NotAnArray(WebitorError):
    """A repeated container (or an array operation) points at a non-array."""

    code = "not_an_array"

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} is not an array")
        self.path = path


class MissingTemplate(WebitorError):
    """A repeated container has no <template data-template> child."""

    code = "missing_template"

    def __init__(self, path: str) -> None:
        super().__init__(f"No template found for {path}")
        self.path = path


# ---------------------------------------------------------------------------
# Value formatting
# ---------------------------------------------------------------------------


def to_text(value: Any) -> str:
    """Format a JSON value for text content or an attribute."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _now_ms() -> int:
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    def __init__(
        self,
        document: DocumentAdapter,
        *,
        cache_bust: bool = True,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._doc = document
        self._cache_bust = cache_bust
        self._clock = clock or _now_ms

    # -- public API --

    def render_page(self, data: Any) -> list[Warning]:
        """Paint plain bindings, then expand every repeated container."""
        containers = self._doc.find_all(f"[{ATTR_REPEAT}]")
        self._render_plain_bindings(data, containers)

        warnings: list[Warning] = []
        for container in containers:
            warnings.extend(self.render_container(container, data))
        return warnings

    def render_container(self, container: Any, data: Any) -> list[Warning]:
        """
        Regenerate one repeated container from the current data.
        Used by render_page and after array mutations.
        """
        array_path = self._doc.get_attribute(container, ATTR_REPEAT) or ""
        try:
            count = self._expand(container, array_path, data)
        except (NotAnArray, MissingTemplate) as e:
            logger.warning("renderer: %s", e)
            return [Warning(code=e.code, message=str(e), details={"path": array_path})]

        logger.info("renderer: rendered %d items for %s", count, array_path)
        return []

    def find_container(self, array_path: str) -> Any | None:
        for container in self._doc.find_all(f"[{ATTR_REPEAT}]"):
            if self._doc.get_attribute(container, ATTR_REPEAT) == array_path:
                return container
        return None

    # -- plain bindings --

    def _render_plain_bindings(self, data: Any, containers: list[Any]) -> None:
        # Bound nodes inside repeated containers belong to their item, not the root.
        inside: set[int] = set()
        for container in containers:
            inside.update(id(n) for n in self._doc.find_all(f"[{ATTR_BIND}]", container))
            inside.update(id(n) for n in self._doc.find_all(f"[{ATTR_BIND_HREF}]", container))
            inside.update(id(n) for n in self._doc.find_all(f"[{ATTR_BIND_SRC}]", container))

        def top_level(selector: str) -> list[Any]:
            return [n for n in self._doc.find_all(selector) if id(n) not in inside]

        for el in top_level(f"[{ATTR_BIND}]"):
            self._bind_text(el, data, "")

        for el in top_level(f"[{ATTR_BIND_HREF}]"):
            path = self._doc.get_attribute(el, ATTR_BIND_HREF) or ""
            value = resolve(data, path)
            if value is not UNDEFINED:
                self._doc.set_attribute(el, "href", to_text(value))

        for el in top_level(f"[{ATTR_BIND_SRC}]"):
            self._bind_src(el, data, "")

    # -- repeated containers --

    def _template_of(self, container: Any) -> Any | None:
        for child in self._doc.children(container):
            if (
                self._doc.tag_name(child) == "template"
                and self._doc.get_attribute(child, ATTR_TEMPLATE) is not None
            ):
                return child
        return None

    def _expand(self, container: Any, array_path: str, data: Any) -> int:
        items = resolve(data, array_path)
        if not isinstance(items, list):
            raise NotAnArray(array_path)

        template = self._template_of(container)
        if template is None:
            raise MissingTemplate(array_path)

        for child in self._doc.child_nodes(container):
            if child is template or self._doc.has_class(child, ARRAY_EDIT_BUTTON_CLASS):
                continue
            self._doc.remove(child)

        for index, item in enumerate(items):
            fragment = self._doc.clone_template(template)
            self._bind_clone(fragment, item, item_path(array_path, index))
            self._doc.insert_before(container, fragment, template)

        return len(items)

    def _bind_clone(self, fragment: Any, item: Any, base: str) -> None:
        for el in self._doc.find_all(f"[{ATTR_BIND}]", fragment):
            self._bind_text(el, item, base)

        for el in self._doc.find_all(f"[{ATTR_BIND_HTML}]", fragment):
            self._bind_paragraphs(el, item, base)

        for el in self._doc.find_all(f"[{ATTR_BIND_SRC}]", fragment):
            self._bind_src(el, item, base)

        for el in self._doc.find_all(f"[{ATTR_ID_BIND}]", fragment):
            path = self._doc.get_attribute(el, ATTR_ID_BIND) or ""
            value = resolve(item, path)
            if value is not UNDEFINED:
                self._doc.set_attribute(el, ATTR_ITEM_ID, to_text(value))

    # -- binding kinds --

    def _bind_text(self, el: Any, data: Any, base: str) -> None:
        path = self._doc.get_attribute(el, ATTR_BIND) or ""
        value = resolve(data, path)
        if value is UNDEFINED:
            return

        # An <img> with a plain binding takes the value as its source.
        if self._doc.tag_name(el) == "img":
            self._write_src(el, value, compose(base, path))
            return

        self._doc.set_text(el, to_text(value))
        self._mark_editable(el, compose(base, path))

    def _bind_src(self, el: Any, data: Any, base: str) -> None:
        path = self._doc.get_attribute(el, ATTR_BIND_SRC) or ""
        value = resolve(data, path)
        if value is not UNDEFINED:
            self._write_src(el, value, compose(base, path))

    def _bind_paragraphs(self, el: Any, data: Any, base: str) -> None:
        path = self._doc.get_attribute(el, ATTR_BIND_HTML) or ""
        value = resolve(data, path)
        if value is UNDEFINED:
            return

        entries = value if isinstance(value, list) else [value]
        full_path = compose(base, path)
        self._doc.set_text(el, "")
        for entry in entries:
            p = self._doc.create_element("p")
            self._doc.set_text(p, to_text(entry))
            self._mark_editable(p, full_path)
            self._doc.append_child(el, p)

    def _write_src(self, el: Any, value: Any, full_path: str) -> None:
        self._doc.set_attribute(el, "src", self._cache_busted(to_text(value)))
        self._doc.set_attribute(el, ATTR_EDITABLE_IMAGE, "true")
        self._doc.set_attribute(el, ATTR_PATH, full_path)

    def _mark_editable(self, el: Any, full_path: str) -> None:
        self._doc.set_attribute(el, ATTR_EDITABLE, "true")
        self._doc.set_attribute(el, ATTR_PATH, full_path)

    def _cache_busted(self, url: str) -> str:
        if not self._cache_bust or url.startswith(DATA_URL_PREFIX):
            return url
        sep = "&" if "?" in url else "?"
        return f"{url}{sep}_={self._clock()}"
