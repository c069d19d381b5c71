"""
Webitor: Document Adapter

The renderer and edit tracker never touch a DOM directly. They go through
a DocumentAdapter, which exposes the handful of capabilities they need:
querying, text and attribute writes, template cloning, insertion, removal,
class toggling, and focus-loss listeners.

MemoryDocument implements the adapter over a small in-memory node tree,
so pages can be rendered and edited headlessly (tests, the CLI). It
follows browser semantics where the engine depends on them:
  - <template> children are inert content: queries do not descend into them
  - querying from a node matches descendants only, never the node itself
  - inserting a fragment inserts its children
  - registering the same listener twice is a no-op
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from html import escape as _html_escape
from html.parser import HTMLParser
from typing import Any

Listener = Callable[["Element"], None]

VOID_ELEMENTS: set[str] = {
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "meta",
    "source",
    "track",
    "wbr",
}

RAW_TEXT_ELEMENTS: set[str] = {"script", "style"}

FRAGMENT_TAG = "#document-fragment"
DOCUMENT_TAG = "#document"

_SELECTOR = re.compile(r'^([a-zA-Z][\w-]*)?((?:\[[\w-]+(?:="[^"]*")?\])*)$')
_SELECTOR_ATTR = re.compile(r'\[([\w-]+)(="([^"]*)")?\]')


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class Text:
    """A text node."""

    __slots__ = ("data", "parent")

    def __init__(self, data: str) -> None:
        self.data = data
        self.parent: Element | None = None

    def clone(self) -> Text:
        return Text(self.data)

    def __repr__(self) -> str:  # pragma: no cover
        return f"Text({self.data!r})"


class Element:
    """An element node. Attributes keep insertion order."""

    def __init__(self, tag: str, attrs: dict[str, str] | None = None) -> None:
        self.tag = tag.lower() if not tag.startswith("#") else tag
        self.attrs: dict[str, str] = dict(attrs or {})
        self.children: list[Element | Text] = []
        self.parent: Element | None = None
        self._listeners: dict[str, list[Listener]] = {}

    # -- tree --

    def append(self, node: Element | Text) -> Element | Text:
        if node.parent is not None:
            node.parent.children.remove(node)
        node.parent = self
        self.children.append(node)
        return node

    def elements(self) -> list[Element]:
        return [c for c in self.children if isinstance(c, Element)]

    def iter_descendants(self) -> Iterator[Element]:
        """Depth-first, document order. Does not enter <template> content."""
        for child in self.children:
            if isinstance(child, Element):
                yield child
                if child.tag != "template":
                    yield from child.iter_descendants()

    def clone(self, deep: bool = True) -> Element:
        # Listeners are not copied, matching cloneNode().
        copy = Element(self.tag, self.attrs)
        if deep:
            for child in self.children:
                copy.append(child.clone())
        return copy

    # -- content --

    @property
    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.data)
            elif child.tag != "template":
                parts.append(child.text_content)
        return "".join(parts)

    @text_content.setter
    def text_content(self, value: str) -> None:
        for child in self.children:
            child.parent = None
        self.children = []
        if value:
            self.append(Text(value))

    @property
    def classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    # -- events --

    def dispatch(self, event: str) -> None:
        """Fire an event at this node (e.g. "blur" after a user edit)."""
        for listener in list(self._listeners.get(event, [])):
            listener(self)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, []))

    def __repr__(self) -> str:  # pragma: no cover
        attrs = " ".join(f"{k}={v!r}" for k, v in self.attrs.items())
        return f"<{self.tag}{' ' + attrs if attrs else ''}>"


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


def compile_selector(selector: str) -> Callable[[Element], bool]:
    """
    Compile the selector subset the engine uses:
      tag, [attr], [attr="value"], and any tag-plus-attributes combination.
    """
    match = _SELECTOR.match(selector.strip())
    if not match or not selector.strip():
        raise ValueError(f"Unsupported selector: {selector!r}")
    tag = match.group(1).lower() if match.group(1) else None
    conditions = _SELECTOR_ATTR.findall(match.group(2))

    def matches(el: Element) -> bool:
        if tag is not None and el.tag != tag:
            return False
        for name, has_value, value in conditions:
            actual = el.attrs.get(name)
            if actual is None:
                return False
            if has_value and actual != value:
                return False
        return True

    return matches


# ---------------------------------------------------------------------------
# Adapter protocol
# ---------------------------------------------------------------------------


class DocumentAdapter:
    """
    Abstract document interface.
    Implement over a live DOM bridge in a browser, or use MemoryDocument.
    """

    def find_all(self, selector: str, root: Any = None) -> list[Any]:
        """All descendants of root (default: the whole document) matching selector."""
        raise NotImplementedError

    def find_first(self, selector: str, root: Any = None) -> Any | None:
        found = self.find_all(selector, root)
        return found[0] if found else None

    def tag_name(self, node: Any) -> str:
        raise NotImplementedError

    def get_attribute(self, node: Any, name: str) -> str | None:
        raise NotImplementedError

    def set_attribute(self, node: Any, name: str, value: str) -> None:
        raise NotImplementedError

    def remove_attribute(self, node: Any, name: str) -> None:
        raise NotImplementedError

    def get_text(self, node: Any) -> str:
        raise NotImplementedError

    def set_text(self, node: Any, text: str) -> None:
        raise NotImplementedError

    def create_element(self, tag: str) -> Any:
        raise NotImplementedError

    def append_child(self, parent: Any, node: Any) -> None:
        raise NotImplementedError

    def children(self, node: Any) -> list[Any]:
        """Element children only."""
        raise NotImplementedError

    def child_nodes(self, node: Any) -> list[Any]:
        """All children, text included."""
        raise NotImplementedError

    def clone_template(self, template: Any) -> Any:
        """Deep copy of a <template>'s content as a detached fragment."""
        raise NotImplementedError

    def insert_before(self, parent: Any, node: Any, reference: Any | None) -> list[Any]:
        """Insert node (or a fragment's children) before reference. Returns inserted nodes."""
        raise NotImplementedError

    def remove(self, node: Any) -> None:
        raise NotImplementedError

    def has_class(self, node: Any, name: str) -> bool:
        raise NotImplementedError

    def add_class(self, node: Any, name: str) -> None:
        raise NotImplementedError

    def remove_class(self, node: Any, name: str) -> None:
        raise NotImplementedError

    def add_listener(self, node: Any, event: str, listener: Listener) -> None:
        raise NotImplementedError

    def remove_listener(self, node: Any, event: str, listener: Listener) -> None:
        raise NotImplementedError


class MemoryDocument(DocumentAdapter):
    """In-memory document for headless rendering and testing."""

    def __init__(self, root: Element | None = None, doctype: str | None = None) -> None:
        self.root = root or Element(DOCUMENT_TAG)
        self.doctype = doctype

    def find_all(self, selector: str, root: Element | None = None) -> list[Element]:
        matches = compile_selector(selector)
        scope = root if root is not None else self.root
        return [el for el in scope.iter_descendants() if matches(el)]

    def tag_name(self, node: Element) -> str:
        return node.tag

    def get_attribute(self, node: Element, name: str) -> str | None:
        return node.attrs.get(name)

    def set_attribute(self, node: Element, name: str, value: str) -> None:
        node.attrs[name] = value

    def remove_attribute(self, node: Element, name: str) -> None:
        node.attrs.pop(name, None)

    def get_text(self, node: Element) -> str:
        return node.text_content

    def set_text(self, node: Element, text: str) -> None:
        node.text_content = text

    def create_element(self, tag: str) -> Element:
        return Element(tag)

    def append_child(self, parent: Element, node: Element) -> None:
        parent.append(node)

    def children(self, node: Element) -> list[Element]:
        return node.elements()

    def child_nodes(self, node: Element) -> list[Element | Text]:
        return list(node.children)

    def clone_template(self, template: Element) -> Element:
        fragment = Element(FRAGMENT_TAG)
        for child in template.children:
            fragment.append(child.clone())
        return fragment

    def insert_before(self, parent: Element, node: Element, reference: Element | None) -> list[Element]:
        nodes = list(node.children) if node.tag == FRAGMENT_TAG else [node]
        for n in nodes:
            if n.parent is not None:
                n.parent.children.remove(n)
            n.parent = parent
            if reference is None:
                parent.children.append(n)
            else:
                parent.children.insert(parent.children.index(reference), n)
        return [n for n in nodes if isinstance(n, Element)]

    def remove(self, node: Element | Text) -> None:
        if node.parent is not None:
            node.parent.children.remove(node)
            node.parent = None

    def has_class(self, node: Element | Text, name: str) -> bool:
        return isinstance(node, Element) and name in node.classes

    def add_class(self, node: Element, name: str) -> None:
        classes = node.classes
        if name not in classes:
            node.attrs["class"] = " ".join([*classes, name])

    def remove_class(self, node: Element, name: str) -> None:
        classes = [c for c in node.classes if c != name]
        if classes:
            node.attrs["class"] = " ".join(classes)
        else:
            node.attrs.pop("class", None)

    def add_listener(self, node: Element, event: str, listener: Listener) -> None:
        registered = node._listeners.setdefault(event, [])
        if listener not in registered:
            registered.append(listener)

    def remove_listener(self, node: Element, event: str, listener: Listener) -> None:
        registered = node._listeners.get(event, [])
        if listener in registered:
            registered.remove(listener)

    # -- serialization --

    def to_html(self) -> str:
        out = f"<!{self.doctype}>" if self.doctype else ""
        return out + "".join(_serialize(c) for c in self.root.children)


# ---------------------------------------------------------------------------
# HTML parsing / serialization
# ---------------------------------------------------------------------------


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Element(DOCUMENT_TAG)
        self.doctype: str | None = None
        self._stack: list[Element] = [self.root]

    def handle_decl(self, decl: str) -> None:
        self.doctype = decl

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        el = Element(tag, {k: v if v is not None else "" for k, v in attrs})
        self._stack[-1].append(el)
        if el.tag not in VOID_ELEMENTS:
            self._stack.append(el)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        el = Element(tag, {k: v if v is not None else "" for k, v in attrs})
        self._stack[-1].append(el)

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        # Close up to the nearest matching open element; stray end tags are ignored.
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                return

    def handle_data(self, data: str) -> None:
        self._stack[-1].append(Text(data))


def parse_html(source: str) -> MemoryDocument:
    """Build a MemoryDocument from HTML source."""
    builder = _TreeBuilder()
    builder.feed(source)
    builder.close()
    return MemoryDocument(builder.root, doctype=builder.doctype)


def _serialize(node: Element | Text) -> str:
    if isinstance(node, Text):
        if node.parent is not None and node.parent.tag in RAW_TEXT_ELEMENTS:
            return node.data
        return _html_escape(node.data, quote=False)
    attrs = "".join(
        f" {k}" if v == "" else f' {k}="{_html_escape(v, quote=True)}"' for k, v in node.attrs.items()
    )
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    inner = "".join(_serialize(c) for c in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
