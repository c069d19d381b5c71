"""
Webitor test configuration.

Shared page markup and content-file builders. Everything renders into a
MemoryDocument; nothing touches a browser or the network.
"""

from __future__ import annotations

import copy

import pytest

from webitor.component import WebitorComponent
from webitor.config import Settings
from webitor.document import MemoryDocument, parse_html

FIXED_MS = 1700000000000

PAGE = """<!DOCTYPE html>
<html>
<body>
  <h1 id="title" data-bind="site.title">Placeholder</h1>
  <p id="tagline" data-bind="site.tagline">Placeholder</p>
  <a id="home" data-bind-href="site.link">Home</a>
  <img id="logo" data-bind-src="site.logo">
  <section id="articles" data-repeat="articles"><template data-template><article data-id-bind="id"><h2 data-bind="headline"></h2><div class="body" data-bind-html="paragraphs"></div><img data-bind-src="image"></article></template></section>
</body>
</html>
"""

CONTENT = {
    "title": "Home page",
    "lastEdited": "2025-01-01",
    "data": {
        "site": {
            "title": "Webitor",
            "tagline": "Edit in place",
            "link": "/index.html",
            "logo": "img/logo.png",
        },
        "articles": [
            {
                "id": "a1",
                "headline": "First",
                "paragraphs": ["One", "Two"],
                "image": "data:image/png;base64,AAAA",
            },
            {
                "id": "a2",
                "headline": "Second",
                "paragraphs": "Only paragraph",
                "image": "img/2.png",
            },
            {
                "id": "a3",
                "headline": "Third",
                "paragraphs": [],
                "image": "img/3.png",
            },
        ],
    },
}


def make_content() -> dict:
    return copy.deepcopy(CONTENT)


def make_document(page: str = PAGE) -> MemoryDocument:
    return parse_html(page)


def fixed_clock() -> int:
    return FIXED_MS


def make_component(document: MemoryDocument | None = None, content: dict | None = None) -> WebitorComponent:
    """A component already loaded with the sample page and content."""
    component = WebitorComponent(
        document or make_document(),
        settings=Settings(CACHE_BUST=True),
        clock=fixed_clock,
    )
    component.load("content/home.data.json", content or make_content())
    return component


@pytest.fixture
def document() -> MemoryDocument:
    return make_document()


@pytest.fixture
def component(document: MemoryDocument) -> WebitorComponent:
    return make_component(document)
