"""
Webitor Host -- Message Protocol Tests

  TOGGLE_EDITING_MODE {enabled} → {success: true}
  GET_CHANGES {}                → {success: true, changes: {dataFile, changes, updatedData}}

Malformed or unknown messages, and messages that arrive before the page
has loaded, get {success: false, error} instead of an exception.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from webitor.component import WebitorComponent
from webitor.host import HostMessageHandler, MemoryTransport, create_router
from webitor.tests.conftest import make_component, make_document


def make_transport(component) -> MemoryTransport:
    transport = MemoryTransport()
    transport.register(HostMessageHandler(component))
    return transport


# ============================================================================
# TOGGLE_EDITING_MODE
# ============================================================================


def test_toggle_on(component):
    transport = make_transport(component)

    response = transport.send({"type": "TOGGLE_EDITING_MODE", "enabled": True})

    assert response == {"success": True}
    assert component.is_editing is True


def test_toggle_off(component, document):
    transport = make_transport(component)
    transport.send({"type": "TOGGLE_EDITING_MODE", "enabled": True})

    response = transport.send({"type": "TOGGLE_EDITING_MODE", "enabled": False})

    assert response == {"success": True}
    assert component.is_editing is False
    assert document.find_first('[id="title"]').attrs["contenteditable"] == "false"


def test_toggle_requires_enabled(component):
    response = make_transport(component).send({"type": "TOGGLE_EDITING_MODE"})

    assert response["success"] is False
    assert "enabled" in response["error"]
    assert component.is_editing is False


# ============================================================================
# GET_CHANGES
# ============================================================================


def test_get_changes_empty(component):
    response = make_transport(component).send({"type": "GET_CHANGES"})

    assert response["success"] is True
    assert response["changes"]["dataFile"] == "content/home.data.json"
    assert response["changes"]["changes"] == []
    assert response["changes"]["updatedData"]["title"] == "Home page"


def test_get_changes_after_edit(component, document):
    transport = make_transport(component)
    transport.send({"type": "TOGGLE_EDITING_MODE", "enabled": True})
    tagline = document.find_first('[id="tagline"]')
    tagline.text_content = "Edited"
    tagline.dispatch("blur")

    response = transport.send({"type": "GET_CHANGES"})

    assert response["changes"]["changes"] == [
        {"path": "site.tagline", "oldValue": "Edit in place", "newValue": "Edited", "kind": "value"}
    ]
    assert response["changes"]["updatedData"]["data"]["site"]["tagline"] == "Edited"


def test_get_changes_keeps_nulls(component):
    component.update_value("site.footer", None)

    response = make_transport(component).send({"type": "GET_CHANGES"})

    assert response["changes"]["changes"] == [{"path": "site.footer", "newValue": None, "kind": "value"}]
    assert response["changes"]["updatedData"]["data"]["site"]["footer"] is None


# ============================================================================
# Failures
# ============================================================================


@pytest.mark.parametrize(
    "request_",
    [
        {"type": "SAVE_EVERYTHING"},
        {"enabled": True},
        {"type": "GET_CHANGES", "extra": 1},
    ],
)
def test_invalid_messages_are_rejected(component, request_):
    response = make_transport(component).send(request_)

    assert response["success"] is False
    assert response["error"]


def test_messages_before_load_fail_softly():
    component = WebitorComponent(make_document())
    transport = make_transport(component)

    response = transport.send({"type": "GET_CHANGES"})

    assert response == {"success": False, "error": "No content file has been loaded"}


def test_send_without_handler():
    with pytest.raises(RuntimeError):
        MemoryTransport().send({"type": "GET_CHANGES"})


# ============================================================================
# HTTP transport
# ============================================================================


def make_client(component) -> TestClient:
    app = FastAPI()
    app.include_router(create_router(HostMessageHandler(component)))
    return TestClient(app)


def test_http_toggle_and_get_changes():
    component = make_component()
    client = make_client(component)

    toggle = client.post("/webitor/message", json={"type": "TOGGLE_EDITING_MODE", "enabled": True})
    assert toggle.status_code == 200
    assert toggle.json() == {"success": True}
    assert component.is_editing

    component.update_value("site.title", "Over HTTP")
    changes = client.post("/webitor/message", json={"type": "GET_CHANGES"}).json()

    assert changes["success"] is True
    assert changes["changes"]["changes"] == [
        {"path": "site.title", "oldValue": "Webitor", "newValue": "Over HTTP", "kind": "value"}
    ]


def test_http_unknown_message():
    client = make_client(make_component())

    response = client.post("/webitor/message", json={"type": "NOPE"})

    assert response.status_code == 200
    assert response.json()["success"] is False
