"""
Webitor: Host Messaging

The host extension talks to a page through two request/response messages:

  TOGGLE_EDITING_MODE {enabled}  → {success: true}
  GET_CHANGES {}                 → {success: true, changes: {dataFile, changes, updatedData}}

HostMessageHandler turns a raw request dict into a response dict and is
synchronous. Transports only carry messages: MemoryTransport for in-process
hosts and tests, create_router for hosts that reach the page over HTTP.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Body
from pydantic import ValidationError

from webitor.component import WebitorComponent
from webitor.models import (
    GetChangesRequest,
    HostResponse,
    ToggleEditingRequest,
    host_request_adapter,
)
from webitor.types import WebitorError

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], dict[str, Any]]


class HostMessageHandler:
    def __init__(self, component: WebitorComponent) -> None:
        self._component = component

    def __call__(self, request: dict[str, Any]) -> dict[str, Any]:
        try:
            message = host_request_adapter.validate_python(request)
        except ValidationError as e:
            logger.warning("host: rejected message %r", request)
            return HostResponse(success=False, error=_first_error(e)).to_wire()

        try:
            return self._dispatch(message).to_wire()
        except WebitorError as e:
            logger.warning("host: %s failed: %s", message.type, e)
            return HostResponse(success=False, error=str(e)).to_wire()

    def _dispatch(self, message: ToggleEditingRequest | GetChangesRequest) -> HostResponse:
        if isinstance(message, ToggleEditingRequest):
            self._component.set_editing(message.enabled)
            logger.info("host: editing mode %s", message.enabled)
            return HostResponse(success=True)
        return HostResponse(success=True, changes=self._component.get_changes())


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class MemoryTransport:
    """In-process transport: the host calls send() and gets the response back."""

    def __init__(self) -> None:
        self._handler: Handler | None = None

    def register(self, handler: Handler) -> None:
        self._handler = handler

    def send(self, request: dict[str, Any]) -> dict[str, Any]:
        if self._handler is None:
            raise RuntimeError("No handler registered")
        return self._handler(request)


def create_router(handler: Handler, prefix: str = "/webitor") -> APIRouter:
    """Expose a handler as POST {prefix}/message."""
    router = APIRouter(prefix=prefix, tags=["webitor"])

    @router.post("/message")
    def post_message(request: dict[str, Any] = Body(...)) -> dict[str, Any]:
        return handler(request)

    return router
