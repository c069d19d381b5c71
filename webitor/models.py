"""Host message models for the editing extension protocol."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class ToggleEditingRequest(BaseModel):
    """TOGGLE_EDITING_MODE: switch inline editing on or off."""

    model_config = {"extra": "forbid"}

    type: Literal["TOGGLE_EDITING_MODE"]
    enabled: bool


class GetChangesRequest(BaseModel):
    """GET_CHANGES: ask for the changelist and the working document."""

    model_config = {"extra": "forbid"}

    type: Literal["GET_CHANGES"]


HostRequest = Annotated[
    Union[ToggleEditingRequest, GetChangesRequest],
    Field(discriminator="type"),
]

host_request_adapter: TypeAdapter[HostRequest] = TypeAdapter(HostRequest)


class ChangeSet(BaseModel):
    """What GET_CHANGES carries back to the host."""

    dataFile: str
    changes: list[dict[str, Any]]
    updatedData: dict[str, Any]


class HostResponse(BaseModel):
    success: bool
    changes: ChangeSet | None = None
    error: str | None = None

    def to_wire(self) -> dict[str, Any]:
        # Nulls inside updatedData are data, not absent fields.
        wire: dict[str, Any] = {"success": self.success}
        if self.changes is not None:
            wire["changes"] = self.changes.model_dump()
        if self.error is not None:
            wire["error"] = self.error
        return wire
