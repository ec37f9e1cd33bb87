from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

PRIMARY_BUTTON = 0


class PointerDown(BaseModel):
    """Press on a node body"""
    type: Literal["pointer_down"] = "pointer_down"
    node_id: str
    x: float
    y: float
    button: int = PRIMARY_BUTTON


class PointerMove(BaseModel):
    type: Literal["pointer_move"] = "pointer_move"
    x: float
    y: float


class PointerUp(BaseModel):
    type: Literal["pointer_up"] = "pointer_up"
    x: float = 0.0
    y: float = 0.0


class PointerCancel(BaseModel):
    """Capture lost, e.g. the button was released outside the canvas"""
    type: Literal["pointer_cancel"] = "pointer_cancel"


class HandleActivated(BaseModel):
    """Click on either connection handle of a node"""
    type: Literal["handle_activated"] = "handle_activated"
    node_id: str


class BackgroundClick(BaseModel):
    type: Literal["background_click"] = "background_click"


class NodeSelected(BaseModel):
    type: Literal["node_selected"] = "node_selected"
    node_id: str


class PaletteDrop(BaseModel):
    """Palette item dropped on the canvas; payload maps media type -> value"""
    type: Literal["palette_drop"] = "palette_drop"
    payload: Dict[str, str] = Field(default_factory=dict)
    client_x: float
    client_y: float
    canvas_left: float = 0.0
    canvas_top: float = 0.0


class DeleteRequested(BaseModel):
    type: Literal["delete_requested"] = "delete_requested"
    node_id: str


EditorEvent = Annotated[
    Union[
        PointerDown,
        PointerMove,
        PointerUp,
        PointerCancel,
        HandleActivated,
        BackgroundClick,
        NodeSelected,
        PaletteDrop,
        DeleteRequested,
    ],
    Field(discriminator="type"),
]

_event_adapter = TypeAdapter(EditorEvent)


def parse_event(payload: Dict[str, Any]):
    """Build a typed event from its wire form; raises pydantic.ValidationError"""
    return _event_adapter.validate_python(payload)
