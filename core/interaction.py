from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from flowgraph.geometry import Point, clamp_position, drop_position
from flowgraph.model import FlowGraph
from flowgraph.schema import FlowNode, NodeKind

from .config import EditorSettings
from .events import (
    PRIMARY_BUTTON,
    BackgroundClick,
    DeleteRequested,
    HandleActivated,
    NodeSelected,
    PaletteDrop,
    PointerCancel,
    PointerDown,
    PointerMove,
    PointerUp,
)

logger = logging.getLogger(__name__)


# ============================================================================
# States
# ============================================================================

@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Dragging:
    node_id: str
    offset: Point
    name = "dragging"


@dataclass(frozen=True)
class Connecting:
    source_id: str
    name = "connecting"


InteractionState = Union[Idle, Dragging, Connecting]

IDLE = Idle()


# ============================================================================
# Controller
# ============================================================================

class InteractionController:
    """Turns raw pointer input into graph mutations.

    The controller owns the per-session interaction state (drag, pending
    connection, selection); nothing about it is stored on the nodes.
    ``on_pointer_capture`` is called with True when a drag starts and with
    False whenever the controller leaves Dragging, so the view can attach
    and detach its pointer-move listeners.
    """

    def __init__(self, graph: FlowGraph, settings: Optional[EditorSettings] = None,
                 on_pointer_capture: Optional[Callable[[bool], None]] = None) -> None:
        self.graph = graph
        self.settings = settings or EditorSettings()
        self.on_pointer_capture = on_pointer_capture
        self.state: InteractionState = IDLE
        self.selected_id: Optional[str] = None
        self._handlers = {
            PointerDown: self._on_pointer_down,
            PointerMove: self._on_pointer_move,
            PointerUp: self._on_pointer_up,
            PointerCancel: self._on_pointer_cancel,
            HandleActivated: self._on_handle_activated,
            BackgroundClick: self._on_background_click,
            NodeSelected: self._on_node_selected,
            PaletteDrop: self._on_palette_drop,
            DeleteRequested: self._on_delete_requested,
        }

    # ========================================
    # Introspection
    # ========================================

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.state, Dragging)

    @property
    def is_connecting(self) -> bool:
        return isinstance(self.state, Connecting)

    @property
    def connection_start(self) -> Optional[str]:
        return self.state.source_id if isinstance(self.state, Connecting) else None

    @property
    def selected_node(self) -> Optional[FlowNode]:
        if self.selected_id is None:
            return None
        return self.graph.get_node(self.selected_id)

    # ========================================
    # Dispatch
    # ========================================

    def dispatch(self, event) -> InteractionState:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported editor event: {type(event).__name__}")
        handler(event)
        return self.state

    def select(self, node_id: Optional[str]) -> None:
        if node_id is not None and not self.graph.has_node(node_id):
            logger.debug(f"Selection ignored, unknown node: {node_id}")
            return
        self.selected_id = node_id

    def clear_selection(self) -> None:
        self.selected_id = None

    def reset(self) -> None:
        self._transition(IDLE)
        self.selected_id = None

    def delete_node(self, node_id: str) -> bool:
        node = self.graph.get_node(node_id)
        if node is None:
            logger.debug(f"Delete ignored, unknown node: {node_id}")
            return False
        if node.kind is NodeKind.START:
            logger.warning(f"Delete refused for start node: {node_id}")
            return False

        self.graph.delete_node(node_id)
        if self.selected_id == node_id:
            self.selected_id = None
        state = self.state
        if isinstance(state, Connecting) and state.source_id == node_id:
            self._transition(IDLE)
        elif isinstance(state, Dragging) and state.node_id == node_id:
            self._transition(IDLE)
        return True

    # ========================================
    # Handlers
    # ========================================

    def _on_pointer_down(self, event: PointerDown) -> None:
        if event.button != PRIMARY_BUTTON:
            return
        node = self.graph.get_node(event.node_id)
        if node is None:
            logger.debug(f"Pointer down on unknown node: {event.node_id}")
            return

        if isinstance(self.state, Idle):
            offset = Point(event.x, event.y) - Point(node.position.x, node.position.y)
            self._transition(Dragging(node_id=node.id, offset=offset))
        # a press while connecting or mid-drag only selects
        self.selected_id = node.id

    def _on_pointer_move(self, event: PointerMove) -> None:
        state = self.state
        if not isinstance(state, Dragging):
            return
        target = clamp_position(Point(event.x, event.y) - state.offset)
        if self.graph.update_node(state.node_id, position=target) is None:
            # node vanished mid-drag
            self._transition(IDLE)

    def _on_pointer_up(self, event: PointerUp) -> None:
        if isinstance(self.state, Dragging):
            self._transition(IDLE)

    def _on_pointer_cancel(self, event: PointerCancel) -> None:
        if isinstance(self.state, Dragging):
            self._transition(IDLE)

    def _on_handle_activated(self, event: HandleActivated) -> None:
        if not self.graph.has_node(event.node_id):
            logger.debug(f"Handle click on unknown node: {event.node_id}")
            return

        state = self.state
        if isinstance(state, Idle):
            self._transition(Connecting(source_id=event.node_id))
        elif isinstance(state, Connecting):
            if event.node_id == state.source_id:
                logger.debug(f"Handle click on connection origin ignored: {event.node_id}")
                return
            self.graph.add_connection(state.source_id, event.node_id)
            self._transition(IDLE)

    def _on_background_click(self, event: BackgroundClick) -> None:
        if isinstance(self.state, Connecting):
            logger.debug(f"Connection from {self.state.source_id} cancelled")
            self._transition(IDLE)
        elif isinstance(self.state, Idle):
            self.selected_id = None

    def _on_node_selected(self, event: NodeSelected) -> None:
        self.select(event.node_id)

    def _on_palette_drop(self, event: PaletteDrop) -> None:
        if not isinstance(self.state, Idle):
            logger.debug(f"Palette drop ignored while {self.state.name}")
            return
        raw_kind = event.payload.get(self.settings.drag_media_type)
        if not raw_kind:
            logger.debug("Palette drop without a node kind payload")
            return
        kind = NodeKind.from_string(raw_kind)
        if kind is None:
            logger.warning(f"Palette drop with unknown node kind: {raw_kind}")
            return

        position = drop_position(
            Point(event.client_x, event.client_y),
            Point(event.canvas_left, event.canvas_top),
            self.settings.node_width,
            self.settings.node_height,
        )
        node = self.graph.add_node(kind, position)
        self.selected_id = node.id

    def _on_delete_requested(self, event: DeleteRequested) -> None:
        self.delete_node(event.node_id)

    def _transition(self, new_state: InteractionState) -> None:
        old_state = self.state
        self.state = new_state
        was_dragging = isinstance(old_state, Dragging)
        now_dragging = isinstance(new_state, Dragging)
        if was_dragging != now_dragging and self.on_pointer_capture is not None:
            self.on_pointer_capture(now_dragging)
        if old_state != new_state:
            logger.debug(f"Interaction: {old_state.name} -> {new_state.name}")
