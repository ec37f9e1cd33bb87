from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union

import networkx as nx

from .schema import (
    Connection,
    FlowDocument,
    FlowNode,
    NodeData,
    NodeKind,
    Position,
    connection_id,
    default_node_data,
)

logger = logging.getLogger(__name__)

DEFAULT_START_ID = "start-1"
DEFAULT_START_POSITION = (100.0, 100.0)

PositionLike = Union[Position, Dict[str, Any], Tuple[float, float]]


class FlowGraph:
    """Node and connection store with referential integrity.

    Connections are indexed in a networkx DiGraph so that node removal can
    find every edge touching the node. Each node's ``outgoing`` list is a
    derived view of that index and is rebuilt inside every mutation that
    touches connections.
    """

    def __init__(self, with_start: bool = True,
                 start_position: Tuple[float, float] = DEFAULT_START_POSITION) -> None:
        self._nodes: Dict[str, FlowNode] = {}
        self._connections: Dict[Tuple[str, str], Connection] = {}
        self._index: nx.DiGraph = nx.DiGraph()
        self._last_stamp: int = 0
        self._start_position = start_position
        if with_start:
            self._insert_start()

    # ========================================
    # Read access
    # ========================================

    @property
    def nodes(self) -> List[FlowNode]:
        return [n.model_copy(deep=True) for n in self._nodes.values()]

    @property
    def connections(self) -> List[Connection]:
        return [c.model_copy() for c in self._connections.values()]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        node = self._nodes.get(node_id)
        return node.model_copy(deep=True) if node else None

    def has_connection(self, source_id: str, target_id: str) -> bool:
        return (source_id, target_id) in self._connections

    def successors(self, node_id: str) -> List[str]:
        if node_id not in self._index:
            return []
        return list(self._index.successors(node_id))

    def predecessors(self, node_id: str) -> List[str]:
        if node_id not in self._index:
            return []
        return list(self._index.predecessors(node_id))

    def connections_for(self, node_id: str) -> List[Connection]:
        """Connections touching the node as source or target"""
        return [c.model_copy() for c in self._connections.values()
                if c.source == node_id or c.target == node_id]

    # ========================================
    # Node mutations
    # ========================================

    def add_node(self, kind: Union[NodeKind, str], position: PositionLike) -> FlowNode:
        kind = NodeKind(kind)
        node = FlowNode(
            id=self._next_id(kind),
            kind=kind,
            position=_to_position(position),
            data=default_node_data(kind),
        )
        self._insert(node)
        logger.info(f"Node added: {node.id} at ({node.position.x}, {node.position.y})")
        return node.model_copy(deep=True)

    def update_node(self, node_id: str, position: Optional[PositionLike] = None,
                    data: Optional[Dict[str, Any]] = None) -> Optional[FlowNode]:
        """Merge a partial update into position and/or data; unknown ids are a no-op"""
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"update_node ignored, unknown node: {node_id}")
            return None

        if position is not None:
            if isinstance(position, dict):
                merged_pos = {**node.position.model_dump(), **position}
                node.position = Position.model_validate(merged_pos)
            else:
                node.position = _to_position(position)

        if data:
            partial = NodeData.model_validate(data)
            merged = node.data.model_dump()
            merged.update(partial.model_dump(exclude_unset=True))
            node.data = NodeData.model_validate(merged)

        return node.model_copy(deep=True)

    def delete_node(self, node_id: str) -> Optional[FlowNode]:
        """Remove a node and cascade to every connection that references it"""
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"delete_node ignored, unknown node: {node_id}")
            return None

        touched = set(self._index.predecessors(node_id))
        pairs = list(self._index.in_edges(node_id)) + list(self._index.out_edges(node_id))
        for pair in pairs:
            self._connections.pop(pair, None)
        self._index.remove_node(node_id)
        del self._nodes[node_id]

        for other in touched:
            self._refresh_outgoing(other)

        logger.info(f"Node deleted: {node_id} ({len(pairs)} connection(s) removed)")
        return node

    # ========================================
    # Connection mutations
    # ========================================

    def add_connection(self, source_id: str, target_id: str,
                       conn_id: Optional[str] = None) -> Optional[Connection]:
        """Connect two nodes; conn_id keeps an imported id when it is still free"""
        if source_id == target_id:
            logger.debug(f"add_connection ignored, self-loop on {source_id}")
            return None
        if source_id not in self._nodes or target_id not in self._nodes:
            logger.debug(f"add_connection ignored, unknown endpoint: {source_id} -> {target_id}")
            return None
        if (source_id, target_id) in self._connections:
            logger.debug(f"add_connection ignored, duplicate: {source_id} -> {target_id}")
            return None

        if conn_id is None or self._has_connection_id(conn_id):
            conn_id = self._unique_connection_id(source_id, target_id)
        conn = Connection(id=conn_id, source=source_id, target=target_id)
        self._connections[conn.pair] = conn
        self._index.add_edge(source_id, target_id, id=conn.id)
        self._refresh_outgoing(source_id)
        logger.info(f"Connection added: {conn.id}")
        return conn.model_copy()

    # ========================================
    # Whole-graph operations
    # ========================================

    def clear(self, with_start: bool = True) -> None:
        self._nodes.clear()
        self._connections.clear()
        self._index.clear()
        if with_start:
            self._insert_start()

    def load_document(self, document: FlowDocument) -> None:
        """Replace the live graph with the document's nodes and connections"""
        self.clear(with_start=False)
        for node in document.nodes:
            if node.id in self._nodes:
                logger.warning(f"Duplicate node id skipped on load: {node.id}")
                continue
            self._insert(node.model_copy(deep=True, update={"outgoing": []}))
        dropped = 0
        for conn in document.connections:
            if self.add_connection(conn.source, conn.target, conn_id=conn.id) is None:
                dropped += 1
        if dropped:
            logger.warning(f"{dropped} connection(s) dropped while loading document")
        logger.info(f"Document loaded: {len(self._nodes)} nodes, {len(self._connections)} connections")

    # ========================================
    # Internals
    # ========================================

    def _insert_start(self) -> None:
        x, y = self._start_position
        self._insert(FlowNode(
            id=DEFAULT_START_ID,
            kind=NodeKind.START,
            position=Position(x=x, y=y),
            data=default_node_data(NodeKind.START),
        ))

    def _insert(self, node: FlowNode) -> None:
        node.outgoing = []
        self._nodes[node.id] = node
        self._index.add_node(node.id)

    def _refresh_outgoing(self, node_id: str) -> None:
        node = self._nodes.get(node_id)
        if node is not None:
            node.outgoing = list(self._index.successors(node_id))

    def _has_connection_id(self, conn_id: str) -> bool:
        return any(c.id == conn_id for c in self._connections.values())

    def _unique_connection_id(self, source_id: str, target_id: str) -> str:
        # "a-b"+"c" and "a"+"b-c" join to the same text
        base = connection_id(source_id, target_id)
        candidate, n = base, 1
        while self._has_connection_id(candidate):
            n += 1
            candidate = f"{base}-{n}"
        return candidate

    def _next_id(self, kind: NodeKind) -> str:
        stamp = int(time.time() * 1000)
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        while f"{kind.value}-{stamp}" in self._nodes:
            stamp += 1
        self._last_stamp = stamp
        return f"{kind.value}-{stamp}"


def _to_position(position: PositionLike) -> Position:
    if isinstance(position, Position):
        return position.model_copy()
    if isinstance(position, dict):
        return Position.model_validate(position)
    if hasattr(position, "x") and hasattr(position, "y"):
        return Position(x=position.x, y=position.y)
    x, y = position
    return Position(x=x, y=y)
