from __future__ import annotations

from typing import Iterable

import networkx as nx

from .schema import Connection, FlowNode


def build_nx_graph(nodes: Iterable[FlowNode], connections: Iterable[Connection]) -> nx.DiGraph:
    g: nx.DiGraph = nx.DiGraph()

    # add nodes
    for node in nodes:
        g.add_node(node.id, kind=node.kind.value, label=node.data.label)

    # add edges; endpoints that are not nodes are skipped
    for conn in connections:
        if conn.source in g and conn.target in g:
            g.add_edge(conn.source, conn.target, id=conn.id)

    return g
