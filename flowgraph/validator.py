from __future__ import annotations

from typing import List, Set

import networkx as nx

from .builder import build_nx_graph
from .schema import FlowReport, NodeKind, ValidationResult


def validate_flow(graph) -> ValidationResult:
    """Connectivity check over anything exposing ``nodes`` and ``connections``.

    Rules run in order and the first failure wins. A failing flow is a
    normal result, never an exception.
    """
    nodes = list(graph.nodes)
    connections = list(graph.connections)

    if not any(n.kind is NodeKind.START for n in nodes):
        return ValidationResult(ok=False, message="Flow must have at least one start node")

    if not any(n.kind is NodeKind.END for n in nodes):
        return ValidationResult(ok=False, message="Flow must have at least one end node")

    connected: Set[str] = set()
    for conn in connections:
        connected.add(conn.source)
        connected.add(conn.target)

    disconnected = [
        n for n in nodes
        if n.kind not in (NodeKind.START, NodeKind.END) and n.id not in connected
    ]
    if disconnected:
        return ValidationResult(
            ok=False,
            message=f"{len(disconnected)} node(s) are not connected to the flow",
        )

    return ValidationResult(ok=True, message="Flow is valid")


def analyze_flow(graph) -> FlowReport:
    """Directed-path analysis from the start nodes to the end nodes."""
    nodes = list(graph.nodes)
    g = build_nx_graph(nodes, graph.connections)
    warnings: List[str] = []
    errors: List[str] = []

    start_nodes = [n.id for n in nodes if n.kind is NodeKind.START]
    end_nodes = [n.id for n in nodes if n.kind is NodeKind.END]

    verdict = validate_flow(graph)
    if not verdict.ok:
        errors.append(verdict.message)

    isolated = list(nx.isolates(g))
    if isolated:
        warnings.append(f"Isolated nodes: {sorted(isolated)}")

    unreachable: List[str] = []
    if start_nodes:
        reachable = set(start_nodes).union(*(nx.descendants(g, s) for s in start_nodes))
        unreachable = [n for n in g if n not in reachable]
        if unreachable:
            warnings.append(f"Unreachable from start: {sorted(unreachable)}")

    dead_ends: List[str] = []
    if end_nodes:
        can_finish = set(end_nodes).union(*(nx.ancestors(g, e) for e in end_nodes))
        dead_ends = [n for n in g if n not in can_finish]
        if dead_ends:
            warnings.append(f"No path to an end node: {sorted(dead_ends)}")

    # self-loops are rejected by the model, so every cycle spans 2+ nodes
    is_dag = nx.is_directed_acyclic_graph(g)
    cyclic: List[str] = []
    if not is_dag:
        cyclic = sorted(
            n for component in nx.strongly_connected_components(g)
            if len(component) > 1 for n in component
        )
        warnings.append(f"Cycle detected among: {cyclic}")

    return FlowReport(
        ok=len(errors) == 0,
        is_dag=is_dag,
        warnings=warnings,
        errors=errors,
        start_nodes=start_nodes,
        end_nodes=end_nodes,
        isolated_nodes=isolated,
        unreachable_nodes=unreachable,
        dead_end_nodes=dead_ends,
        cyclic_nodes=cyclic,
    )
