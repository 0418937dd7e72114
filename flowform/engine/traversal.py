"""Reachability helpers over the flow graph (editor highlighting, branch selection)."""

from __future__ import annotations

from collections import deque
from typing import Literal

from pydantic import BaseModel, Field

from flowform.models.graph import FlowGraph

BranchMode = Literal["full", "downstream", "upstream"]


class ConnectedBranch(BaseModel):
    node_ids: list[str] = Field(default_factory=list)
    edge_ids: list[str] = Field(default_factory=list)


def _walk(graph: FlowGraph, start: str, downstream: bool) -> list[str]:
    visited = {start}
    order = [start]
    queue: deque[str] = deque([start])
    while queue:
        current = queue.popleft()
        if downstream:
            neighbours = [e.target_node_id for e in graph.outgoing_edges(current)]
        else:
            neighbours = [e.source_node_id for e in graph.incoming_edges(current)]
        for neighbour in neighbours:
            if neighbour not in visited:
                visited.add(neighbour)
                order.append(neighbour)
                queue.append(neighbour)
    return order


def downstream_nodes(graph: FlowGraph, node_id: str) -> list[str]:
    """``node_id`` plus every node reachable by following edges forward."""
    return _walk(graph, node_id, downstream=True)


def upstream_nodes(graph: FlowGraph, node_id: str) -> list[str]:
    """``node_id`` plus every node that can reach it."""
    return _walk(graph, node_id, downstream=False)


def connected_branch(graph: FlowGraph, node_id: str, mode: BranchMode = "full") -> ConnectedBranch:
    if mode == "downstream":
        node_ids = downstream_nodes(graph, node_id)
    elif mode == "upstream":
        node_ids = upstream_nodes(graph, node_id)
    else:
        node_ids = downstream_nodes(graph, node_id)
        for nid in upstream_nodes(graph, node_id):
            if nid not in node_ids:
                node_ids.append(nid)

    members = set(node_ids)
    edge_ids = [
        e.id for e in graph.edges
        if e.source_node_id in members and e.target_node_id in members
    ]
    return ConnectedBranch(node_ids=node_ids, edge_ids=edge_ids)
