"""Structural queries over flow graphs.

Pure, side-effect-free functions accepting either a live ``FlowGraph``
or a ``GraphSnapshot``. Results are deterministic: nodes are visited in
insertion order and neighbours in edge-list order.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from flowgraph.graph.GraphNode import GraphNode
    from flowgraph.graph.model import FlowGraph, GraphSnapshot

    GraphLike = Union[FlowGraph, GraphSnapshot]

_UNVISITED, _IN_PROGRESS, _DONE = 0, 1, 2


def roots_of(graph: GraphLike) -> list[GraphNode]:
    """Return nodes with no incoming edge, in insertion order."""
    targets = {edge.target_id for edge in graph.edges}
    return [node for node in graph.nodes if node.id not in targets]


def adjacency(graph: GraphLike) -> dict[str, list[str]]:
    """Map each node id to the ids reachable through one outgoing edge.

    Every node gets an entry, possibly empty. Edges from different
    handles of one node each contribute a neighbour. Edges referencing
    nodes outside the graph are ignored.
    """
    result: dict[str, list[str]] = {node.id: [] for node in graph.nodes}
    for edge in graph.edges:
        if edge.source_id in result and edge.target_id in result:
            result[edge.source_id].append(edge.target_id)
    return result


def reachable_from(
    graph: GraphLike,
    start_id: str,
    adj: dict[str, list[str]] | None = None,
) -> set[str]:
    """Breadth-first traversal from ``start_id``.

    Args:
        graph: Graph to traverse.
        start_id: Node to start from. Always part of the result.
        adj: Precomputed adjacency, to share one pass with other queries.

    Returns:
        Set of reached node ids.
    """
    if adj is None:
        adj = adjacency(graph)
    reached = {start_id}
    queue: deque[str] = deque([start_id])
    while queue:
        current = queue.popleft()
        for nxt in adj.get(current, ()):
            if nxt not in reached:
                reached.add(nxt)
                queue.append(nxt)
    return reached


def has_cycle(graph: GraphLike, adj: dict[str, list[str]] | None = None) -> bool:
    """Detect a directed cycle with three-colour depth-first search.

    A cycle exists iff an outgoing edge leads back to a node still in
    progress. The search is iterative so long flows cannot exhaust the
    interpreter stack.

    Args:
        graph: Graph to inspect.
        adj: Precomputed adjacency, to share one pass with other queries.

    Returns:
        True if any cycle exists (self-loops included).
    """
    if adj is None:
        adj = adjacency(graph)
    colour = {node_id: _UNVISITED for node_id in adj}

    for root in adj:
        if colour[root] != _UNVISITED:
            continue
        colour[root] = _IN_PROGRESS
        # Each frame is (node, index of the next neighbour to visit)
        stack: list[tuple[str, int]] = [(root, 0)]
        while stack:
            node_id, i = stack[-1]
            neighbours = adj[node_id]
            if i == len(neighbours):
                colour[node_id] = _DONE
                stack.pop()
                continue
            stack[-1] = (node_id, i + 1)
            nxt = neighbours[i]
            if colour[nxt] == _IN_PROGRESS:
                return True
            if colour[nxt] == _UNVISITED:
                colour[nxt] = _IN_PROGRESS
                stack.append((nxt, 0))
    return False
