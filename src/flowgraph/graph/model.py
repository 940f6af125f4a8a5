"""Flow Graph - Container for the nodes and edges of one flow.

This module provides the passive graph structure shared by the editor,
the history and the validator:
- FlowGraph: Live graph with ordered node and edge storage
- GraphSnapshot: Immutable, independently owned copy used by history
- check_integrity: Structural checks applied to externally supplied graphs
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterable, Iterator
from uuid import uuid4

from flowgraph.graph.GraphNode import GraphNode, NodeKind
from flowgraph.graph.relations import Edge


class FlowDataError(ValueError):
    """Raised when external data cannot be turned into a valid flow graph."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid flow data: {detail}")


ID_LENGTH_RANGE = (1, 32)
MAX_ID_ATTEMPTS = 1000


def new_id(taken: Iterable[str] = (), length: int = 8) -> str:
    """Generate a short random id not present in ``taken``.

    Args:
        taken: IDs already in use.
        length: Number of hex characters (1-32).

    Returns:
        A lowercase hex string of the requested length.

    Raises:
        ValueError: If length is out of range.
        RuntimeError: If no free id turned up within MAX_ID_ATTEMPTS draws.
    """
    low, high = ID_LENGTH_RANGE
    if not low <= length <= high:
        raise ValueError(f"id length must be between {low} and {high}, got {length}")
    used = set(taken)
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = uuid4().hex[:length]
        if candidate not in used:
            return candidate
    raise RuntimeError(f"no free id of length {length} after {MAX_ID_ATTEMPTS} attempts")


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable copy of a graph at one point in time.

    Attributes:
        nodes: Nodes in insertion order.
        edges: Edges in insertion order.
    """

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[Edge, ...] = ()

    def node_count(self) -> int:
        """Return total number of nodes in the snapshot."""
        return len(self.nodes)


@dataclass
class FlowGraph:
    """Container for one authored flow.

    Nodes are indexed by id and kept in insertion order; edges are kept
    in insertion order. Traversal results depend on these orders.

    The write primitives (underscore-prefixed) are reserved for
    ``FlowEditor``, which records history around every change. Everything
    else is read-only.
    """

    # Internal storage (prefixed) - excluded from constructor
    _index: dict[str, GraphNode] = field(default_factory=dict, init=False)
    _edges: list[Edge] = field(default_factory=list, init=False)

    @classmethod
    def from_parts(cls, nodes: Iterable[GraphNode], edges: Iterable[Edge]) -> FlowGraph:
        """Build a graph from nodes and edges without integrity checks."""
        graph = cls()
        for node in nodes:
            graph._index[node.id] = node
        graph._edges.extend(edges)
        return graph

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> FlowGraph:
        """Build an independent live graph from a snapshot."""
        snapshot = copy.deepcopy(snapshot)
        return cls.from_parts(snapshot.nodes, snapshot.edges)

    # ─────────────────────────────────────────────────────────────────────────
    # Read API
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def nodes(self) -> tuple[GraphNode, ...]:
        """All nodes in insertion order."""
        return tuple(self._index.values())

    @property
    def edges(self) -> tuple[Edge, ...]:
        """All edges in insertion order."""
        return tuple(self._edges)

    def find_by_id(self, node_id: str | None) -> GraphNode | None:
        """Find node by ID.

        Args:
            node_id: The node ID to find.

        Returns:
            The matching GraphNode, or None if not found.
        """
        if node_id is None:
            return None
        return self._index.get(node_id)

    def has_node(self, node_id: str) -> bool:
        """Check if a node ID exists in the graph."""
        return node_id in self._index

    def find_edge(self, edge_id: str) -> Edge | None:
        """Find edge by ID."""
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def nodes_by_kind(self, kind: NodeKind) -> Iterator[GraphNode]:
        """Iterate nodes of a specific kind."""
        for node in self._index.values():
            if node.kind == kind:
                yield node

    def outgoing_edges(self, node_id: str) -> Iterator[Edge]:
        """Iterate edges leaving a node."""
        for edge in self._edges:
            if edge.source_id == node_id:
                yield edge

    def incoming_edges(self, node_id: str) -> Iterator[Edge]:
        """Iterate edges entering a node."""
        for edge in self._edges:
            if edge.target_id == node_id:
                yield edge

    def node_count(self) -> int:
        """Return total number of nodes in the graph."""
        return len(self._index)

    def edge_count(self) -> int:
        """Return total number of edges in the graph."""
        return len(self._edges)

    def ids(self) -> set[str]:
        """Return every node and edge id currently in use."""
        return set(self._index) | {edge.id for edge in self._edges}

    def clone(self) -> FlowGraph:
        """Create a deep copy of this graph.

        Returns:
            A new FlowGraph sharing no state with this one.
        """
        return copy.deepcopy(self)

    def snapshot(self) -> GraphSnapshot:
        """Capture a deep-copied, immutable snapshot of this graph."""
        return GraphSnapshot(
            nodes=copy.deepcopy(self.nodes),
            edges=copy.deepcopy(self.edges),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlowGraph):
            return NotImplemented
        return self.nodes == other.nodes and self.edges == other.edges

    # ─────────────────────────────────────────────────────────────────────────
    # Write primitives (FlowEditor only)
    # ─────────────────────────────────────────────────────────────────────────

    def _put_node(self, node: GraphNode) -> None:
        """Insert a node, or replace the node with the same id in place."""
        self._index[node.id] = node

    def _drop_node(self, node_id: str) -> list[Edge]:
        """Remove a node and every edge touching it.

        Returns:
            The removed edges.
        """
        del self._index[node_id]
        removed = [e for e in self._edges if e.touches(node_id)]
        self._edges = [e for e in self._edges if not e.touches(node_id)]
        return removed

    def _put_edge(self, edge: Edge) -> None:
        """Append an edge."""
        self._edges.append(edge)

    def _drop_edge(self, edge_id: str) -> Edge | None:
        """Remove an edge by id, returning it (or None if absent)."""
        for i, edge in enumerate(self._edges):
            if edge.id == edge_id:
                return self._edges.pop(i)
        return None

    def _drop_output(self, source_id: str, source_handle: str | None) -> list[Edge]:
        """Remove every edge occupying ``(source_id, source_handle)``."""
        removed = [e for e in self._edges if e.output == (source_id, source_handle)]
        if removed:
            self._edges = [e for e in self._edges if e.output != (source_id, source_handle)]
        return removed


def check_integrity(nodes: Iterable[GraphNode], edges: Iterable[Edge]) -> None:
    """Check that nodes and edges form a structurally valid flow graph.

    This is not the save-time validator: a graph passing these checks
    may still have several roots, cycles or blank text. It only rejects
    shapes the editor itself could never produce.

    Args:
        nodes: Candidate nodes.
        edges: Candidate edges.

    Raises:
        FlowDataError: On duplicate ids, dangling edges, edges into an
            entry or out of a terminal, unknown handles, or two edges
            sharing one output.
    """
    index: dict[str, GraphNode] = {}
    for node in nodes:
        if node.id in index:
            raise FlowDataError(f"duplicate node id '{node.id}'")
        index[node.id] = node

    edge_ids: set[str] = set()
    outputs: set[tuple[str, str | None]] = set()
    for edge in edges:
        if edge.id in edge_ids:
            raise FlowDataError(f"duplicate edge id '{edge.id}'")
        edge_ids.add(edge.id)

        source = index.get(edge.source_id)
        target = index.get(edge.target_id)
        if source is None:
            raise FlowDataError(f"edge '{edge.id}' leaves unknown node '{edge.source_id}'")
        if target is None:
            raise FlowDataError(f"edge '{edge.id}' enters unknown node '{edge.target_id}'")
        if not target.kind.has_input():
            raise FlowDataError(f"edge '{edge.id}' enters {target.kind.value} node '{target.id}'")
        if not source.has_output(edge.source_handle):
            raise FlowDataError(
                f"edge '{edge.id}' uses handle {edge.source_handle!r} "
                f"not exposed by {source.kind.value} node '{source.id}'"
            )
        if edge.output in outputs:
            raise FlowDataError(
                f"more than one edge leaves '{edge.source_id}' "
                f"on handle {edge.source_handle!r}"
            )
        outputs.add(edge.output)
