"""Graph Serialization - Export flow graphs to the exchange format.

The exchange format is the ``{nodes, edges}`` JSON document downloaded
by the flow builder as ``flow.json``:

    {"nodes": [{"id", "type", "position": {"x", "y"}, "data": {"text"}}],
     "edges": [{"id", "source", "sourceHandle", "target", "label"}]}
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from flowgraph.graph.GraphNode import NodeKind

if TYPE_CHECKING:
    from flowgraph.graph.GraphNode import GraphNode
    from flowgraph.graph.model import FlowGraph, GraphSnapshot
    from flowgraph.graph.mutations import MutationEntry
    from flowgraph.graph.relations import Edge

# Node type names used by the exchange format
NODE_TYPES: dict[NodeKind, str] = {
    NodeKind.ENTRY: "startNode",
    NodeKind.TERMINAL: "endNode",
    NodeKind.MESSAGE: "textNode",
    NodeKind.CONDITION: "conditionalNode",
}


def serialize_node(node: GraphNode) -> dict[str, Any]:
    """Serialize a GraphNode to a JSON-compatible dict."""
    return {
        "id": node.id,
        "type": NODE_TYPES[node.kind],
        "position": {"x": node.position.x, "y": node.position.y},
        "data": {"text": node.text},
    }


def serialize_edge(edge: Edge) -> dict[str, Any]:
    """Serialize an Edge to a JSON-compatible dict."""
    return {
        "id": edge.id,
        "source": edge.source_id,
        "sourceHandle": edge.source_handle,
        "target": edge.target_id,
        "label": edge.label,
    }


def serialize_graph(graph: FlowGraph | GraphSnapshot) -> dict[str, Any]:
    """Serialize a graph to the exchange format.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with "nodes" and "edges" lists, in graph order.
    """
    return {
        "nodes": [serialize_node(node) for node in graph.nodes],
        "edges": [serialize_edge(edge) for edge in graph.edges],
    }


def serialize_mutation_entry(entry: MutationEntry) -> dict[str, Any]:
    """Serialize a history entry (without its snapshot)."""
    return {
        "id": entry.id,
        "operation": entry.operation,
        "target_id": entry.target_id,
        "timestamp": entry.timestamp.isoformat(),
    }


def to_json(graph: FlowGraph | GraphSnapshot, indent: int | None = 2) -> str:
    """Render a graph as exchange-format JSON text."""
    return json.dumps(serialize_graph(graph), indent=indent)
