"""Graph module - Core flow graph data structures.

Exports:
- NodeKind: Enum of node types
- Position: Canvas coordinates
- GraphNode: Immutable node record
- Edge: Directional link between nodes
- FlowGraph: Live graph container
- GraphSnapshot: Immutable graph copy used by history
- FlowDataError: Raised for malformed external graph data
- MutationEntry / History: Undo/redo machinery
- FlowEditor: The single write surface (with NodeChange/EdgeChange)
"""

from flowgraph.graph.editor import EdgeChange, EditorConfig, FlowEditor, NodeChange
from flowgraph.graph.GraphNode import GraphNode, NodeKind, Position
from flowgraph.graph.model import FlowDataError, FlowGraph, GraphSnapshot
from flowgraph.graph.mutations import History, MutationEntry
from flowgraph.graph.relations import Edge

__all__ = [
    "NodeKind",
    "Position",
    "GraphNode",
    "Edge",
    "FlowGraph",
    "GraphSnapshot",
    "FlowDataError",
    "MutationEntry",
    "History",
    "FlowEditor",
    "EditorConfig",
    "NodeChange",
    "EdgeChange",
]
