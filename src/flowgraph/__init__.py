"""
flowgraph - Authoring and validation engine for conversational flows

flowgraph holds the graph behind a visual flow builder: typed nodes
(start, end, message, condition) joined by directional links, an editor
that enforces the connection rules with linear undo/redo, and the
structural checks run when a flow is saved.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("flowgraph")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from flowgraph.graph import Edge, FlowEditor, FlowGraph, GraphNode, NodeKind, Position
from flowgraph.validation import ValidationResult, validate

__all__ = [
    "__version__",
    "Edge",
    "FlowEditor",
    "FlowGraph",
    "GraphNode",
    "NodeKind",
    "Position",
    "ValidationResult",
    "validate",
]
