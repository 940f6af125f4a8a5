"""Editor operations as JSON-ready functions.

Each function takes the ``FlowEditor``, performs exactly one editor or
validator operation, and returns a plain dict. The Flask routes in
``flowgraph.server.app`` are thin wrappers over these; no graph logic
lives in the routes.
"""

from __future__ import annotations

from typing import Any

from flowgraph.graph.deserializer import load_flow
from flowgraph.graph.editor import EdgeChange, FlowEditor, NodeChange
from flowgraph.graph.GraphNode import NodeKind, Position
from flowgraph.graph.model import FlowDataError
from flowgraph.graph.mutations import MutationEntry
from flowgraph.graph.serialize import serialize_graph, serialize_mutation_entry
from flowgraph.validation import validate


class RequestError(ValueError):
    """Raised when a request body cannot be interpreted."""


# ─────────────────────────────────────────────────────────────────────────────
# Request parsing helpers
# ─────────────────────────────────────────────────────────────────────────────


def _parse_kind(value: Any) -> NodeKind:
    if isinstance(value, str):
        try:
            return NodeKind(value.lower())
        except ValueError:
            pass
        try:
            return NodeKind[value.upper()]
        except KeyError:
            pass
    raise RequestError(f"Unknown node kind: {value!r}")


def _parse_position(value: Any) -> Position | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise RequestError("position must be an object with x and y")
    try:
        return Position(float(value.get("x", 0)), float(value.get("y", 0)))
    except (TypeError, ValueError) as e:
        raise RequestError(f"Invalid position: {e}") from e


def _parse_node_changes(raw: Any) -> list[NodeChange]:
    if not isinstance(raw, list):
        raise RequestError("nodes must be a list")
    changes = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            raise RequestError("each node change needs an id")
        selected = item.get("selected")
        changes.append(
            NodeChange(
                node_id=item["id"],
                position=_parse_position(item.get("position")),
                selected=None if selected is None else bool(selected),
                removed=bool(item.get("removed", False)),
            )
        )
    return changes


def _parse_edge_changes(raw: Any) -> list[EdgeChange]:
    if not isinstance(raw, list):
        raise RequestError("edges must be a list")
    changes = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            raise RequestError("each edge change needs an id")
        changes.append(EdgeChange(edge_id=item["id"], removed=bool(item.get("removed", False))))
    return changes


# ─────────────────────────────────────────────────────────────────────────────
# State
# ─────────────────────────────────────────────────────────────────────────────


def get_state(editor: FlowEditor) -> dict[str, Any]:
    """Current graph, selection and history flags."""
    return {
        "graph": serialize_graph(editor.graph),
        "selected_id": editor.selected_id if editor.selected_node else None,
        "can_undo": editor.can_undo,
        "can_redo": editor.can_redo,
    }


def _result(editor: FlowEditor, entry: MutationEntry | None, message: str, refused: str) -> dict[str, Any]:
    """Build the response for a mutation attempt."""
    result: dict[str, Any] = {"success": entry is not None}
    if entry is None:
        result["error"] = refused
    else:
        result["mutation"] = serialize_mutation_entry(entry)
        result["message"] = message
    result.update(get_state(editor))
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Mutations
# ─────────────────────────────────────────────────────────────────────────────


def add_node(editor: FlowEditor, kind: Any, position: Any = None, text: Any = None) -> dict[str, Any]:
    """Add a node of the given kind."""
    if text is not None and not isinstance(text, str):
        raise RequestError("text must be a string")
    node_kind = _parse_kind(kind)
    entry = editor.add_node(node_kind, _parse_position(position), text)
    return _result(editor, entry, f"Added {node_kind.value} node {entry.target_id}", "")


def update_text(editor: FlowEditor, node_id: str, text: Any) -> dict[str, Any]:
    """Replace the text of a node."""
    if not isinstance(text, str):
        raise RequestError("text must be a string")
    entry = editor.update_text(node_id, text)
    return _result(editor, entry, f"Updated text of {node_id}", f"No change to node '{node_id}'")


def duplicate(editor: FlowEditor, node_id: str) -> dict[str, Any]:
    """Duplicate one node."""
    entry = editor.duplicate(node_id)
    return _result(
        editor,
        entry,
        f"Duplicated {node_id} as {entry.target_id}" if entry else "",
        f"Node '{node_id}' not found",
    )


def duplicate_selected(editor: FlowEditor) -> dict[str, Any]:
    """Duplicate the selected node."""
    entry = editor.duplicate_selected()
    return _result(
        editor,
        entry,
        f"Duplicated selection as {entry.target_id}" if entry else "",
        "Nothing selected",
    )


def delete_node(editor: FlowEditor, node_id: str) -> dict[str, Any]:
    """Delete one node and its edges."""
    entry = editor.delete_node(node_id)
    return _result(editor, entry, f"Deleted {node_id}", f"Node '{node_id}' not found")


def delete_selected(editor: FlowEditor) -> dict[str, Any]:
    """Delete the selected node and its edges."""
    target = editor.selected_id
    entry = editor.delete_selected()
    return _result(editor, entry, f"Deleted {target}", "Nothing selected")


def select(editor: FlowEditor, node_id: Any) -> dict[str, Any]:
    """Select a node, or clear the selection with None."""
    if node_id is not None and not isinstance(node_id, str):
        raise RequestError("id must be a string or null")
    ok = editor.select(node_id)
    result: dict[str, Any] = {"success": ok}
    if not ok:
        result["error"] = f"Node '{node_id}' not found"
    result.update(get_state(editor))
    return result


def connect(editor: FlowEditor, source: Any, source_handle: Any, target: Any) -> dict[str, Any]:
    """Connect an output of one node to another node."""
    if not isinstance(source, str) or not isinstance(target, str):
        raise RequestError("source and target must be node ids")
    if source_handle is not None and not isinstance(source_handle, str):
        raise RequestError("sourceHandle must be a string or null")
    entry = editor.connect(source, source_handle, target)
    return _result(
        editor,
        entry,
        f"Connected {source} --> {target}",
        f"Connection {source} --> {target} refused",
    )


def delete_edge(editor: FlowEditor, edge_id: str) -> dict[str, Any]:
    """Delete one edge."""
    entry = editor.delete_edge(edge_id)
    return _result(editor, entry, f"Deleted edge {edge_id}", f"Edge '{edge_id}' not found")


def apply_changes(editor: FlowEditor, nodes: Any = None, edges: Any = None) -> dict[str, Any]:
    """Apply one gesture's node and edge deltas."""
    entry = editor.apply_changes(_parse_node_changes(nodes or []), _parse_edge_changes(edges or []))
    return _result(editor, entry, "Applied changes", "No graph changes")


def undo(editor: FlowEditor) -> dict[str, Any]:
    """Undo the most recent mutation."""
    entry = editor.undo()
    return _result(editor, entry, f"Undid {entry.operation}" if entry else "", "No mutations to undo")


def redo(editor: FlowEditor) -> dict[str, Any]:
    """Redo the most recently undone mutation."""
    entry = editor.redo()
    return _result(editor, entry, f"Redid {entry.operation}" if entry else "", "No mutations to redo")


def import_flow(editor: FlowEditor, data: Any) -> dict[str, Any]:
    """Replace the graph with an exchange-format document.

    Raises:
        FlowDataError: If the document is not a valid flow. The graph
            is left untouched.
    """
    nodes, edges = load_flow(data)
    entry = editor.replace_graph(nodes, edges)
    return _result(editor, entry, f"Imported {len(nodes)} nodes and {len(edges)} edges", "")


# ─────────────────────────────────────────────────────────────────────────────
# Read-only
# ─────────────────────────────────────────────────────────────────────────────


def save(editor: FlowEditor) -> dict[str, Any]:
    """Validate the current graph. Never mutates it."""
    return validate(editor.graph).to_dict()


def export_flow(editor: FlowEditor) -> dict[str, Any]:
    """The current graph in exchange format."""
    return serialize_graph(editor.graph)


__all__ = [
    "FlowDataError",
    "RequestError",
    "add_node",
    "apply_changes",
    "connect",
    "delete_edge",
    "delete_node",
    "delete_selected",
    "duplicate",
    "duplicate_selected",
    "export_flow",
    "get_state",
    "import_flow",
    "redo",
    "save",
    "select",
    "undo",
    "update_text",
]
