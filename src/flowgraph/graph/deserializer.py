"""Graph Deserialization - Import flow graphs from the exchange format.

Parses the ``{nodes, edges}`` document produced by
``flowgraph.graph.serialize`` (or by the browser flow builder) into
nodes and edges ready for ``FlowEditor.replace_graph``. Nothing is
partially applied: any problem raises ``FlowDataError``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from flowgraph.graph.GraphNode import GraphNode, NodeKind, Position
from flowgraph.graph.model import FlowDataError, check_integrity, new_id
from flowgraph.graph.relations import Edge
from flowgraph.graph.serialize import NODE_TYPES

_KINDS_BY_TYPE: dict[str, NodeKind] = {name: kind for kind, name in NODE_TYPES.items()}
_KINDS_BY_TYPE.update({kind.value: kind for kind in NodeKind})


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise FlowDataError(f"{what} must be a non-empty string")
    return value


def _parse_number(value: Any, what: str) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FlowDataError(f"{what} must be a number")
    return float(value)


def _parse_node(raw: Any, index: int) -> GraphNode:
    """Parse one node record."""
    if not isinstance(raw, dict):
        raise FlowDataError(f"node #{index} is not an object")
    node_id = _require_str(raw.get("id"), f"node #{index} id")

    type_name = raw.get("type")
    kind = _KINDS_BY_TYPE.get(type_name) if isinstance(type_name, str) else None
    if kind is None:
        raise FlowDataError(f"node '{node_id}' has unknown type {type_name!r}")

    raw_position = raw.get("position", {"x": 0, "y": 0})
    if not isinstance(raw_position, dict):
        raise FlowDataError(f"node '{node_id}' position is not an object")
    position = Position(
        x=_parse_number(raw_position.get("x", 0), f"node '{node_id}' position.x"),
        y=_parse_number(raw_position.get("y", 0), f"node '{node_id}' position.y"),
    )

    data = raw.get("data") or {}
    if not isinstance(data, dict):
        raise FlowDataError(f"node '{node_id}' data is not an object")
    text = data.get("text")
    if text is None:
        text = "" if kind.carries_text() else kind.default_text
    elif not isinstance(text, str):
        raise FlowDataError(f"node '{node_id}' text is not a string")

    return GraphNode(id=node_id, kind=kind, position=position, text=text)


def _parse_edge(raw: Any, index: int, taken: set[str]) -> Edge:
    """Parse one edge record. Missing ids are generated; labels are re-derived."""
    if not isinstance(raw, dict):
        raise FlowDataError(f"edge #{index} is not an object")
    source_id = _require_str(raw.get("source"), f"edge #{index} source")
    target_id = _require_str(raw.get("target"), f"edge #{index} target")
    handle = raw.get("sourceHandle")
    if handle is not None and not isinstance(handle, str):
        raise FlowDataError(f"edge #{index} sourceHandle is not a string")

    edge_id = raw.get("id")
    if edge_id is None:
        edge_id = new_id(taken)
    else:
        edge_id = _require_str(edge_id, f"edge #{index} id")
    taken.add(edge_id)
    return Edge.between(edge_id, source_id, handle or None, target_id)


def load_flow(data: Any) -> tuple[list[GraphNode], list[Edge]]:
    """Parse an exchange-format document.

    Args:
        data: Decoded JSON document.

    Returns:
        Tuple of (nodes, edges) forming a structurally valid graph.

    Raises:
        FlowDataError: If the document is malformed or the graph it
            describes breaks a structural rule.
    """
    if not isinstance(data, dict):
        raise FlowDataError("document is not an object")
    raw_nodes = data.get("nodes")
    raw_edges = data.get("edges", [])
    if not isinstance(raw_nodes, list):
        raise FlowDataError("'nodes' must be a list")
    if not isinstance(raw_edges, list):
        raise FlowDataError("'edges' must be a list")

    nodes = [_parse_node(raw, i) for i, raw in enumerate(raw_nodes)]
    taken = {node.id for node in nodes}
    taken.update(e["id"] for e in raw_edges if isinstance(e, dict) and isinstance(e.get("id"), str))
    edges = [_parse_edge(raw, i, taken) for i, raw in enumerate(raw_edges)]

    check_integrity(nodes, edges)
    return nodes, edges


def loads_flow(text: str) -> tuple[list[GraphNode], list[Edge]]:
    """Parse exchange-format JSON text.

    Raises:
        FlowDataError: If the text is not JSON or not a valid flow.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FlowDataError(f"not valid JSON ({e.msg} at line {e.lineno})") from e
    return load_flow(data)


def load_flow_file(path: Path) -> tuple[list[GraphNode], list[Edge]]:
    """Read and parse an exchange-format file.

    Raises:
        OSError: If the file cannot be read.
        FlowDataError: If its content is not a valid flow.
    """
    return loads_flow(Path(path).read_text(encoding="utf-8"))
