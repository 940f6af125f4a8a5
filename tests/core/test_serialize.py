"""Tests for Graph Serialization module."""

import json

import pytest

from flowgraph.graph import GraphSnapshot, MutationEntry, NodeKind
from flowgraph.graph.serialize import (
    NODE_TYPES,
    serialize_edge,
    serialize_graph,
    serialize_mutation_entry,
    serialize_node,
    to_json,
)

from tests.core.graph_test_helpers import make_edge, make_node


class TestSerializeNode:
    """Tests for serialize_node function."""

    def test_message_node(self):
        node = make_node("m1", NodeKind.MESSAGE, "Hello", x=10, y=20.5)

        assert serialize_node(node) == {
            "id": "m1",
            "type": "textNode",
            "position": {"x": 10.0, "y": 20.5},
            "data": {"text": "Hello"},
        }

    @pytest.mark.parametrize(
        "kind,type_name",
        [
            (NodeKind.ENTRY, "startNode"),
            (NodeKind.TERMINAL, "endNode"),
            (NodeKind.MESSAGE, "textNode"),
            (NodeKind.CONDITION, "conditionalNode"),
        ],
    )
    def test_type_names(self, kind, type_name):
        assert serialize_node(make_node("n", kind))["type"] == type_name

    def test_every_kind_has_type_name(self):
        assert set(NODE_TYPES) == set(NodeKind)


class TestSerializeEdge:
    """Tests for serialize_edge function."""

    def test_plain_edge(self):
        assert serialize_edge(make_edge("a", "b")) == {
            "id": "a-b",
            "source": "a",
            "sourceHandle": None,
            "target": "b",
            "label": None,
        }

    def test_condition_edge_carries_label(self):
        data = serialize_edge(make_edge("c", "b", "no"))
        assert data["sourceHandle"] == "no"
        assert data["label"] == "No"


class TestSerializeGraph:
    """Tests for serialize_graph and to_json."""

    def test_order_preserved(self, branching_graph):
        data = serialize_graph(branching_graph)
        assert [n["id"] for n in data["nodes"]] == [n.id for n in branching_graph.nodes]
        assert [e["id"] for e in data["edges"]] == ["s-c", "c-m", "c-e", "m-e"]

    def test_snapshot_serializes_like_graph(self, branching_graph):
        assert serialize_graph(branching_graph.snapshot()) == serialize_graph(branching_graph)

    def test_empty_graph(self):
        assert serialize_graph(GraphSnapshot()) == {"nodes": [], "edges": []}

    def test_to_json_is_valid_json(self, branching_graph):
        text = to_json(branching_graph)
        assert json.loads(text) == serialize_graph(branching_graph)
        assert "\n" in text

    def test_to_json_compact(self, branching_graph):
        assert "\n" not in to_json(branching_graph, indent=None)


class TestSerializeMutationEntry:
    def test_snapshot_omitted(self):
        entry = MutationEntry(operation="add_node", target_id="n1", snapshot=GraphSnapshot())
        data = serialize_mutation_entry(entry)
        assert data == {
            "id": entry.id,
            "operation": "add_node",
            "target_id": "n1",
            "timestamp": entry.timestamp.isoformat(),
        }
