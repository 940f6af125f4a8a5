"""Tests for FlowGraph, GraphSnapshot and structural integrity checks."""

import pytest

from flowgraph.graph import FlowDataError, FlowGraph, GraphSnapshot, NodeKind
from flowgraph.graph.model import check_integrity, new_id

from tests.core.graph_test_helpers import (
    build_graph,
    condition,
    end,
    ids_string,
    make_edge,
    message,
    start,
)


class TestFlowGraphReadApi:
    """Read-only accessors preserve insertion order."""

    def test_empty_graph(self):
        graph = FlowGraph()
        assert graph.nodes == ()
        assert graph.edges == ()
        assert graph.node_count() == 0

    def test_nodes_in_insertion_order(self, branching_graph):
        assert ids_string(branching_graph.nodes) == "s c m e"

    def test_find_by_id(self, branching_graph):
        assert branching_graph.find_by_id("c").kind == NodeKind.CONDITION
        assert branching_graph.find_by_id("missing") is None
        assert branching_graph.find_by_id(None) is None

    def test_find_edge(self, branching_graph):
        assert branching_graph.find_edge("c-m").source_handle == "yes"
        assert branching_graph.find_edge("nope") is None

    def test_nodes_by_kind(self, branching_graph):
        assert ids_string(branching_graph.nodes_by_kind(NodeKind.TERMINAL)) == "e"

    def test_outgoing_and_incoming(self, branching_graph):
        assert [e.target_id for e in branching_graph.outgoing_edges("c")] == ["m", "e"]
        assert [e.source_id for e in branching_graph.incoming_edges("e")] == ["c", "m"]

    def test_ids_cover_nodes_and_edges(self, branching_graph):
        assert {"s", "c", "m", "e", "s-c", "m-e"} <= branching_graph.ids()

    def test_accessors_return_tuples(self, branching_graph):
        assert isinstance(branching_graph.nodes, tuple)
        assert isinstance(branching_graph.edges, tuple)


class TestFlowGraphCopies:
    """Clones and snapshots share nothing with the live graph."""

    def test_clone_is_equal_but_independent(self, branching_graph):
        cloned = branching_graph.clone()
        assert cloned == branching_graph
        assert cloned is not branching_graph
        cloned._drop_node("m")
        assert branching_graph.has_node("m")

    def test_snapshot_is_deep_copy(self, branching_graph):
        snap = branching_graph.snapshot()
        assert isinstance(snap, GraphSnapshot)
        assert snap.nodes == branching_graph.nodes
        assert snap.nodes[0] is not branching_graph.nodes[0]
        assert snap.edges[0] is not branching_graph.edges[0]

    def test_from_snapshot_round_trip(self, branching_graph):
        restored = FlowGraph.from_snapshot(branching_graph.snapshot())
        assert restored == branching_graph

    def test_equality_respects_order(self):
        a = build_graph([start("s"), end("e")])
        b = build_graph([end("e"), start("s")])
        assert a != b


class TestWritePrimitives:
    """Private primitives used by the editor."""

    def test_drop_node_cascades_edges(self, branching_graph):
        removed = branching_graph._drop_node("c")
        assert {e.id for e in removed} == {"s-c", "c-m", "c-e"}
        assert [e.id for e in branching_graph.edges] == ["m-e"]

    def test_put_node_replaces_in_place(self, branching_graph):
        branching_graph._put_node(message("c", "now a message"))
        assert ids_string(branching_graph.nodes) == "s c m e"
        assert branching_graph.find_by_id("c").kind == NodeKind.MESSAGE

    def test_drop_output(self, branching_graph):
        removed = branching_graph._drop_output("c", "yes")
        assert [e.id for e in removed] == ["c-m"]
        assert branching_graph.find_edge("c-e") is not None


class TestNewId:
    def test_length(self):
        assert len(new_id(length=8)) == 8

    def test_avoids_taken(self):
        # With one hex character only 16 ids exist; all but one are taken
        taken = set("0123456789abcde")
        assert new_id(taken, length=1) == "f"

    @pytest.mark.parametrize("length", [0, -4, 33])
    def test_length_out_of_range(self, length):
        with pytest.raises(ValueError, match="between 1 and 32"):
            new_id(length=length)

    def test_exhausted_space_raises(self):
        # Every one-character id is taken; generation must give up
        with pytest.raises(RuntimeError, match="no free id"):
            new_id(set("0123456789abcdef"), length=1)


class TestCheckIntegrity:
    """check_integrity rejects shapes the editor cannot produce."""

    def test_valid_graph_passes(self, branching_graph):
        check_integrity(branching_graph.nodes, branching_graph.edges)

    def test_empty_graph_passes(self):
        check_integrity([], [])

    def test_duplicate_node_id(self):
        with pytest.raises(FlowDataError, match="duplicate node id 'a'"):
            check_integrity([message("a"), message("a")], [])

    def test_duplicate_edge_id(self):
        nodes = [start("s"), message("a"), message("b")]
        edges = [make_edge("s", "a", edge_id="x"), make_edge("a", "b", edge_id="x")]
        with pytest.raises(FlowDataError, match="duplicate edge id"):
            check_integrity(nodes, edges)

    def test_dangling_source(self):
        with pytest.raises(FlowDataError, match="unknown node 'ghost'"):
            check_integrity([end("e")], [make_edge("ghost", "e")])

    def test_dangling_target(self):
        with pytest.raises(FlowDataError, match="unknown node 'ghost'"):
            check_integrity([start("s")], [make_edge("s", "ghost")])

    def test_edge_into_entry(self):
        with pytest.raises(FlowDataError, match="enters entry node"):
            check_integrity([message("m"), start("s")], [make_edge("m", "s")])

    def test_edge_out_of_terminal(self):
        with pytest.raises(FlowDataError, match="not exposed by terminal"):
            check_integrity([end("e"), message("m")], [make_edge("e", "m")])

    def test_condition_requires_named_handle(self):
        with pytest.raises(FlowDataError, match="handle None"):
            check_integrity([condition("c"), end("e")], [make_edge("c", "e")])

    def test_two_edges_on_one_output(self):
        nodes = [start("s"), message("a"), message("b")]
        edges = [make_edge("s", "a"), make_edge("s", "b")]
        with pytest.raises(FlowDataError, match="more than one edge leaves 's'"):
            check_integrity(nodes, edges)

    def test_error_message_prefix(self):
        with pytest.raises(FlowDataError) as exc_info:
            check_integrity([message("a"), message("a")], [])
        assert str(exc_info.value).startswith("Invalid flow data")
        assert exc_info.value.detail == "duplicate node id 'a'"
