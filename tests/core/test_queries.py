"""Tests for structural queries (roots, adjacency, reachability, cycles)."""

from flowgraph.graph.queries import adjacency, has_cycle, reachable_from, roots_of

from tests.core.graph_test_helpers import (
    build_graph,
    end,
    ids_string,
    make_edge,
    message,
    start,
)


class TestRootsOf:
    def test_empty_graph(self):
        assert roots_of(build_graph([])) == []

    def test_single_root(self, branching_graph):
        assert ids_string(roots_of(branching_graph)) == "s"

    def test_every_isolated_node_is_a_root(self):
        graph = build_graph([start("s"), message("a"), end("e")])
        assert ids_string(roots_of(graph)) == "s a e"

    def test_works_on_snapshots(self, branching_graph):
        assert ids_string(roots_of(branching_graph.snapshot())) == "s"


class TestAdjacency:
    def test_every_node_has_entry(self):
        graph = build_graph([start("s"), end("e")])
        assert adjacency(graph) == {"s": [], "e": []}

    def test_handles_each_contribute(self, branching_graph):
        adj = adjacency(branching_graph)
        assert adj["c"] == ["m", "e"]
        assert adj["m"] == ["e"]
        assert adj["e"] == []

    def test_multi_edges_to_same_target(self):
        from tests.core.graph_test_helpers import condition

        graph = build_graph(
            [condition("c"), end("e")],
            [make_edge("c", "e", "yes"), make_edge("c", "e", "no", edge_id="c-e-no")],
        )
        assert adjacency(graph)["c"] == ["e", "e"]

    def test_dangling_edges_ignored(self):
        graph = build_graph([start("s")], [make_edge("s", "ghost")])
        assert adjacency(graph) == {"s": []}


class TestReachableFrom:
    def test_includes_start(self):
        graph = build_graph([start("s")])
        assert reachable_from(graph, "s") == {"s"}

    def test_follows_all_branches(self, branching_graph):
        assert reachable_from(branching_graph, "s") == {"s", "c", "m", "e"}

    def test_from_middle(self, branching_graph):
        assert reachable_from(branching_graph, "m") == {"m", "e"}

    def test_isolated_node_not_reached(self):
        graph = build_graph(
            [start("s"), end("e"), message("lonely")],
            [make_edge("s", "e")],
        )
        assert reachable_from(graph, "s") == {"s", "e"}

    def test_terminates_on_cycles(self):
        graph = build_graph(
            [message("a"), message("b")],
            [make_edge("a", "b"), make_edge("b", "a")],
        )
        assert reachable_from(graph, "a") == {"a", "b"}


class TestHasCycle:
    def test_empty_graph(self):
        assert not has_cycle(build_graph([]))

    def test_dag(self, branching_graph):
        assert not has_cycle(branching_graph)

    def test_diamond_is_not_a_cycle(self, branching_graph):
        # c reaches e both directly and through m
        assert not has_cycle(branching_graph)

    def test_two_node_cycle(self):
        graph = build_graph(
            [start("s"), message("a")],
            [make_edge("s", "a"), make_edge("a", "s")],
        )
        assert has_cycle(graph)

    def test_self_loop(self):
        graph = build_graph([message("a")], [make_edge("a", "a")])
        assert has_cycle(graph)

    def test_cycle_in_second_component(self):
        graph = build_graph(
            [start("s"), end("e"), message("a"), message("b"), message("c")],
            [
                make_edge("s", "e"),
                make_edge("a", "b"),
                make_edge("b", "c"),
                make_edge("c", "a"),
            ],
        )
        assert has_cycle(graph)

    def test_long_chain_does_not_exhaust_stack(self):
        count = 5000
        nodes = [message(f"n{i}") for i in range(count)]
        edges = [make_edge(f"n{i}", f"n{i + 1}") for i in range(count - 1)]
        graph = build_graph(nodes, edges)
        assert not has_cycle(graph)
        graph._put_edge(make_edge(f"n{count - 1}", "n0"))
        assert has_cycle(graph)
