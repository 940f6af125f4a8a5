"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def editor():
    """Fresh FlowEditor with default settings."""
    from flowgraph.graph import FlowEditor

    return FlowEditor()


@pytest.fixture
def linear():
    """Editor holding Start -> Message -> End, with the node ids."""
    from tests.core.graph_test_helpers import linear_editor

    return linear_editor()


@pytest.fixture
def branching_graph():
    """Start -> Condition, yes -> Message -> End, no -> End."""
    from tests.core.graph_test_helpers import (
        build_graph,
        condition,
        end,
        make_edge,
        message,
        start,
    )

    return build_graph(
        [start("s"), condition("c"), message("m"), end("e")],
        [
            make_edge("s", "c"),
            make_edge("c", "m", "yes"),
            make_edge("c", "e", "no"),
            make_edge("m", "e"),
        ],
    )
