"""Flow Editor - The single write surface of a flow graph.

Every change to the graph goes through ``FlowEditor``. Each effective
mutation records the pre-mutation graph in the history, clears the redo
stack, applies the change, and clears the selection only when the change
invalidates it. Rejected or no-op requests leave both graph and history
untouched and return None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from flowgraph.config import ConfigError
from flowgraph.graph.GraphNode import GraphNode, NodeKind, Position
from flowgraph.graph.model import ID_LENGTH_RANGE, FlowGraph, GraphSnapshot, check_integrity, new_id
from flowgraph.graph.mutations import History, MutationEntry
from flowgraph.graph.relations import Edge

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Editor settings, read from the [editor] and [history] config sections.

    Attributes:
        duplicate_offset: (dx, dy) applied to a duplicated node.
        allow_self_loops: Whether connect() accepts source == target.
        id_length: Length of generated node and edge ids.
        history_depth: Maximum undo steps kept (0 = unbounded).
    """

    duplicate_offset: tuple[float, float] = (40.0, 40.0)
    allow_self_loops: bool = False
    id_length: int = 8
    history_depth: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EditorConfig:
        """Create EditorConfig from a full configuration dictionary.

        Args:
            data: Merged configuration (see flowgraph.config).

        Returns:
            EditorConfig instance

        Raises:
            ConfigError: If a setting has the wrong shape or is out of range.
        """
        editor = data.get("editor", {})
        history = data.get("history", {})

        offset = editor.get("duplicate_offset", (40, 40))
        if (
            not isinstance(offset, (list, tuple))
            or len(offset) != 2
            or not all(_is_number(v) for v in offset)
        ):
            raise ConfigError(f"editor.duplicate_offset must be a pair of numbers, got {offset!r}")

        id_length = editor.get("id_length", 8)
        low, high = ID_LENGTH_RANGE
        if not _is_int(id_length) or not low <= id_length <= high:
            raise ConfigError(f"editor.id_length must be an integer from {low} to {high}, got {id_length!r}")

        max_depth = history.get("max_depth", 0)
        if not _is_int(max_depth) or max_depth < 0:
            raise ConfigError(f"history.max_depth must be 0 (unbounded) or a positive integer, got {max_depth!r}")

        return cls(
            duplicate_offset=(float(offset[0]), float(offset[1])),
            allow_self_loops=bool(editor.get("allow_self_loops", False)),
            id_length=id_length,
            history_depth=max_depth,
        )


def _is_int(value: Any) -> bool:
    # bool is an int subclass; reject it explicitly
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


@dataclass(frozen=True)
class NodeChange:
    """One node delta within an interactive gesture.

    Attributes:
        node_id: Node the change applies to.
        position: New position, if the node was moved.
        selected: True/False to select/deselect, None to leave alone.
        removed: True if the node was removed.
    """

    node_id: str
    position: Position | None = None
    selected: bool | None = None
    removed: bool = False


@dataclass(frozen=True)
class EdgeChange:
    """One edge delta within an interactive gesture."""

    edge_id: str
    removed: bool = False


@dataclass
class FlowEditor:
    """Owning handle over one editing session's graph.

    Holds the live graph, the selection (a weak reference by id) and the
    undo/redo history. The graph is exposed read-only; nodes and edges are
    immutable records, and the container's write primitives are private.

    Attributes:
        config: Editor settings.
    """

    config: EditorConfig = field(default_factory=EditorConfig)

    # Internal storage (prefixed) - excluded from constructor
    _graph: FlowGraph = field(default_factory=FlowGraph, init=False)
    _history: History = field(init=False)
    _selected_id: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._history = History(max_depth=self.config.history_depth)

    # ─────────────────────────────────────────────────────────────────────────
    # Read API
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def graph(self) -> FlowGraph:
        """The live graph. Read-only: mutate through editor operations."""
        return self._graph

    @property
    def history(self) -> History:
        """The undo/redo history."""
        return self._history

    def snapshot(self) -> GraphSnapshot:
        """Capture an independent snapshot of the current graph."""
        return self._graph.snapshot()

    @property
    def selected_id(self) -> str | None:
        """The selected node id, or None. May be stale; see selected_node."""
        return self._selected_id

    @property
    def selected_node(self) -> GraphNode | None:
        """Resolve the selection, or None if nothing (existing) is selected."""
        return self._graph.find_by_id(self._selected_id)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    # ─────────────────────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────────────────────

    def select(self, node_id: str | None) -> bool:
        """Select a node, or clear the selection with None.

        Selection is not part of the graph and is never recorded in history.

        Returns:
            False if node_id is unknown (selection left unchanged).
        """
        if node_id is None:
            self._selected_id = None
            return True
        if not self._graph.has_node(node_id):
            logger.debug("Ignoring selection of unknown node %s", node_id)
            return False
        self._selected_id = node_id
        return True

    def clear_selection(self) -> None:
        """Clear the selection."""
        self._selected_id = None

    # ─────────────────────────────────────────────────────────────────────────
    # Node operations
    # ─────────────────────────────────────────────────────────────────────────

    def add_node(
        self,
        kind: NodeKind,
        position: Position | None = None,
        text: str | None = None,
    ) -> MutationEntry:
        """Add a node with a fresh id.

        Args:
            kind: Node type.
            position: Canvas position (origin if omitted).
            text: Node text. Defaults to the kind's default text.

        Returns:
            MutationEntry whose target_id is the new node id.
        """
        node = GraphNode(
            id=self._fresh_id(),
            kind=kind,
            position=position or Position(),
            text=kind.default_text if text is None else text,
        )
        entry = self._history.record(self._graph, "add_node", node.id)
        self._graph._put_node(node)
        return entry

    def update_text(self, node_id: str, text: str) -> MutationEntry | None:
        """Replace the text of a node.

        Returns:
            MutationEntry, or None when the node does not exist or the
            text is unchanged (nothing is recorded then).
        """
        node = self._graph.find_by_id(node_id)
        if node is None:
            logger.debug("update_text: no node %s", node_id)
            return None
        if node.text == text:
            return None
        entry = self._history.record(self._graph, "update_text", node_id)
        self._graph._put_node(node.with_text(text))
        return entry

    def duplicate(self, node_id: str) -> MutationEntry | None:
        """Clone a node (without its edges) at an offset position.

        The clone gets a fresh id and becomes the selection.

        Returns:
            MutationEntry whose target_id is the clone's id, or None if the
            node does not exist.
        """
        node = self._graph.find_by_id(node_id)
        if node is None:
            logger.debug("duplicate: no node %s", node_id)
            return None
        dx, dy = self.config.duplicate_offset
        clone = GraphNode(
            id=self._fresh_id(),
            kind=node.kind,
            position=node.position.offset(dx, dy),
            text=node.text,
        )
        entry = self._history.record(self._graph, "duplicate", clone.id)
        self._graph._put_node(clone)
        self._selected_id = clone.id
        return entry

    def duplicate_selected(self) -> MutationEntry | None:
        """Duplicate the selected node, if any."""
        if self._selected_id is None:
            return None
        return self.duplicate(self._selected_id)

    def delete_node(self, node_id: str) -> MutationEntry | None:
        """Remove a node and every edge incident to it.

        Clears the selection if it referenced the node.

        Returns:
            MutationEntry, or None if the node does not exist.
        """
        if not self._graph.has_node(node_id):
            logger.debug("delete_node: no node %s", node_id)
            return None
        entry = self._history.record(self._graph, "delete_node", node_id)
        self._graph._drop_node(node_id)
        if self._selected_id == node_id:
            self._selected_id = None
        return entry

    def delete_selected(self) -> MutationEntry | None:
        """Remove the selected node. The selection is cleared afterwards."""
        if self._selected_id is None:
            return None
        entry = self.delete_node(self._selected_id)
        self._selected_id = None
        return entry

    # ─────────────────────────────────────────────────────────────────────────
    # Edge operations
    # ─────────────────────────────────────────────────────────────────────────

    def connect(
        self,
        source_id: str,
        source_handle: str | None,
        target_id: str,
    ) -> MutationEntry | None:
        """Connect an output of one node to another node.

        Any edge already leaving ``(source_id, source_handle)`` is replaced.
        The request is refused (None, nothing recorded) when either node is
        missing, the source is a terminal, the target is an entry, the
        source does not expose the handle, or it would create a disallowed
        self-loop.

        Returns:
            MutationEntry whose target_id is the new edge id, or None.
        """
        source = self._graph.find_by_id(source_id)
        target = self._graph.find_by_id(target_id)
        if source is None or target is None:
            logger.debug("connect: unknown endpoint %s -> %s", source_id, target_id)
            return None
        if not target.kind.has_input():
            logger.debug("connect: %s has no input", target)
            return None
        if not source.has_output(source_handle):
            logger.debug("connect: %s has no output %r", source, source_handle)
            return None
        if source_id == target_id and not self.config.allow_self_loops:
            logger.debug("connect: self-loop on %s refused", source)
            return None

        edge = Edge.between(self._fresh_id(), source_id, source_handle, target_id)
        entry = self._history.record(self._graph, "connect", edge.id)
        self._graph._drop_output(source_id, source_handle)
        self._graph._put_edge(edge)
        return entry

    def delete_edge(self, edge_id: str) -> MutationEntry | None:
        """Remove one edge.

        Returns:
            MutationEntry, or None if the edge does not exist.
        """
        if self._graph.find_edge(edge_id) is None:
            logger.debug("delete_edge: no edge %s", edge_id)
            return None
        entry = self._history.record(self._graph, "delete_edge", edge_id)
        self._graph._drop_edge(edge_id)
        return entry

    # ─────────────────────────────────────────────────────────────────────────
    # Bulk operations
    # ─────────────────────────────────────────────────────────────────────────

    def apply_changes(
        self,
        node_changes: Iterable[NodeChange] = (),
        edge_changes: Iterable[EdgeChange] = (),
    ) -> MutationEntry | None:
        """Apply the deltas of one interactive gesture as a single history entry.

        Moves, node removals (cascading to their edges) and edge removals
        are applied together. Selection flags only update the selection.
        Changes naming unknown ids are skipped.

        Returns:
            MutationEntry, or None if the gesture did not change the graph.
        """
        node_changes = list(node_changes)
        edge_changes = list(edge_changes)

        for change in node_changes:
            if change.removed or change.selected is None:
                continue
            if change.selected and self._graph.has_node(change.node_id):
                self._selected_id = change.node_id
            elif not change.selected and self._selected_id == change.node_id:
                self._selected_id = None

        moves: list[NodeChange] = []
        for change in node_changes:
            if change.removed or change.position is None:
                continue
            node = self._graph.find_by_id(change.node_id)
            if node is not None and node.position != change.position:
                moves.append(change)
        node_removals = [c.node_id for c in node_changes if c.removed and self._graph.has_node(c.node_id)]
        edge_removals = [
            c.edge_id for c in edge_changes if c.removed and self._graph.find_edge(c.edge_id) is not None
        ]
        if not (moves or node_removals or edge_removals):
            return None

        target = moves[0].node_id if moves else (node_removals or edge_removals)[0]
        entry = self._history.record(self._graph, "apply_changes", target)
        for change in moves:
            node = self._graph.find_by_id(change.node_id)
            self._graph._put_node(node.moved_to(change.position))
        for edge_id in edge_removals:
            self._graph._drop_edge(edge_id)
        for node_id in node_removals:
            if self._graph.has_node(node_id):
                self._graph._drop_node(node_id)
            if self._selected_id == node_id:
                self._selected_id = None
        return entry

    def replace_graph(self, nodes: Iterable[GraphNode], edges: Iterable[Edge]) -> MutationEntry:
        """Replace the whole graph (used by import).

        The candidate graph is checked before anything changes.

        Returns:
            MutationEntry recording the replacement.

        Raises:
            FlowDataError: If the nodes and edges are not a structurally
                valid graph. Graph, history and selection are untouched.
        """
        nodes = list(nodes)
        edges = list(edges)
        check_integrity(nodes, edges)
        entry = self._history.record(self._graph, "replace_graph")
        self._graph = FlowGraph.from_parts(nodes, edges)
        self._selected_id = None
        logger.info("Graph replaced: %d nodes, %d edges", len(nodes), len(edges))
        return entry

    # ─────────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────────

    def undo(self) -> MutationEntry | None:
        """Restore the graph as it was before the last mutation.

        Returns:
            The undone entry, or None if there is nothing to undo.
        """
        entry = self._history.undo(self._graph)
        if entry is not None:
            self._graph = FlowGraph.from_snapshot(entry.snapshot)
            self._selected_id = None
        return entry

    def redo(self) -> MutationEntry | None:
        """Re-apply the last undone mutation.

        Returns:
            The redone entry, or None if there is nothing to redo.
        """
        entry = self._history.redo(self._graph)
        if entry is not None:
            self._graph = FlowGraph.from_snapshot(entry.snapshot)
            self._selected_id = None
        return entry

    def _fresh_id(self) -> str:
        return new_id(self._graph.ids(), self.config.id_length)
