"""Mutation history for flow graphs.

This module provides the snapshot-based undo/redo machinery used by
``FlowEditor``:
- MutationEntry: One history record (operation tag plus graph snapshot)
- History: Past and future stacks giving linear undo/redo
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from flowgraph.graph.model import FlowGraph, GraphSnapshot

logger = logging.getLogger(__name__)


@dataclass
class MutationEntry:
    """Single history record.

    Entries on the past stack hold the graph as it was *before* the
    tagged operation; entries on the future stack hold the graph as it
    was *after* it.

    Attributes:
        operation: Operation type (e.g., "add_node", "connect").
        target_id: Primary target of the mutation (node or edge id, or "").
        snapshot: Deep copy of the graph captured for this entry.
        id: Unique mutation ID (UUID4).
        timestamp: When the entry was recorded.
    """

    operation: str
    target_id: str
    snapshot: GraphSnapshot = field(repr=False)
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"[{self.id[:8]}] {self.operation}({self.target_id})"


class History:
    """Linear undo/redo over graph snapshots.

    Both stacks are ordered oldest first. Recording a new mutation
    discards the future stack, since the timeline has branched.

    Example:
        >>> history = History()
        >>> entry = history.record(graph, "add_node", "a1b2c3d4")
        >>> history.can_undo
        True
    """

    def __init__(self, max_depth: int = 0) -> None:
        """Initialize empty stacks.

        Args:
            max_depth: Maximum number of undo steps kept. 0 means unbounded.

        Raises:
            ValueError: If max_depth is negative.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be 0 (unbounded) or positive, got {max_depth}")
        self.max_depth = max_depth
        self._past: list[MutationEntry] = []
        self._future: list[MutationEntry] = []

    @property
    def can_undo(self) -> bool:
        """True if there is anything to undo."""
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        """True if there is anything to redo."""
        return bool(self._future)

    def iter_past(self) -> Iterator[MutationEntry]:
        """Iterate past entries, oldest first."""
        yield from self._past

    def iter_future(self) -> Iterator[MutationEntry]:
        """Iterate future entries, oldest first."""
        yield from self._future

    def __len__(self) -> int:
        """Return the number of undoable entries."""
        return len(self._past)

    def record(self, graph: FlowGraph, operation: str, target_id: str = "") -> MutationEntry:
        """Record the graph as it stands before a mutation.

        Args:
            graph: The live graph, not yet mutated.
            operation: Operation type about to be applied.
            target_id: Primary target of the operation.

        Returns:
            The new past entry.
        """
        entry = MutationEntry(operation=operation, target_id=target_id, snapshot=graph.snapshot())
        self._past.append(entry)
        self._future.clear()
        if self.max_depth > 0 and len(self._past) > self.max_depth:
            dropped = len(self._past) - self.max_depth
            del self._past[:dropped]
            logger.debug("History bound %d reached, dropped %d entries", self.max_depth, dropped)
        return entry

    def undo(self, current: FlowGraph) -> MutationEntry | None:
        """Step back one entry.

        Args:
            current: The live graph, pushed onto the future stack.

        Returns:
            The popped past entry whose snapshot becomes the current graph,
            or None if there is nothing to undo.
        """
        if not self._past:
            return None
        entry = self._past.pop()
        self._future.append(
            MutationEntry(operation=entry.operation, target_id=entry.target_id, snapshot=current.snapshot())
        )
        return entry

    def redo(self, current: FlowGraph) -> MutationEntry | None:
        """Step forward one entry.

        Args:
            current: The live graph, pushed onto the past stack.

        Returns:
            The popped future entry whose snapshot becomes the current
            graph, or None if there is nothing to redo.
        """
        if not self._future:
            return None
        entry = self._future.pop()
        self._past.append(
            MutationEntry(operation=entry.operation, target_id=entry.target_id, snapshot=current.snapshot())
        )
        return entry

    def clear(self) -> None:
        """Discard both stacks."""
        self._past.clear()
        self._future.clear()


__all__ = ["MutationEntry", "History"]
