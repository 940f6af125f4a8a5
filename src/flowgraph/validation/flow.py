"""Flow validation - Structural checks run when a flow is saved.

Checks run in a fixed priority order; the first failing check decides
the reported reason:

1. multiple roots (only when the flow has more than one node)
2. blank text on a message or condition node
3. a directed cycle
4. entry count other than one
5. no terminal node
6. a node unreachable from the entry (only with exactly one entry)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from flowgraph.graph.GraphNode import NodeKind
from flowgraph.graph.queries import adjacency, has_cycle, reachable_from

if TYPE_CHECKING:
    from flowgraph.graph.model import FlowGraph, GraphSnapshot

SAVED = "Flow saved successfully."
MULTIPLE_ROOTS = "Multiple starting nodes detected."
EMPTY_TEXT = "Some nodes have empty text."
CYCLE = "Cycle detected in flow."
START_COUNT = "There must be exactly one Start node."
END_COUNT = "Add at least one End node."
UNREACHABLE = "Some nodes are not reachable from Start."


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a flow.

    Attributes:
        ok: True if every check passed.
        reason: Why validation failed (None on success).
    """

    ok: bool
    reason: str | None = None

    @property
    def message(self) -> str:
        """The success message, or the failure reason."""
        return SAVED if self.ok else (self.reason or "")

    def to_dict(self) -> dict[str, object]:
        """JSON-ready form used by the CLI and REST surfaces."""
        return {"ok": self.ok, "message": self.message, "status": format_status(self)}


def format_status(result: ValidationResult) -> str:
    """Render the one-line status shown after a save attempt."""
    if result.ok:
        return result.message
    return f"Error: {result.message}"


def validate(graph: FlowGraph | GraphSnapshot) -> ValidationResult:
    """Validate a flow graph. Never mutates it.

    Args:
        graph: Live graph or snapshot.

    Returns:
        ValidationResult with the first failing reason, if any.
    """
    nodes = graph.nodes
    adj = adjacency(graph)

    # Single pass over the nodes
    has_incoming = {edge.target_id for edge in graph.edges}
    root_count = 0
    blank = False
    entry_ids: list[str] = []
    terminal_count = 0
    for node in nodes:
        if node.id not in has_incoming:
            root_count += 1
        if node.is_blank:
            blank = True
        if node.kind == NodeKind.ENTRY:
            entry_ids.append(node.id)
        elif node.kind == NodeKind.TERMINAL:
            terminal_count += 1

    if len(nodes) > 1 and root_count > 1:
        return ValidationResult(False, MULTIPLE_ROOTS)
    if blank:
        return ValidationResult(False, EMPTY_TEXT)
    if has_cycle(graph, adj):
        return ValidationResult(False, CYCLE)
    if len(entry_ids) != 1:
        return ValidationResult(False, START_COUNT)
    if terminal_count < 1:
        return ValidationResult(False, END_COUNT)
    reached = reachable_from(graph, entry_ids[0], adj)
    if any(node.id not in reached for node in nodes):
        return ValidationResult(False, UNREACHABLE)
    return ValidationResult(True)
