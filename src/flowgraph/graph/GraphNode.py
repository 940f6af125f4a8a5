"""GraphNode - Node representation for flow graphs.

This module provides the core node data structures:
- NodeKind: Enum of node types with their handle layout
- Position: Canvas coordinates of a node
- GraphNode: Immutable node record (id, kind, position, text)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

HANDLE_YES = "yes"
HANDLE_NO = "no"


class NodeKind(Enum):
    """Types of nodes in a flow.

    - ENTRY: Start marker. Has no input handle.
    - TERMINAL: End marker. Has no output handle.
    - MESSAGE: Plain content node with one unnamed output.
    - CONDITION: Branching node with "yes" and "no" outputs.
    """

    ENTRY = "entry"
    TERMINAL = "terminal"
    MESSAGE = "message"
    CONDITION = "condition"

    def has_input(self) -> bool:
        """Check if nodes of this kind accept incoming edges."""
        return self is not NodeKind.ENTRY

    def output_handles(self) -> tuple[str | None, ...]:
        """Return the output handles exposed by this kind.

        Returns:
            ("yes", "no") for CONDITION, () for TERMINAL, and a single
            unnamed handle (None) for everything else.
        """
        if self is NodeKind.CONDITION:
            return (HANDLE_YES, HANDLE_NO)
        if self is NodeKind.TERMINAL:
            return ()
        return (None,)

    def carries_text(self) -> bool:
        """Check if the node text is user-authored content.

        Entry and Terminal nodes carry a fixed display label and are
        never considered empty.
        """
        return self in (NodeKind.MESSAGE, NodeKind.CONDITION)

    @property
    def default_text(self) -> str:
        """Text given to a freshly created node of this kind."""
        return _DEFAULT_TEXT[self]


_DEFAULT_TEXT = {
    NodeKind.ENTRY: "Start",
    NodeKind.TERMINAL: "End",
    NodeKind.MESSAGE: "Text message",
    NodeKind.CONDITION: "Condition",
}


@dataclass(frozen=True)
class Position:
    """Canvas coordinates of a node."""

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> Position:
        """Return a new position shifted by (dx, dy)."""
        return Position(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        """Return string representation for display."""
        return f"({self.x:g}, {self.y:g})"


@dataclass(frozen=True)
class GraphNode:
    """A node in the flow graph.

    Nodes are immutable. Edits produce a replacement node carrying the
    same id, so the live graph never shares a mutable object with the
    undo history.

    Attributes:
        id: Unique identifier within the graph. Never changes.
        kind: The type of node.
        position: Where the node sits on the canvas.
        text: Display text. User-authored for MESSAGE and CONDITION.
    """

    id: str
    kind: NodeKind
    position: Position = Position()
    text: str = ""

    @property
    def is_blank(self) -> bool:
        """True if this node carries user text that is empty once trimmed."""
        return self.kind.carries_text() and not self.text.strip()

    def has_output(self, handle: str | None) -> bool:
        """Check if this node exposes the given output handle."""
        return handle in self.kind.output_handles()

    def with_text(self, text: str) -> GraphNode:
        """Return a copy of this node with different text."""
        return replace(self, text=text)

    def moved_to(self, position: Position) -> GraphNode:
        """Return a copy of this node at a different position."""
        return replace(self, position=position)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.kind.value}:{self.id}"
