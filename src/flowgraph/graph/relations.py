"""Relations - Edges and connection semantics.

This module defines the directional links between flow nodes:
- Edge: A link from one output handle of a node to another node
- derive_label: Label rule for edges leaving a handle
"""

from __future__ import annotations

from dataclasses import dataclass

from flowgraph.graph.GraphNode import HANDLE_NO, HANDLE_YES

_HANDLE_LABELS = {
    HANDLE_YES: "Yes",
    HANDLE_NO: "No",
}


def derive_label(source_handle: str | None) -> str | None:
    """Return the label carried by an edge leaving ``source_handle``.

    Edges from a condition's "yes"/"no" outputs are labelled "Yes"/"No";
    all other edges are unlabelled.
    """
    if source_handle is None:
        return None
    return _HANDLE_LABELS.get(source_handle)


@dataclass(frozen=True)
class Edge:
    """A directional link between two flow nodes.

    Only one edge may leave a given ``(source_id, source_handle)`` pair.
    The label is derived from the handle and never authored directly.

    Attributes:
        id: Unique identifier within the graph.
        source_id: ID of the node the edge leaves.
        target_id: ID of the node the edge enters.
        source_handle: Output handle on the source ("yes"/"no" for
            conditions, None otherwise).
        label: Display label ("Yes", "No" or None).
    """

    id: str
    source_id: str
    target_id: str
    source_handle: str | None = None
    label: str | None = None

    @classmethod
    def between(
        cls,
        edge_id: str,
        source_id: str,
        source_handle: str | None,
        target_id: str,
    ) -> Edge:
        """Create an edge with its label derived from the handle."""
        return cls(
            id=edge_id,
            source_id=source_id,
            target_id=target_id,
            source_handle=source_handle,
            label=derive_label(source_handle),
        )

    @property
    def output(self) -> tuple[str, str | None]:
        """The ``(source_id, source_handle)`` pair this edge occupies."""
        return (self.source_id, self.source_handle)

    def touches(self, node_id: str) -> bool:
        """Check if the edge starts or ends at ``node_id``."""
        return self.source_id == node_id or self.target_id == node_id

    def __str__(self) -> str:
        """Human-readable representation."""
        handle = f".{self.source_handle}" if self.source_handle else ""
        return f"{self.source_id}{handle} --> {self.target_id}"
