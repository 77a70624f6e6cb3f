"""
edge.py — Directed Graph Edge
=============================
Connects two nodes in one direction.  Carries a cost and two transient
flags so the renderer can colour-code edges as the engine touches them.

Design decisions:
  - `source` and `target` are node ids, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - `cost` is mutable.  The renderer may recompute it when nodes move;
    the engine reads the current value every time it relaxes the edge.
  - A bidirectional link is two Edge objects.  Parallel edges between
    the same ordered pair are allowed and kept separate.
"""

from typing import Dict, Any


class Edge:
    """
    Attributes:
        id                : Sequential integer assigned by the Graph.
        source            : ID of the tail node.
        target            : ID of the head node.
        cost              : Non-negative numeric cost.
        relaxed_this_step : True while the edge belongs to the latest step's relaxations.
        on_final_path     : True once the edge is part of the reconstructed path.
    """

    __slots__ = ("id", "source", "target", "cost", "relaxed_this_step", "on_final_path")

    def __init__(self, edge_id: int, source: int, target: int, cost: float):
        self.id:                int   = edge_id
        self.source:            int   = source
        self.target:            int   = target
        self.cost:              float = cost
        self.relaxed_this_step: bool  = False
        self.on_final_path:     bool  = False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Wipe observation flags between runs."""
        self.relaxed_this_step = False
        self.on_final_path     = False

    def is_self_loop(self) -> bool:
        return self.source == self.target

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":                self.id,
            "source":            self.source,
            "target":            self.target,
            "cost":              self.cost,
            "relaxed_this_step": self.relaxed_this_step,
            "on_final_path":     self.on_final_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        edge = cls(
            edge_id=int(data["id"]),
            source=int(data["source"]),
            target=int(data["target"]),
            cost=float(data.get("cost", 1.0)),
        )
        edge.relaxed_this_step = bool(data.get("relaxed_this_step", False))
        edge.on_final_path     = bool(data.get("on_final_path", False))
        return edge

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.id}: {self.source} → {self.target}, cost={self.cost})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
