from enum import Enum
from typing import Optional, Dict, Any


# ---------------------------------------------------------------------------
# Node Role Enum — the only node attribute the engine ever writes
# ---------------------------------------------------------------------------
class NodeRole(Enum):
    NORMAL = "normal"   # plain white
    START  = "start"    # red — where the run begins
    END    = "end"      # blue — where the run wants to go


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Immutable identity (id), role tag, and display attributes.

    Attributes:
        id       : Sequential integer assigned by the Graph in creation order.
        label    : Human-readable name shown by the renderer (defaults to str(id)).
        x, y     : Canvas coordinates.  Owned by the renderer; the engine never
                   reads them.  Euclidean edge costs are derived from them.
        role     : NodeRole, set when a run designates start / end.
    """

    __slots__ = ("id", "label", "x", "y", "role")

    def __init__(
        self,
        node_id: int,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id:    int      = node_id
        self.label: str      = label or str(node_id)
        self.x:     float    = x
        self.y:     float    = y
        self.role:  NodeRole = NodeRole.NORMAL

    # ------------------------------------------------------------------
    # Role helpers
    # ------------------------------------------------------------------
    def set_start(self) -> None:
        self.role = NodeRole.START

    def set_end(self) -> None:
        self.role = NodeRole.END

    def clear_role(self) -> None:
        self.role = NodeRole.NORMAL

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Node") -> float:
        """Euclidean distance — the demo graph's edge cost."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
            "role":  self.role.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        node = cls(int(data["id"]), x=data.get("x", 0.0), y=data.get("y", 0.0), label=data.get("label"))
        node.role = NodeRole(data.get("role", NodeRole.NORMAL.value))
        return node

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, role={self.role.value}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
