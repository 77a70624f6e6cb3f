"""
graph.py — Graph Container & Generator
=======================================
Single source of truth for the graph.  The engine and the renderer
both talk to this object.

Responsibilities:
  1. Create nodes & directed edges          (add / get)
  2. Adjacency queries                      (outgoing_edges, edges_between, …)
  3. Cost upkeep                            (set_edge_cost, euclidean costs)
  4. Run designation                        (start / end roles, run flags)
  5. Graph-generation factory + text import (random, adjacency list)
  6. Serialisation round-trip               (to_dict / from_dict)

Design decisions:
  - Node and edge ids are sequential ints handed out by the graph, so the
    creation order IS the id order.  Nothing is ever removed.
  - A separate adjacency dict `_out[node_id] → [edge_id, …]` is maintained
    incrementally in insertion order; the engine relaxes edges in exactly
    that order, which keeps step-by-step runs reproducible.
  - The graph holds no algorithmic state (distances, predecessors).  Only
    role tags and the two per-edge observation flags are written by runs.
"""

import logging
import math
import random
from typing import Dict, List, Optional, Tuple

from graph.node import Node, NodeRole
from graph.edge import Edge
from graph.errors import InvalidReference

logger = logging.getLogger(__name__)


def _check_cost(cost: float) -> float:
    cost = float(cost)
    if math.isnan(cost) or math.isinf(cost) or cost < 0:
        raise ValueError(f"Edge cost must be a finite non-negative number, got {cost!r}")
    return cost


class Graph:
    """
    Attributes:
        nodes : {node_id: Node}   (insertion order == id order)
        edges : {edge_id: Edge}
        _out  : {node_id: [edge_id, …]} outgoing edges in insertion order
    """

    def __init__(self):
        self.nodes:  Dict[int, Node]      = {}
        self.edges:  Dict[int, Edge]      = {}
        self._out:   Dict[int, List[int]] = {}
        self._next_node_id: int = 0
        self._next_edge_id: int = 0

    # ==================================================================
    # NODES
    # ==================================================================
    def add_node(self, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> int:
        """Append a node and return its id (the next sequential integer)."""
        node_id = self._next_node_id
        self._next_node_id += 1
        self.nodes[node_id] = Node(node_id, x=x, y=y, label=label)
        self._out[node_id] = []
        return node_id

    def get_node(self, node_id: int) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise InvalidReference("node", node_id) from None

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, source: int, target: int, cost: float) -> int:
        """Add a directed edge source → target and return its id."""
        if source not in self.nodes:
            raise InvalidReference("node", source)
        if target not in self.nodes:
            raise InvalidReference("node", target)
        cost = _check_cost(cost)

        edge_id = self._next_edge_id
        self._next_edge_id += 1
        self.edges[edge_id] = Edge(edge_id, source, target, cost)
        self._out[source].append(edge_id)
        return edge_id

    def add_euclidean_edge(self, source: int, target: int) -> int:
        """Add an edge whose cost is the distance between the two node positions."""
        cost = self.get_node(source).distance_to(self.get_node(target))
        return self.add_edge(source, target, cost)

    def get_edge(self, edge_id: int) -> Edge:
        try:
            return self.edges[edge_id]
        except KeyError:
            raise InvalidReference("edge", edge_id) from None

    def set_edge_cost(self, edge_id: int, cost: float) -> None:
        """Change a cost in place.  A running engine sees it on its next relaxation."""
        self.get_edge(edge_id).cost = _check_cost(cost)

    def update_euclidean_costs(self) -> None:
        """Recompute every edge cost from the current node positions."""
        for e in self.edges.values():
            e.cost = self.nodes[e.source].distance_to(self.nodes[e.target])

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def outgoing_edges(self, node_id: int) -> List[Edge]:
        """Every edge leaving node_id, in insertion order."""
        if node_id not in self._out:
            raise InvalidReference("node", node_id)
        return [self.edges[eid] for eid in self._out[node_id]]

    def edges_between(self, source: int, target: int) -> List[Edge]:
        """All parallel edges source → target, in insertion order."""
        return [e for e in self.outgoing_edges(source) if e.target == target]

    # ==================================================================
    # RUN DESIGNATION (keep structure, touch only roles / flags)
    # ==================================================================
    def designate(self, start: int, end: int) -> None:
        """Tag start / end roles for the renderer.  Old tags are cleared first."""
        start_node = self.get_node(start)
        end_node   = self.get_node(end)
        for node in self.nodes.values():
            if node.role is not NodeRole.NORMAL:
                node.clear_role()
        start_node.set_start()
        # start == end keeps the START tag
        if end != start:
            end_node.set_end()

    def reset_run_flags(self) -> None:
        for edge in self.edges.values():
            edge.reset()

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls()
        for nd in data.get("nodes", []):
            node = Node.from_dict(nd)
            if node.id in g.nodes:
                raise ValueError(f"Duplicate node id {node.id}")
            g.nodes[node.id] = node
            g._out[node.id] = []
            g._next_node_id = max(g._next_node_id, node.id + 1)
        for ed in data.get("edges", []):
            edge = Edge.from_dict(ed)
            if edge.source not in g.nodes:
                raise InvalidReference("node", edge.source)
            if edge.target not in g.nodes:
                raise InvalidReference("node", edge.target)
            edge.cost = _check_cost(edge.cost)
            g.edges[edge.id] = edge
            g._out[edge.source].append(edge.id)
            g._next_edge_id = max(g._next_edge_id, edge.id + 1)
        return g

    # ==================================================================
    # GENERATORS — Factory class-methods
    # ==================================================================

    # ---------- Random Graph ----------
    @classmethod
    def generate_random(
        cls,
        num_nodes: int = 10,
        edge_probability: float = 0.3,
        weight_range: Optional[Tuple[int, int]] = None,
        seed: Optional[int] = None,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Erdős–Rényi style random directed graph.
        Each ordered pair gets an edge with probability `edge_probability`.
        Costs are integers from `weight_range`, or Euclidean distances
        between the node positions when no range is given.
        """
        rng = random.Random(seed)
        g = cls()
        margin = 40

        # place nodes in a circle with jitter so it looks natural
        ids = []
        for i in range(num_nodes):
            angle  = 2 * math.pi * i / num_nodes
            radius = min(canvas_w, canvas_h) * 0.35
            cx, cy = canvas_w / 2, canvas_h / 2
            x = cx + radius * math.cos(angle) + rng.uniform(-30, 30)
            y = cy + radius * math.sin(angle) + rng.uniform(-30, 30)
            x = max(margin, min(canvas_w - margin, x))
            y = max(margin, min(canvas_h - margin, y))
            ids.append(g.add_node(x, y))

        def connect(a: int, b: int) -> None:
            if weight_range is None:
                g.add_euclidean_edge(a, b)
            else:
                g.add_edge(a, b, rng.randint(*weight_range))

        for a in ids:
            for b in ids:
                if a != b and rng.random() < edge_probability:
                    connect(a, b)

        # guarantee a directed spanning chain so every node is reachable from the first one in it
        shuffled = list(ids)
        rng.shuffle(shuffled)
        for k in range(1, len(shuffled)):
            if not g.edges_between(shuffled[k - 1], shuffled[k]):
                connect(shuffled[k - 1], shuffled[k])

        logger.debug("generated random graph: %d nodes, %d edges (seed=%s)", g.node_count(), g.edge_count(), seed)
        return g

    # ---------- Import from Adjacency List (text) ----------
    @classmethod
    def from_adjacency_list(
        cls,
        text: str,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Parse a simple text adjacency list of directed edges.

        Supported formats (one source node per line):
            A: B C D            → A→B, A→C, A→D  (cost 1)
            A: B(3) C(7)        → A→B cost 3, A→C cost 7
            0 → 1,2,3           → alternate arrow syntax
            0 -> 1(5), 2(3)     → comma-separated with costs

        Labels get sequential ids in first-seen order and are laid out in a circle.
        """
        adjacency: Dict[str, List[Tuple[str, float]]] = {}

        for line in text.strip().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            # split on ':' or '→'
            if ":" in line:
                parts = line.split(":", 1)
            elif "→" in line:
                parts = line.split("→", 1)
            elif "->" in line:
                parts = line.split("->", 1)
            else:
                raise ValueError(f"Cannot parse adjacency line: {line!r}")

            src = parts[0].strip()
            if not src:
                raise ValueError(f"Missing source label: {line!r}")
            adjacency.setdefault(src, [])

            for token in parts[1].replace(",", " ").split():
                # parse optional cost: "B(3)" or "B"
                if "(" in token and token.endswith(")"):
                    tgt, w_str = token[:-1].split("(", 1)
                    w = float(w_str)
                else:
                    tgt, w = token, 1.0
                adjacency.setdefault(tgt, [])
                adjacency[src].append((tgt, w))

        g = cls()
        labels = list(adjacency.keys())
        n = len(labels)
        if n == 0:
            return g

        # layout in a circle
        cx, cy = canvas_w / 2, canvas_h / 2
        radius = min(canvas_w, canvas_h) * 0.35
        ids: Dict[str, int] = {}
        for i, label in enumerate(labels):
            angle = 2 * math.pi * i / n
            ids[label] = g.add_node(cx + radius * math.cos(angle), cy + radius * math.sin(angle), label=label)

        for src, targets in adjacency.items():
            for tgt, w in targets:
                g.add_edge(ids[src], ids[tgt], w)

        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()})"
