"""
path.py — Path Reconstruction
=============================
Turns the engine's predecessor map into the final start → end route
once the end node has been reached, and tags the route on the graph so
the renderer can draw it.
"""

import logging
from typing import List

from graph import Edge, InvalidState, AlgorithmExhausted
from algorithms.dijkstra import DijkstraEngine, INF

logger = logging.getLogger(__name__)


def reconstruct(engine: DijkstraEngine, end: int) -> List[int]:
    """
    Walk predecessor links from `end` back to the run's start.

    Returns the node ids start..end inclusive.  Raises InvalidState if the
    engine never reached `end`, AlgorithmExhausted if the walk exceeds the
    node count (a predecessor cycle).  While the run is still expanding,
    a reached-but-not-final end yields the best route known so far.
    """
    # distance_of raises InvalidState on an uninitialised engine
    reached = engine.distance_of(end) < INF
    start = engine.start
    if not reached:
        raise InvalidState(f"Node {end} was never reached from {start}")

    limit = engine.graph.node_count()
    path, cur, hops = [end], end, 0
    while cur != start:
        prev = engine.predecessor_of(cur)
        if prev is None:
            raise InvalidState(f"Node {cur} has no predecessor; path to {end} is incomplete")
        hops += 1
        if hops > limit:
            logger.error("predecessor walk from %s exceeded %d hops", end, limit)
            raise AlgorithmExhausted(f"Predecessor chain from {end} does not reach {start}")
        path.append(prev)
        cur = prev
    path.reverse()
    return path


def path_edges(engine: DijkstraEngine, path: List[int]) -> List[Edge]:
    """The exact edges that produced each hop's distance (parallel-edge safe)."""
    edges = []
    for node in path[1:]:
        eid = engine.predecessor_edge_of(node)
        if eid is None:
            raise InvalidState(f"Node {node} has no predecessor edge")
        edges.append(engine.graph.get_edge(eid))
    return edges


def path_cost(engine: DijkstraEngine, path: List[int]) -> float:
    return sum(e.cost for e in path_edges(engine, path))


def mark_final_path(engine: DijkstraEngine, path: List[int]) -> List[Edge]:
    """Set `on_final_path` on the route's edges; clear it everywhere else."""
    edges = path_edges(engine, path)
    on_path = {e.id for e in edges}
    for e in engine.graph.edges.values():
        e.on_final_path = e.id in on_path
    return edges
