"""
algorithms/ — Shortest-path engine
==================================
    from algorithms import DijkstraEngine, EngineState, StepReport
    from algorithms import reconstruct, path_cost, mark_final_path

The engine is pull-based: a driver calls `step()` and renders the
returned StepReport however it likes.
"""

from algorithms.step     import StepReport, RelaxedEdge, FinalResult, StepListener
from algorithms.dijkstra import DijkstraEngine, EngineState, PSEUDOCODE
from algorithms.path     import reconstruct, path_edges, path_cost, mark_final_path

__all__ = [
    "StepReport",
    "RelaxedEdge",
    "FinalResult",
    "StepListener",
    "DijkstraEngine",
    "EngineState",
    "PSEUDOCODE",
    "reconstruct",
    "path_edges",
    "path_cost",
    "mark_final_path",
]
