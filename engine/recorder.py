"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete run (all StepReports), then computes the metrics a
UI shows in its analytics panel.

Usage:
    rec = Recorder()
    rec.start(graph, start=0, end=5)
    metrics = rec.run_to_completion()    # drives the engine to the end
    rec.export()                         # serialisable snapshot for save/replay
"""

import math
import time
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any

from graph import Graph, InvalidState
from algorithms import StepReport, path_cost
from engine.stepper import Stepper


# ---------------------------------------------------------------------------
# Metrics dataclass — what the analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    start:           int       = 0
    end:             int       = 0
    nodes_expanded:  int       = 0
    edges_relaxed:   int       = 0          # every edge examined
    edges_improved:  int       = 0          # edges that lowered a distance
    path:            List[int] = field(default_factory=list)
    path_length:     int       = 0          # number of edges on the final path
    path_cost:       float     = 0.0        # total cost of the final path
    total_steps:     int       = 0
    wall_time_ms:    float     = 0.0
    path_found:      bool      = False


def finite(value: float) -> Optional[float]:
    """JSON has no infinity: unreached distances become None."""
    return value if math.isfinite(value) else None


def report_to_dict(report: StepReport) -> Dict[str, Any]:
    return {
        "step_number":     report.step_number,
        "expanded_node":   report.expanded_node,
        "relaxed_edges": [
            {
                "edge_id":   r.edge_id,
                "source":    r.source,
                "target":    r.target,
                "cost":      r.cost,
                "candidate": r.candidate,
                "improved":  r.improved,
            }
            for r in report.relaxed_edges
        ],
        "next_node":       report.next_node,
        "terminal":        report.terminal,
        "found":           report.found,
        "updated_costs":   {str(k): v for k, v in report.updated_costs.items()},
        "distances":       {str(k): finite(v) for k, v in report.distances.items()},
        "visited":         report.visited,
        "frontier":        report.frontier,
        "pseudocode_line": report.pseudocode_line,
        "explanation":     report.explanation,
    }


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        reports : Full list of StepReports from the run.
        metrics : Computed RunMetrics (available after run_to_completion).
        stepper : The underlying Stepper (if you want live step-by-step access).
    """

    def __init__(self):
        self.reports:   List[StepReport]     = []
        self.metrics:   Optional[RunMetrics] = None
        self.stepper:   Optional[Stepper]    = None

        self._graph:      Optional[Graph] = None
        self._start:      int             = 0
        self._end:        int             = 0
        self._start_time: float           = 0.0

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, graph: Graph, start: int, end: int) -> None:
        """Initialise the engine and stepper for this run."""
        self._graph   = graph
        self._start   = start
        self._end     = end
        self.reports  = []
        self.metrics  = None

        self.stepper = Stepper(graph)
        self.stepper.start(start, end)

    def run_to_completion(self) -> RunMetrics:
        """Drive the engine to a terminal state, record every report, compute metrics."""
        if self.stepper is None:
            raise InvalidState("Call start() first.")

        self._start_time = time.monotonic()
        self.stepper.jump_to_end()
        self.reports = list(self.stepper.reports)
        wall_ms = (time.monotonic() - self._start_time) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "start":   self._start,
            "end":     self._end,
            "graph":   self._graph.to_dict() if self._graph else {},
            "metrics": asdict(self.metrics) if self.metrics else {},
            "steps":   [report_to_dict(r) for r in self.reports],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        last = self.reports[-1] if self.reports else None
        path = list(self.stepper.path)

        return RunMetrics(
            start=self._start,
            end=self._end,
            nodes_expanded=len(last.visited) if last else 0,
            edges_relaxed=sum(len(r.relaxed_edges) for r in self.reports),
            edges_improved=sum(len(r.improved_edges) for r in self.reports),
            path=path,
            path_length=len(path) - 1 if len(path) > 1 else 0,
            path_cost=path_cost(self.stepper.engine, path) if path else 0.0,
            total_steps=len(self.reports),
            wall_time_ms=round(wall_ms, 2),
            path_found=bool(last and last.found),
        )
