"""
dijkstra.py — Dijkstra's Shortest-Path Engine
==============================================
Resumable, step-driven Dijkstra.  The engine owns all per-run state
(distances, predecessors, visited / unvisited) and advances exactly one
node expansion per `step()` call, returning a StepReport for the driver.
It never draws, sleeps or schedules anything: pacing belongs to whoever
calls `step()`.

State machine:
    READY  →  initialize()  →  EXPANDING
    EXPANDING  →  step()  →  EXPANDING | DONE_FOUND | DONE_UNREACHABLE
    any  →  initialize()  →  EXPANDING   (fresh run, same graph)

One expansion:
  1. u ← current  (start on the first call)
  2. Relax every outgoing edge of u in insertion order.  Every edge is
     reported, improving or not.
  3. Move u from unvisited to visited.
  4. u == end                                   → DONE_FOUND
  5. unvisited empty, or min distance there = ∞ → DONE_UNREACHABLE
  6. current ← the unvisited node whose distance is closest to that
     minimum.  The scan runs over unvisited in node creation order and
     only a strictly closer value replaces the candidate, so among exact
     ties the earliest-created node wins.

Correctness note: Dijkstra requires non-negative costs.  The Graph
refuses negative costs on insert; the exhaustion guard below is the
only runtime check beyond that.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from graph import Graph, InvalidState, AlgorithmExhausted
from algorithms.step import FinalResult, RelaxedEdge, StepReport

logger = logging.getLogger(__name__)

INF = float("inf")


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, start, end):",                              # 0
    "    dist ← {v: ∞ for v in V};  dist[start] ← 0",                # 1
    "    unvisited ← V;  current ← start",                           # 2
    "    loop:",                                                     # 3
    "        for (current, v, w) in out(current):",                  # 4
    "            if dist[current] + w < dist[v]:",                   # 5
    "                dist[v] ← dist[current] + w;  prev[v] ← current",  # 6
    "        unvisited.remove(current)",                             # 7
    "        if current == end: return FOUND",                       # 8
    "        m ← min(dist[v] for v in unvisited)",                   # 9
    "        if m == ∞: return UNREACHABLE",                         # 10
    "        current ← closest(unvisited, m)",                       # 11
]

LINE_FOUND       = 8
LINE_UNREACHABLE = 10
LINE_NEXT        = 11


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class EngineState(Enum):
    READY            = "ready"
    EXPANDING        = "expanding"
    DONE_FOUND       = "done_found"
    DONE_UNREACHABLE = "done_unreachable"


TERMINAL_STATES = (EngineState.DONE_FOUND, EngineState.DONE_UNREACHABLE)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class DijkstraEngine:
    """
    Attributes:
        graph : The Graph this engine reads.  Costs are read live on every
                relaxation, never cached.

    Not thread-safe: one logical thread of control per engine.  Several
    engines may share one graph as long as nobody edits costs mid-run.
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        self._state: EngineState = EngineState.READY

        self._start:   Optional[int] = None
        self._end:     Optional[int] = None
        self._current: Optional[int] = None

        self._distance:         Dict[int, float] = {}
        self._predecessor:      Dict[int, int]   = {}
        self._predecessor_edge: Dict[int, int]   = {}
        self._visited:          List[int]        = []
        self._unvisited:        List[int]        = []

        self._expansions:   int       = 0
        self._node_limit:   int       = 0
        self._last_relaxed: List[int] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self, start: int, end: int) -> None:
        """Reset run state and designate start / end on the graph."""
        # validates both ids before touching anything
        self.graph.designate(start, end)
        self.graph.reset_run_flags()

        self._start   = start
        self._end     = end
        self._current = start

        self._distance = {nid: INF for nid in self.graph.node_ids()}
        self._distance[start] = 0.0
        self._predecessor      = {}
        self._predecessor_edge = {}
        self._visited          = []
        self._unvisited        = self.graph.node_ids()

        self._expansions   = 0
        self._node_limit   = len(self._unvisited)
        self._last_relaxed = []
        self._state        = EngineState.EXPANDING

        logger.info("run initialised: start=%s end=%s nodes=%d", start, end, self._node_limit)

    def step(self) -> StepReport:
        """Expand the current node.  Valid only while EXPANDING."""
        if self._state is not EngineState.EXPANDING:
            raise InvalidState(f"step() needs state 'expanding', engine is '{self._state.value}'")

        if self._expansions >= self._node_limit:
            self._state = EngineState.DONE_UNREACHABLE
            logger.error("expansion guard tripped after %d expansions", self._expansions)
            raise AlgorithmExhausted(
                f"More than {self._node_limit} expansions without terminating"
            )

        u = self._current
        d_u = self._distance[u]

        # previous step's highlight is over
        for eid in self._last_relaxed:
            edge = self.graph.edges.get(eid)
            if edge is not None:
                edge.relaxed_this_step = False
        self._last_relaxed = []

        # -- relax every outgoing edge --
        relaxed: List[RelaxedEdge] = []
        updated: Dict[int, float] = {}
        for edge in self.graph.outgoing_edges(u):
            candidate = d_u + edge.cost
            improved  = candidate < self._distance.get(edge.target, INF)
            if improved:
                self._distance[edge.target]         = candidate
                self._predecessor[edge.target]      = u
                self._predecessor_edge[edge.target] = edge.id
                updated[edge.target]                = candidate
            edge.relaxed_this_step = True
            self._last_relaxed.append(edge.id)
            relaxed.append(RelaxedEdge(edge.id, edge.source, edge.target, edge.cost, candidate, improved))
            logger.debug(
                "relax %s→%s: %s + %s = %s (%s)",
                u, edge.target, d_u, edge.cost, candidate, "update" if improved else "no improvement",
            )

        # -- finalise u --
        self._unvisited.remove(u)
        self._visited.append(u)
        self._expansions += 1

        # -- decide what happens next --
        next_node: Optional[int] = None
        if u == self._end:
            self._state = EngineState.DONE_FOUND
            line = LINE_FOUND
            explanation = (
                f"Expanded end node {u}. Shortest distance = {d_u}. "
                f"Follow the predecessors back to {self._start} for the path."
            )
        else:
            lowest = self._lowest_unvisited()
            if lowest == INF:
                self._state = EngineState.DONE_UNREACHABLE
                line = LINE_UNREACHABLE
                explanation = (
                    f"Expanded {u}. No unvisited node has a finite cost left, "
                    f"so {self._end} is not reachable from {self._start}."
                )
            else:
                next_node = self._closest(lowest)
                self._current = next_node
                line = LINE_NEXT
                explanation = (
                    f"Expanded {u} (distance {d_u}): {len(relaxed)} edge(s) examined, "
                    f"{len(updated)} cost(s) improved. Next is {next_node}, "
                    f"the cheapest unvisited node at {lowest}."
                )

        terminal = self._state in TERMINAL_STATES
        if terminal:
            logger.info(
                "run finished: %s after %d expansion(s)", self._state.value, self._expansions
            )
        else:
            logger.debug("expanded %s, next %s", u, next_node)

        return StepReport(
            step_number=self._expansions,
            expanded_node=u,
            relaxed_edges=relaxed,
            next_node=next_node,
            terminal=terminal,
            found=self._state is EngineState.DONE_FOUND,
            updated_costs=updated,
            distances=dict(self._distance),
            visited=list(self._visited),
            frontier=[n for n in self._unvisited if self._distance.get(n, INF) < INF],
            pseudocode_line=line,
            explanation=explanation,
        )

    def run_to_completion(self) -> FinalResult:
        """Step until terminal, discarding the intermediate reports."""
        if self._state is EngineState.READY:
            raise InvalidState("initialize() must be called before run_to_completion()")
        while self._state is EngineState.EXPANDING:
            self.step()
        return self.result()

    def result(self) -> FinalResult:
        self._require_initialized()
        return FinalResult(
            state=self._state.value,
            found=self.found,
            start=self._start,
            end=self._end,
            steps=self._expansions,
            distances=dict(self._distance),
            predecessors=dict(self._predecessor),
        )

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    def distance_of(self, node: int) -> float:
        self._require_initialized()
        self.graph.get_node(node)
        return self._distance.get(node, INF)

    def predecessor_of(self, node: int) -> Optional[int]:
        self._require_initialized()
        self.graph.get_node(node)
        return self._predecessor.get(node)

    def predecessor_edge_of(self, node: int) -> Optional[int]:
        """ID of the edge that produced node's current best distance."""
        self._require_initialized()
        self.graph.get_node(node)
        return self._predecessor_edge.get(node)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def start(self) -> Optional[int]:
        return self._start

    @property
    def end(self) -> Optional[int]:
        return self._end

    @property
    def current(self) -> Optional[int]:
        return self._current

    @property
    def visited(self) -> Tuple[int, ...]:
        return tuple(self._visited)

    @property
    def unvisited(self) -> Tuple[int, ...]:
        return tuple(self._unvisited)

    @property
    def expansions(self) -> int:
        return self._expansions

    @property
    def node_limit(self) -> int:
        return self._node_limit

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def found(self) -> bool:
        return self._state is EngineState.DONE_FOUND

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _require_initialized(self) -> None:
        if self._state is EngineState.READY:
            raise InvalidState("Engine has not been initialised")

    def _lowest_unvisited(self) -> float:
        if not self._unvisited:
            return INF
        return min(self._distance.get(n, INF) for n in self._unvisited)

    def _closest(self, target: float) -> int:
        """Nearest-value scan over unvisited; the first exact match wins ties."""
        best, best_gap = self._unvisited[0], INF
        for n in self._unvisited:
            gap = abs(self._distance.get(n, INF) - target)
            if gap < best_gap:
                best, best_gap = n, gap
        return best
