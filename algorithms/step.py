"""
step.py — Step Reports (the observation port)
==============================================
The engine never calls a renderer.  Each call to `DijkstraEngine.step()`
returns a StepReport instead: a frozen-in-time picture of what that one
expansion did, which the driver hands to whoever draws.

    • Which node was expanded, and which node comes next
    • Every edge examined, and whether it improved a distance
    • Which tentative costs changed (the "Cost: X" bubbles)
    • The full distance map, visited set and frontier after the step
    • Which line of pseudocode the step ended on
    • A plain-English explanation of *why* (learning mode)

Design decisions:
  - StepReport is a plain frozen dataclass.  It is a SNAPSHOT: the engine
    is the only writer; steppers / recorders / renderers are pure readers.
  - Unreached nodes appear in `distances` as float("inf").  Serialisers
    must map that to something their format supports.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


@dataclass(frozen=True)
class RelaxedEdge:
    """
    One edge examined during an expansion.

    Attributes:
        edge_id   : ID of the edge.
        source    : Tail node (the expanded node).
        target    : Head node.
        cost      : Edge cost as read at relaxation time.
        candidate : distance[source] + cost.
        improved  : True if candidate beat the target's previous distance.
    """

    edge_id:   int
    source:    int
    target:    int
    cost:      float
    candidate: float
    improved:  bool


@dataclass(frozen=True)
class StepReport:
    """
    Attributes:
        step_number     : 1-based index of this step in the run.
        expanded_node   : The node finalised by this step.
        relaxed_edges   : Every outgoing edge examined, in insertion order.
        next_node       : Node the following step will expand (None when terminal).
        terminal        : True on the last step of the run.
        found           : True if the run terminated by reaching the end node.
        updated_costs   : {node_id: new_distance} for nodes improved this step.
        distances       : {node_id: distance} for every node after this step.
        visited         : Finalised node ids, in expansion order.
        frontier        : Unvisited node ids with a finite distance.
        pseudocode_line : 0-based index into PSEUDOCODE the step ended on.
        explanation     : Human-readable "why" text for learning mode.
    """

    step_number:     int
    expanded_node:   int
    relaxed_edges:   List[RelaxedEdge]     = field(default_factory=list)
    next_node:       Optional[int]         = None
    terminal:        bool                  = False
    found:           bool                  = False
    updated_costs:   Dict[int, float]      = field(default_factory=dict)
    distances:       Dict[int, float]      = field(default_factory=dict)
    visited:         List[int]             = field(default_factory=list)
    frontier:        List[int]             = field(default_factory=list)
    pseudocode_line: int                   = 0
    explanation:     str                   = ""

    @property
    def improved_edges(self) -> List[RelaxedEdge]:
        return [r for r in self.relaxed_edges if r.improved]


@dataclass(frozen=True)
class FinalResult:
    """What `run_to_completion()` hands back once the engine is terminal."""

    state:        str
    found:        bool
    start:        int
    end:          int
    steps:        int
    distances:    Dict[int, float]          = field(default_factory=dict)
    predecessors: Dict[int, Optional[int]]  = field(default_factory=dict)


# Drivers call listeners with each new report; renderers subscribe here.
StepListener = Callable[[StepReport], None]
