"""
stepper.py — Step-by-Step Playback Driver
==========================================
The Stepper is the ONLY object a UI needs during a run.  It owns one
DijkstraEngine, buffers every StepReport it has pulled (enabling rewind),
and exposes a clean next/prev/goto API.

State machine:
    IDLE     →  start()            →  RUNNING
    RUNNING  →  (engine terminal)  →  FINISHED
    any      →  reset()            →  IDLE

Comment bubbles:
  Every node whose cost improved gets a "Cost: X" comment.  A comment is
  *fresh* for `comment_fade_steps` steps after the improvement, then fades.
  Freshness is counted in steps, not wall-clock time, so rewinding
  through the buffer shows exactly what was shown the first time.

Thread safety:
  This class is NOT thread-safe.  Drive it from a single thread.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from graph import Graph, InvalidState
from algorithms import DijkstraEngine, StepReport, StepListener, reconstruct, mark_final_path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    RUNNING  = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class NodeComment:
    node_id:     int
    text:        str
    step_number: int     # step that produced the cost
    fresh:       bool    # still highlighted at the displayed step


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        engine      : The DijkstraEngine being driven.
        reports     : List of all StepReports pulled so far (buffer for rewind).
        current_idx : Index into `reports` that is currently displayed
                      (-1 = the initial state, before any step).
        path        : Final route once the run finished with the end found.
        on_step     : Optional listener fired every time the displayed report changes.
    """

    def __init__(
        self,
        graph: Graph,
        on_step: Optional[StepListener] = None,
        comment_fade_steps: int = 1,
    ):
        self.graph:       Graph              = graph
        self.engine:      DijkstraEngine     = DijkstraEngine(graph)
        self.reports:     List[StepReport]   = []
        self.current_idx: int                = -1
        self.state:       StepperState       = StepperState.IDLE
        self.path:        List[int]          = []
        self.on_step:     Optional[StepListener] = on_step
        self.comment_fade_steps: int         = max(1, comment_fade_steps)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, start: int, end: int) -> None:
        """Initialise a fresh run.  No step is taken yet."""
        self.engine.initialize(start, end)
        self.reports     = []
        self.current_idx = -1
        self.path        = []
        self.state       = StepperState.RUNNING

    def reset(self) -> None:
        """Back to IDLE — caller must call start() again."""
        self.engine      = DijkstraEngine(self.graph)
        self.reports     = []
        self.current_idx = -1
        self.path        = []
        self.state       = StepperState.IDLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> bool:
        """Advance one step forward.  Returns False if already at the end."""
        self._require_started()
        target = self.current_idx + 1
        # if we haven't pulled this step from the engine yet, try
        if target >= len(self.reports):
            if not self._fetch_next():
                return False
        self._goto(target)
        return True

    def prev_step(self) -> bool:
        """Rewind one step.  Returns False if already at the initial state."""
        if self.current_idx < 0:
            return False
        self._goto(self.current_idx - 1)
        return True

    def goto_step(self, idx: int) -> bool:
        """Jump to a report index, pulling forward from the engine if needed."""
        self._require_started()
        while idx >= len(self.reports):
            if not self._fetch_next():
                break
        if -1 <= idx < len(self.reports):
            self._goto(idx)
            return True
        return False

    def rewind(self) -> None:
        """Jump back to the initial state."""
        self._goto(-1)

    def jump_to_end(self) -> None:
        """Run the engine to completion and display the final report."""
        self._require_started()
        while self._fetch_next():
            pass
        if self.reports:
            self._goto(len(self.reports) - 1)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    def comments(self) -> List[NodeComment]:
        """Latest "Cost: X" comment per node, as of the displayed step."""
        shown = self.current_idx + 1
        latest: Dict[int, Tuple[float, int]] = {}
        for report in self.reports[:shown]:
            for node_id, cost in report.updated_costs.items():
                latest[node_id] = (cost, report.step_number)
        return [
            NodeComment(
                node_id=node_id,
                text=f"Cost: {cost:.1f}",
                step_number=step_no,
                fresh=shown - step_no < self.comment_fade_steps,
            )
            for node_id, (cost, step_no) in sorted(latest.items())
        ]

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_report(self) -> Optional[StepReport]:
        if 0 <= self.current_idx < len(self.reports):
            return self.reports[self.current_idx]
        return None

    @property
    def total_steps_fetched(self) -> int:
        return len(self.reports)

    @property
    def is_finished(self) -> bool:
        return self.state == StepperState.FINISHED

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _require_started(self) -> None:
        if self.state == StepperState.IDLE:
            raise InvalidState("Call start() first.")

    def _fetch_next(self) -> bool:
        """Pull one StepReport from the engine into the buffer."""
        if self.engine.is_terminal:
            return False
        report = self.engine.step()
        self.reports.append(report)
        if report.terminal:
            self.state = StepperState.FINISHED
            if report.found:
                self.path = reconstruct(self.engine, self.engine.end)
                mark_final_path(self.engine, self.path)
                logger.info("path found: %s", " → ".join(map(str, self.path)))
        return True

    def _goto(self, idx: int) -> None:
        self.current_idx = idx
        self._notify(self.current_report)

    def _notify(self, report: Optional[StepReport]) -> None:
        if self.on_step and report is not None:
            self.on_step(report)
