"""
engine/
-------
Playback & recording layer that drives the shortest-path engine.

    from engine import Stepper, Recorder
"""

from engine.stepper  import Stepper, StepperState, NodeComment
from engine.recorder import Recorder, RunMetrics, report_to_dict, finite

__all__ = [
    "Stepper",
    "StepperState",
    "NodeComment",
    "Recorder",
    "RunMetrics",
    "report_to_dict",
    "finite",
]
