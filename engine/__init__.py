"""
engine/
-------
Playback & recording layer.

    from engine import Stepper, Recorder, compare
"""

from engine.scheduler import ManualScheduler, Scheduler, ThreadingScheduler, TimerHandle
from engine.stepper   import (
    DEFAULT_ARRAY,
    DEFAULT_SPEED,
    MIN_DELAY_MS,
    Stepper,
    StepperState,
    TickEvent,
    delay_for_speed,
)
from engine.recorder  import Recorder, RunMetrics, ComparisonResult, compare
from engine.sessions  import SessionRegistry

__all__ = [
    "Stepper",
    "StepperState",
    "TickEvent",
    "DEFAULT_ARRAY",
    "DEFAULT_SPEED",
    "MIN_DELAY_MS",
    "delay_for_speed",
    "Scheduler",
    "ThreadingScheduler",
    "ManualScheduler",
    "TimerHandle",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "SessionRegistry",
]
