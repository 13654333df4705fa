"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete sorting run (all Steps), then computes the
analytics metrics the UI needs for the Analytics panel and Comparison
Mode.

Usage:
    rec = Recorder()
    rec.start(algorithm="merge", values=[5, 3, 1])
    rec.run_to_completion()          # exhausts the generator
    metrics = rec.metrics            # the analytics card

Comparison Mode:
    The UI holds two Recorders (one per algorithm), runs both to
    completion on the SAME array, then calls compare(rec1, rec2) →
    ComparisonResult.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Generator, List, Optional, Sequence, Union

from algorithms import AlgoInfo, Algorithm, REGISTRY, validate_values
from algorithms.step import Step, StepType


# ---------------------------------------------------------------------------
# Metrics dataclass: what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:     str   = ""
    algo_label:   str   = ""
    size:         int   = 0          # number of elements sorted
    comparisons:  int   = 0
    swaps:        int   = 0
    overwrites:   int   = 0
    writes:       int   = 0          # array slots written: 2 per swap, 1 per overwrite
    total_steps:  int   = 0
    wall_time_ms: float = 0.0


# ---------------------------------------------------------------------------
# ComparisonResult: side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_comparisons: str = ""
    winner_writes:      str = ""
    winner_steps:       str = ""


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Full list of Steps from the run.
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.steps:   List[Step]           = []
        self.metrics: Optional[RunMetrics] = None

        self._algo_info: Optional[AlgoInfo]                   = None
        self._values:    List[Any]                            = []
        self._generator: Optional[Generator[Step, None, None]] = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algorithm: Union[Algorithm, str], values: Sequence) -> None:
        """Initialise the generator for this run."""
        info = REGISTRY[Algorithm.parse(algorithm)]
        self._algo_info = info
        self._values    = validate_values(values)
        self._generator = info.fn(self._values)
        self.steps      = []
        self.metrics    = None

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the generator, record every step, compute metrics."""
        if self._generator is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        for step in self._generator:
            self.record_step(step)
        wall_ms = (time.monotonic() - started) * 1000
        self._generator = None

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def record_step(self, step: Step) -> None:
        self.steps.append(step)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        counts = {kind: 0 for kind in StepType}
        for s in self.steps:
            counts[s.type] += 1

        return RunMetrics(
            algo_key=info.key.value if info else "",
            algo_label=info.label if info else "",
            size=len(self._values),
            comparisons=counts[StepType.COMPARE],
            swaps=counts[StepType.SWAP],
            overwrites=counts[StepType.OVERWRITE],
            writes=2 * counts[StepType.SWAP] + counts[StepType.OVERWRITE],
            total_steps=len(self.steps),
            wall_time_ms=round(wall_ms, 2),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key):
        if l_val == r_val:
            return "tie"
        return l_key if l_val < r_val else r_key

    return ComparisonResult(
        left=l,
        right=r,
        winner_comparisons=winner(l.comparisons, r.comparisons, l.algo_label, r.algo_label),
        winner_writes     =winner(l.writes, r.writes, l.algo_label, r.algo_label),
        winner_steps      =winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
    )
