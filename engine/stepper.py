"""
stepper.py — Step-Log Replay Engine
====================================
The Stepper is the ONLY object the UI interacts with during a replay.
It owns a working copy of the array, the step log generated from it, a
cursor into that log and the play/pause state.  Every tick applies
exactly one step and reports which bars to highlight.

State machine:
    IDLE     →  load()   →  PAUSED
    PAUSED   →  play()   →  PLAYING
    PLAYING  →  pause()  →  PAUSED
    PLAYING  →  (cursor reaches end of log) → COMPLETE
    any      →  reset()  →  IDLE

Scheduling:
  The Stepper never sleeps.  While PLAYING it asks its scheduler for a
  single callback `delay_ms` ahead and keeps the handle; pause() and
  reset() cancel it.  A tick that still slips through after pause()
  sees state != PLAYING and does nothing.  The next tick is scheduled
  only after the current one (render callback included) has finished.

Thread safety:
  Public methods share one re-entrant lock, so a ThreadingScheduler
  tick and a pause() from the UI thread never interleave mid-step.
  Independent Stepper instances share nothing.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from errors import InvalidInput, MalformedStep
from algorithms import Algorithm, generate, validate_values
from algorithms.step import RawStep, Step, steps_to_dicts, validate_step
from engine.scheduler import Scheduler, ThreadingScheduler, TimerHandle
from logging_config import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_ARRAY: Tuple[int, ...] = (70, 20, 90, 10, 50, 30, 60, 80, 40)
DEFAULT_SPEED: float = 10       # slider position; higher = faster
MIN_DELAY_MS:  float = 20


def delay_for_speed(speed: float) -> float:
    """Milliseconds between ticks for a speed slider value."""
    return max(MIN_DELAY_MS, 1000 - speed * 45)


@dataclass(frozen=True)
class TickEvent:
    """What one tick did: the step at `position`, and the bars it touched."""
    position:   int
    step:       Step
    highlights: Tuple[int, ...]
    array:      Tuple[Any, ...]


RenderCallback = Callable[[List[Any], Tuple[int, ...]], None]
ErrorCallback  = Callable[[MalformedStep], None]


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state      : Current StepperState.
        algorithm  : Algorithm whose log is loaded (None until first load).
        initial    : The array reset() restores.
        source     : Snapshot the current log was generated against.
        array      : Working array, mutated one step per tick.
        steps      : The step log (Steps or their dict form); never mutated.
        cursor     : Index of the next step to apply, 0 ≤ cursor ≤ len(steps).
        speed      : Speed slider value, read at every scheduling.
        highlights : Indices touched by the last applied step.
        last_error : The MalformedStep that halted playback, if any.
        on_tick    : Optional callback(array, highlights) fired after every
                     applied step and on load / reset.  The UI re-renders here.
        on_error   : Optional callback(MalformedStep) for ticks fired by the
                     scheduler, where there is no caller to raise to.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        on_tick: Optional[RenderCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        initial: Sequence = DEFAULT_ARRAY,
        speed: float = DEFAULT_SPEED,
    ):
        self.scheduler:  Scheduler                = scheduler or ThreadingScheduler()
        self.on_tick:    Optional[RenderCallback] = on_tick
        self.on_error:   Optional[ErrorCallback]  = on_error
        self.speed:      float                    = speed

        self.initial:    List[Any]                = validate_values(initial, allow_empty=False)
        self.algorithm:  Optional[Algorithm]      = None
        self.source:     List[Any]                = list(self.initial)
        self.array:      List[Any]                = list(self.initial)
        self.steps:      Tuple[RawStep, ...]      = ()
        self.cursor:     int                      = 0
        self.state:      StepperState             = StepperState.IDLE
        self.highlights: Tuple[int, ...]          = ()
        self.last_error: Optional[MalformedStep]  = None

        self._handle: Optional[TimerHandle] = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, algorithm: Union[Algorithm, str], source: Optional[Sequence] = None) -> None:
        """
        Generate a fresh log for `algorithm` from `source`.  Without a
        source the log is built from the default array reset() restores,
        never from a half-replayed working array.
        """
        with self._lock:
            algo   = Algorithm.parse(algorithm)
            values = validate_values(self.initial if source is None else source, allow_empty=False)
            steps  = generate(algo, values)
            self._install(algo, values, steps)

    def load_log(self, algorithm: Union[Algorithm, str], source: Sequence, steps: Sequence[RawStep]) -> None:
        """
        Load a previously generated (e.g. persisted) log as-is.  Steps are
        validated one at a time when they are applied, not here.
        """
        with self._lock:
            algo   = Algorithm.parse(algorithm)
            values = validate_values(source, allow_empty=False)
            if not isinstance(steps, (list, tuple)):
                raise InvalidInput(f"Steps must be a list, got {type(steps).__name__}")
            self._install(algo, values, tuple(steps))

    def start(self, algorithm: Union[Algorithm, str, None] = None) -> None:
        """
        The "Start" button.  Regenerates the log from the default array when
        the algorithm changed or nothing is loaded, then plays.
        """
        with self._lock:
            if self.state is StepperState.PLAYING:
                return
            if algorithm is not None:
                algo = Algorithm.parse(algorithm)
            else:
                algo = self.algorithm or Algorithm.MERGE
            if algo is not self.algorithm or not self.steps:
                self.reset()
                self.load(algo)
            self.play()

    def reset(self) -> None:
        """Back to IDLE with the default array and an empty log."""
        with self._lock:
            self._cancel()
            self.source     = list(self.initial)
            self.array      = list(self.initial)
            self.steps      = ()
            self.cursor     = 0
            self.state      = StepperState.IDLE
            self.highlights = ()
            self.last_error = None
            self._render()

    def set_array(self, values: Sequence) -> None:
        """Replace the default array and reset onto it."""
        with self._lock:
            self.initial = validate_values(values, allow_empty=False)
            self.reset()

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        with self._lock:
            if self.state is not StepperState.PAUSED:
                return
            if self.cursor >= len(self.steps):
                self.state = StepperState.COMPLETE
                return
            self.state = StepperState.PLAYING
            self.last_error = None
            self._schedule()

    def pause(self) -> None:
        with self._lock:
            self._cancel()
            if self.state is StepperState.PLAYING:
                self.state = StepperState.PAUSED

    def toggle(self) -> None:
        with self._lock:
            if self.state is StepperState.PLAYING:
                self.pause()
            else:
                self.play()

    # ------------------------------------------------------------------
    # Tick  (the scheduler calls this; tests may call it directly)
    # ------------------------------------------------------------------
    def tick(self) -> Optional[TickEvent]:
        """
        Apply the step at the cursor if PLAYING.  Returns the TickEvent, or
        None when not playing.

        Raises:
            MalformedStep – the step is corrupt.  Playback is paused, the
                            cursor and array are left untouched.
        """
        with self._lock:
            if self.state is not StepperState.PLAYING:
                return None
            self._cancel()
            event = self._apply_next()
            if self.cursor >= len(self.steps):
                self.state = StepperState.COMPLETE
            else:
                self._schedule()
            return event

    def next_step(self) -> Optional[TickEvent]:
        """Manually apply one step while PAUSED.  Returns None at the end of the log."""
        with self._lock:
            if self.state is not StepperState.PAUSED:
                return None
            if self.cursor >= len(self.steps):
                self.state = StepperState.COMPLETE
                return None
            event = self._apply_next()
            if self.cursor >= len(self.steps):
                self.state = StepperState.COMPLETE
            return event

    def run_to_end(self) -> None:
        """Apply every remaining step synchronously."""
        with self._lock:
            if self.state is StepperState.IDLE:
                return
            self._cancel()
            while self.cursor < len(self.steps):
                self._apply_next()
            self.state = StepperState.COMPLETE

    def fire_next(self) -> bool:
        """
        Fire the ManualScheduler's earliest pending tick now.  The web layer
        calls this from /api/tick; it runs under the stepper's lock so it
        cannot interleave with play() / pause() scheduling.
        """
        with self._lock:
            return self.scheduler.run_next()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, speed: float) -> None:
        self.speed = speed

    @property
    def delay_ms(self) -> float:
        return delay_for_speed(self.speed)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def is_playing(self) -> bool:
        return self.state is StepperState.PLAYING

    @property
    def is_complete(self) -> bool:
        return self.state is StepperState.COMPLETE

    def export(self) -> Dict[str, Any]:
        """The {algorithm, array, steps} record the store persists."""
        with self._lock:
            if self.algorithm is None:
                raise InvalidInput("Nothing loaded. Run the visualization first.")
            return {
                "algorithm": self.algorithm.value,
                "array":     list(self.source),
                "steps":     steps_to_dicts(self.steps),
            }

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "state":       self.state.value,
                "algorithm":   self.algorithm.value if self.algorithm else None,
                "array":       list(self.array),
                "highlights":  list(self.highlights),
                "cursor":      self.cursor,
                "total_steps": len(self.steps),
                "speed":       self.speed,
                "delay_ms":    self.delay_ms,
                "error":       str(self.last_error) if self.last_error else None,
            }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _install(self, algo: Algorithm, values: List[Any], steps: Tuple[RawStep, ...]) -> None:
        # switching logs mid-play goes through reset() first
        if self.state is StepperState.PLAYING or self.steps:
            self.reset()
        self.algorithm  = algo
        self.source     = list(values)
        self.array      = list(values)
        self.steps      = steps
        self.cursor     = 0
        self.state      = StepperState.PAUSED
        self.highlights = ()
        self.last_error = None
        self._render()

    def _apply_next(self) -> TickEvent:
        position = self.cursor
        try:
            step = validate_step(self.steps[position], len(self.array))
        except MalformedStep as exc:
            self._cancel()
            if self.state is StepperState.PLAYING:
                self.state = StepperState.PAUSED
            self.last_error = exc
            raise

        self.highlights = step.apply(self.array)
        self.cursor += 1
        self._render()
        return TickEvent(position, step, self.highlights, tuple(self.array))

    def _schedule(self) -> None:
        self._handle = self.scheduler.call_later(self.delay_ms, self._on_timer)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_timer(self) -> None:
        try:
            self.tick()
        except MalformedStep as exc:
            logger.warning("Replay halted at step %d: %s", self.cursor, exc)
            if self.on_error:
                self.on_error(exc)

    def _render(self) -> None:
        if self.on_tick:
            self.on_tick(list(self.array), self.highlights)
