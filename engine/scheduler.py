"""
scheduler.py — Cancellable Tick Scheduling
===========================================
The Stepper never sleeps or owns a thread.  It asks a scheduler to call
it back after `delay_ms` and keeps the returned TimerHandle so pause()
and reset() can cancel a tick before it fires.

Two schedulers:
  • ThreadingScheduler  – wall-clock time via threading.Timer (desktop /
                          CLI playback).
  • ManualScheduler     – a virtual clock.  Nothing fires until the
                          owner calls advance(ms) or run_next().  Tests
                          use it for determinism; the web layer uses it
                          because the browser is the clock there.
"""

import heapq
import itertools
import threading
from typing import Callable, List, Optional, Tuple


Callback = Callable[[], None]


class TimerHandle:
    """One pending callback.  cancel() is idempotent and wins over fire()."""

    def __init__(self, callback: Callback, due_ms: float = 0.0):
        self._callback = callback
        self.due_ms    = due_ms
        self.cancelled = False
        self.fired     = False
        self._lock     = threading.Lock()

    def cancel(self) -> None:
        with self._lock:
            self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def fire(self) -> bool:
        """Run the callback unless cancelled or already fired.  Returns True if it ran."""
        with self._lock:
            if not self.pending:
                return False
            self.fired = True
        self._callback()
        return True


class Scheduler:
    """Interface: call_later(delay_ms, callback) -> TimerHandle."""

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Real time
# ---------------------------------------------------------------------------
class ThreadingScheduler(Scheduler):

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = _ThreadedHandle(callback, delay_ms)
        timer = threading.Timer(delay_ms / 1000.0, handle.fire)
        timer.daemon = True
        handle.timer = timer
        timer.start()
        return handle


class _ThreadedHandle(TimerHandle):
    timer: Optional[threading.Timer] = None

    def cancel(self) -> None:
        super().cancel()
        if self.timer is not None:
            self.timer.cancel()


# ---------------------------------------------------------------------------
# Virtual time
# ---------------------------------------------------------------------------
class ManualScheduler(Scheduler):
    """
    Attributes:
        now_ms : Virtual clock, only moved by advance().
    """

    def __init__(self):
        self.now_ms: float = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle(callback, self.now_ms + max(0.0, delay_ms))
        heapq.heappush(self._queue, (handle.due_ms, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> List[TimerHandle]:
        return [h for _, _, h in sorted(self._queue) if h.pending]

    def advance(self, ms: float) -> int:
        """Move the clock forward, firing every handle that comes due.  Returns how many ran."""
        target = self.now_ms + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now_ms = max(self.now_ms, due)
            if handle.fire():
                ran += 1
        self.now_ms = target
        return ran

    def run_next(self) -> bool:
        """Fire the earliest live handle now, regardless of its due time."""
        while self._queue:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            self.now_ms = max(self.now_ms, due)
            return handle.fire()
        return False
