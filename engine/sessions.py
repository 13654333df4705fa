"""
sessions.py — Per-browser Stepper registry
===========================================
The web layer keeps one Stepper per browser session so that two tabs
(or two users) never share a working array.  Each Stepper gets its own
ManualScheduler: the page's setTimeout is the clock, and /api/tick
fires whatever tick the Stepper has pending.

The registry holds at most `max_sessions` Steppers.  Creating one more
evicts the least recently used session, which is reset and forgotten.
"""

import threading
from collections import OrderedDict
from typing import Optional, Sequence

from engine.scheduler import ManualScheduler
from engine.stepper import DEFAULT_ARRAY, Stepper
from logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SESSIONS = 256


class SessionRegistry:

    def __init__(self, initial: Sequence = DEFAULT_ARRAY, max_sessions: int = DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._initial = tuple(initial)
        self._steppers: "OrderedDict[str, Stepper]" = OrderedDict()
        self._lock = threading.Lock()

    def new_stepper(self) -> Stepper:
        """A Stepper wired the way registered ones are, but not registered."""
        return Stepper(scheduler=ManualScheduler(), initial=self._initial)

    def get(self, sid: str) -> Stepper:
        """Return the Stepper for `sid`, creating it on first use."""
        evicted = []
        with self._lock:
            stepper = self._steppers.get(sid)
            if stepper is not None:
                self._steppers.move_to_end(sid)
                return stepper

            stepper = self.new_stepper()
            self._steppers[sid] = stepper
            while len(self._steppers) > self.max_sessions:
                evicted.append(self._steppers.popitem(last=False))

        for old_sid, old in evicted:
            logger.info("Evicting idle session %s", old_sid)
            old.reset()
        return stepper

    def find(self, sid: Optional[str]) -> Optional[Stepper]:
        """Return the Stepper for `sid` if one exists, without creating it."""
        if not sid:
            return None
        with self._lock:
            stepper = self._steppers.get(sid)
            if stepper is not None:
                self._steppers.move_to_end(sid)
            return stepper

    def drop(self, sid: str) -> bool:
        with self._lock:
            stepper = self._steppers.pop(sid, None)
        if stepper is None:
            return False
        stepper.reset()
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._steppers)

    def __contains__(self, sid: str) -> bool:
        with self._lock:
            return sid in self._steppers
