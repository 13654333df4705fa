"""Tests for the cancellable tick schedulers."""

import threading
import time

from engine.scheduler import ManualScheduler, ThreadingScheduler, TimerHandle


def test_manual_fires_in_due_order():
    sched = ManualScheduler()
    fired = []
    sched.call_later(200, lambda: fired.append("b"))
    sched.call_later(100, lambda: fired.append("a"))

    assert sched.advance(99) == 0
    assert sched.advance(1) == 1
    assert fired == ["a"]
    assert sched.advance(100) == 1
    assert fired == ["a", "b"]
    assert sched.now_ms == 200


def test_manual_fires_callbacks_scheduled_while_advancing():
    sched = ManualScheduler()
    fired = []

    def chain():
        fired.append(sched.now_ms)
        if len(fired) < 3:
            sched.call_later(50, chain)

    sched.call_later(50, chain)
    sched.advance(1000)
    assert fired == [50, 100, 150]


def test_cancelled_handle_never_fires():
    sched = ManualScheduler()
    fired = []
    handle = sched.call_later(10, lambda: fired.append(1))
    handle.cancel()
    handle.cancel()

    assert sched.advance(100) == 0
    assert not sched.run_next()
    assert fired == []
    assert sched.pending == []


def test_run_next_ignores_due_time():
    sched = ManualScheduler()
    fired = []
    sched.call_later(5000, lambda: fired.append(1))
    assert sched.run_next()
    assert fired == [1]
    assert sched.now_ms == 5000


def test_handle_fires_once():
    calls = []
    handle = TimerHandle(lambda: calls.append(1))
    assert handle.fire()
    assert not handle.fire()
    assert calls == [1]
    assert not handle.pending


def test_threading_scheduler_fires_and_cancels():
    sched = ThreadingScheduler()
    done = threading.Event()
    skipped = []

    sched.call_later(10, done.set)
    handle = sched.call_later(30, lambda: skipped.append(1))
    handle.cancel()

    assert done.wait(2.0)
    time.sleep(0.1)
    assert skipped == []
