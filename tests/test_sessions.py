from engine import ManualScheduler, SessionRegistry, StepperState


def test_one_stepper_per_session():
    reg = SessionRegistry(initial=[3, 1, 2])
    a = reg.get("a")
    assert reg.get("a") is a
    assert reg.get("b") is not a
    assert len(reg) == 2
    assert isinstance(a.scheduler, ManualScheduler)
    assert a.array == [3, 1, 2]


def test_find_does_not_create():
    reg = SessionRegistry()
    assert reg.find("missing") is None
    assert len(reg) == 0


def test_drop_cancels_playback():
    reg = SessionRegistry()
    s = reg.get("a")
    s.load("merge")
    s.play()
    handle = s.scheduler.pending[0]

    assert reg.drop("a")
    assert not handle.pending
    assert s.state is StepperState.IDLE
    assert reg.find("a") is None
    assert not reg.drop("a")


def test_least_recently_used_session_is_evicted():
    reg = SessionRegistry(max_sessions=2)
    a = reg.get("a")
    a.load("bubble")
    reg.get("b")
    reg.get("a")
    reg.get("c")

    assert len(reg) == 2
    assert "b" not in reg
    assert reg.find("a") is a
    assert "c" in reg


def test_evicted_stepper_is_reset():
    reg = SessionRegistry(max_sessions=1)
    a = reg.get("a")
    a.load("merge")
    a.play()
    reg.get("b")
    assert a.state is StepperState.IDLE
    assert a.scheduler.pending == []


def test_new_stepper_is_not_registered():
    reg = SessionRegistry()
    s = reg.new_stepper()
    assert isinstance(s.scheduler, ManualScheduler)
    assert len(reg) == 0
