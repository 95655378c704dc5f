"""Tests for Loop driving host objects."""
from __future__ import annotations

from unittest.mock import patch

import pytest

from tick_state import Loop, LoopConfig, StateControlledObject


class Recorder(StateControlledObject):
    def __init__(self, name, log):
        super().__init__()
        self.name = name
        self.log = log

    def init(self):
        self.log.append(f"{self.name}.init")

    def tick(self):
        self.log.append(f"{self.name}.tick")

    def fixed_tick(self):
        self.log.append(f"{self.name}.fixed")

    def on_destroy(self):
        self.log.append(f"{self.name}.destroy")


def test_default_config():
    loop = Loop()
    assert loop.config == LoopConfig()
    assert loop.clock.tps == 60
    assert loop.clock.fixed_tps == 50


def test_spawn_calls_awake():
    log = []
    loop = Loop()
    obj = loop.spawn(Recorder("a", log))
    assert log == ["a.init"]
    assert obj.loop is loop
    assert loop.objects == [obj]


def test_spawn_twice_raises():
    loop = Loop()
    obj = loop.spawn(StateControlledObject())
    with pytest.raises(ValueError):
        loop.spawn(obj)
    with pytest.raises(ValueError):
        Loop().spawn(obj)


def test_frame_runs_fixed_steps_then_updates():
    log = []
    loop = Loop(LoopConfig(tps=10, fixed_tps=20))
    loop.spawn(Recorder("a", log))
    loop.spawn(Recorder("b", log))
    log.clear()
    loop.step()
    assert log == ["a.fixed", "b.fixed", "a.fixed", "b.fixed", "a.tick", "b.tick"]


def test_run_n_frames_with_hooks():
    log = []
    loop = Loop(LoopConfig(tps=20, fixed_tps=20))
    loop.spawn(Recorder("a", log))
    loop.on_start(lambda ctx: log.append(("start", ctx.frame_number)))
    loop.on_stop(lambda ctx: log.append(("stop", ctx.frame_number)))
    log.clear()
    loop.run(3)
    assert log[0] == ("start", 0)
    assert log[-1] == ("stop", 3)
    assert log.count("a.tick") == 3
    assert log.count("a.fixed") == 3


def test_request_stop_ends_run():
    loop = Loop()

    class Stopper(StateControlledObject):
        def __init__(self):
            super().__init__()
            self.frames = 0

        def tick(self):
            self.frames += 1
            if self.frames == 4:
                self.loop.context().request_stop()

    stopper = loop.spawn(Stopper())
    loop.run(100)
    assert stopper.frames == 4
    assert loop.clock.frame_number == 4


def test_destroy_at_end_of_frame():
    log = []
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))

    class SelfDestruct(Recorder):
        def tick(self):
            super().tick()
            self.cleanup()

    obj = loop.spawn(SelfDestruct("a", log))
    log.clear()
    loop.step()
    assert log == ["a.fixed", "a.tick", "a.destroy"]
    assert loop.objects == []
    assert obj.loop is None
    loop.step()
    assert log == ["a.fixed", "a.tick", "a.destroy"]


def test_destroy_with_delay():
    log = []
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))
    obj = loop.spawn(Recorder("a", log))
    obj.cleanup(0.3)
    loop.run(2)
    assert obj.loop is loop
    loop.step()
    assert obj.loop is None
    assert log.count("a.tick") == 3
    assert log[-1] == "a.destroy"


def test_destroy_keeps_earliest_request():
    log = []
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))
    obj = loop.spawn(Recorder("a", log))
    obj.cleanup(0.1)
    obj.cleanup(1.0)
    loop.step()
    assert obj.loop is None


def test_failing_destroy_hook_still_removes_all_due_objects():
    log = []
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))

    class BadDestroy(Recorder):
        def on_destroy(self):
            raise RuntimeError("destroy failed")

    bad = loop.spawn(BadDestroy("bad", log))
    good = loop.spawn(Recorder("good", log))
    bad.cleanup()
    good.cleanup()
    with pytest.raises(RuntimeError, match="destroy failed"):
        loop.step()
    assert loop.objects == []
    assert bad.loop is None
    assert good.loop is None
    loop.step()
    assert log.count("good.tick") == 1


def test_destroy_hooks_run_after_all_removals():
    seen = []
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))

    class Witness(StateControlledObject):
        def on_destroy(self):
            seen.append(len(loop.objects))

    a = loop.spawn(Witness())
    b = loop.spawn(Witness())
    a.cleanup()
    b.cleanup()
    loop.step()
    assert seen == [0, 0]


def test_destroy_rejects_negative_delay_and_foreign_object():
    loop = Loop()
    obj = loop.spawn(StateControlledObject())
    with pytest.raises(ValueError):
        loop.destroy(obj, -1.0)
    with pytest.raises(ValueError):
        Loop().destroy(obj)


def test_object_exception_propagates():
    class Broken(StateControlledObject):
        def tick(self):
            raise RuntimeError("broken")

    loop = Loop()
    loop.spawn(Broken())
    with pytest.raises(RuntimeError, match="broken"):
        loop.step()


# --- Real-time pacing ---

class _FakeTime:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _stop_after(frames, cost=None):
    class Stopper(StateControlledObject):
        def __init__(self):
            super().__init__()
            self.frames = 0

        def tick(self):
            self.frames += 1
            if cost is not None:
                cost(self.frames)
            if self.frames == frames:
                self.loop.context().request_stop()

    return Stopper()


def test_run_forever_sleeps_out_each_frame():
    fake = _FakeTime()
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))
    events = []
    loop.on_start(lambda ctx: events.append("start"))
    loop.on_stop(lambda ctx: events.append("stop"))
    stopper = loop.spawn(_stop_after(3))
    with patch("tick_state.loop.time.monotonic", fake.monotonic), \
            patch("tick_state.loop.time.sleep", fake.sleep):
        loop.run_forever()
    assert stopper.frames == 3
    assert fake.sleeps == [pytest.approx(0.1), pytest.approx(0.1)]
    assert events == ["start", "stop"]


def test_run_forever_resyncs_after_slow_frame():
    fake = _FakeTime()

    def slow_first(frame):
        if frame == 1:
            fake.now += 0.25

    loop = Loop(LoopConfig(tps=10, fixed_tps=10))
    loop.spawn(_stop_after(3, slow_first))
    with patch("tick_state.loop.time.monotonic", fake.monotonic), \
            patch("tick_state.loop.time.sleep", fake.sleep):
        loop.run_forever()
    assert fake.sleeps == [pytest.approx(0.1)]


def test_run_does_not_sleep():
    fake = _FakeTime()
    loop = Loop(LoopConfig(tps=10, fixed_tps=10))
    with patch("tick_state.loop.time.sleep", fake.sleep):
        loop.run(5)
    assert fake.sleeps == []
    assert loop.clock.frame_number == 5
