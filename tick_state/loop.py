"""Loop - drives StateControlledObjects through frames and fixed steps."""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from tick_state.clock import Clock, FrameContext
from tick_state.host import StateControlledObject

_LOG = logging.getLogger("tick_state.loop")

Hook = Callable[[FrameContext], None]


@dataclass(frozen=True)
class LoopConfig:
    """Immutable loop timing configuration.

    Attributes:
        tps: Frames per second; every frame calls ``update()`` once per object.
        fixed_tps: Fixed steps per second; drives ``fixed_update()``.
        max_fixed_steps: Cap on fixed steps run in a single frame.
    """

    tps: int = 60
    fixed_tps: int = 50
    max_fixed_steps: int = 8


class Loop:
    """Frame loop for host objects.

    A frame runs every due fixed step (``fixed_update()`` on each object),
    then ``update()`` on each object, then removes objects whose destroy
    delay has elapsed.  Exceptions raised by objects propagate out of
    ``step()``.
    """

    def __init__(self, config: LoopConfig | None = None) -> None:
        self._config = config or LoopConfig()
        self._clock = Clock(
            self._config.tps, self._config.fixed_tps, self._config.max_fixed_steps,
        )
        self._objects: list[StateControlledObject] = []
        self._pending_destroy: dict[int, tuple[int, StateControlledObject]] = {}
        self._start_hooks: list[Hook] = []
        self._stop_hooks: list[Hook] = []
        self._stop_requested: bool = False

    @property
    def config(self) -> LoopConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def objects(self) -> list[StateControlledObject]:
        return list(self._objects)

    def on_start(self, hook: Hook) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Hook) -> None:
        self._stop_hooks.append(hook)

    def _request_stop(self) -> None:
        self._stop_requested = True

    # --- Objects ---

    def spawn(self, obj: StateControlledObject) -> StateControlledObject:
        """Attach *obj* and call its ``awake()``."""
        if obj.loop is not None:
            raise ValueError(f"{type(obj).__name__} is already attached to a loop")
        obj._loop = self
        self._objects.append(obj)
        _LOG.debug("Spawned %s", type(obj).__name__)
        obj.awake()
        return obj

    def destroy(self, obj: StateControlledObject, delay: float = 0.0) -> None:
        """Remove *obj* at the end of the frame *delay* seconds from now."""
        if obj.loop is not self:
            raise ValueError(f"{type(obj).__name__} is not attached to this loop")
        if delay < 0:
            raise ValueError("delay must be non-negative")
        frames = math.ceil(round(delay * self._clock.tps, 9))
        due = self._clock.frame_number + frames
        key = id(obj)
        existing = self._pending_destroy.get(key)
        if existing is not None and existing[0] <= due:
            return
        self._pending_destroy[key] = (due, obj)

    def _process_destroys(self) -> None:
        """Remove every due object, then call their ``on_destroy()`` hooks."""
        if not self._pending_destroy:
            return
        now = self._clock.frame_number
        removed: list[StateControlledObject] = []
        for key, (due, obj) in list(self._pending_destroy.items()):
            if due > now:
                continue
            del self._pending_destroy[key]
            self._objects.remove(obj)
            obj._loop = None
            removed.append(obj)
            _LOG.debug("Destroyed %s", type(obj).__name__)
        for obj in removed:
            obj.on_destroy()

    # --- Running ---

    def _frame(self) -> None:
        fixed_steps = self._clock.advance()
        for _ in range(fixed_steps):
            for obj in list(self._objects):
                obj.fixed_update()
        for obj in list(self._objects):
            obj.update()
        self._process_destroys()

    def step(self) -> None:
        self._stop_requested = False
        self._frame()

    def _run_hooks(self, hooks: list[Hook]) -> None:
        ctx = self._clock.context(self._request_stop)
        for hook in hooks:
            hook(ctx)

    def _run(self, frames: int | None, paced: bool) -> None:
        self._stop_requested = False
        self._run_hooks(self._start_hooks)

        dt = self._clock.dt
        deadline = time.monotonic()
        count = 0
        while frames is None or count < frames:
            self._frame()
            count += 1
            if self._stop_requested:
                break
            if not paced:
                continue
            # Frames sit on a fixed grid; resync after falling a frame behind.
            deadline += dt
            now = time.monotonic()
            if deadline > now:
                time.sleep(deadline - now)
            elif now - deadline > dt:
                deadline = now

        self._run_hooks(self._stop_hooks)

    def run(self, n: int) -> None:
        """Run *n* frames back to back, bracketed by the start/stop hooks."""
        self._run(n, paced=False)

    def run_forever(self) -> None:
        """Run frames in real time at ``tps`` until a stop is requested."""
        self._run(None, paced=True)

    def context(self) -> FrameContext:
        """Context for the most recent frame; its ``request_stop`` ends ``run()``."""
        return self._clock.context(self._request_stop)
