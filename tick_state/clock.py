"""Clock and FrameContext for the frame/fixed-step loop."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class FrameContext:
    frame_number: int
    dt: float
    fixed_dt: float
    elapsed: float
    fixed_steps: int
    request_stop: Callable[[], None]


class Clock:
    """Deterministic frame clock.

    Each ``advance()`` moves time forward by one frame of ``1 / tps`` seconds
    and returns how many fixed steps of ``1 / fixed_tps`` seconds fell due,
    capped at ``max_fixed_steps``.  Time beyond the cap is dropped.
    """

    def __init__(self, tps: int, fixed_tps: int, max_fixed_steps: int = 8) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        if fixed_tps <= 0:
            raise ValueError("fixed_tps must be positive")
        if max_fixed_steps <= 0:
            raise ValueError("max_fixed_steps must be positive")
        self._tps = tps
        self._fixed_tps = fixed_tps
        self._max_fixed_steps = max_fixed_steps
        self._dt = 1.0 / tps
        self._fixed_dt = 1.0 / fixed_tps
        self._frame_number = 0
        # Accumulated time in units of 1 / (tps * fixed_tps) to stay exact.
        self._accumulator = 0
        self._fixed_steps = 0

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def fixed_tps(self) -> int:
        return self._fixed_tps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def fixed_dt(self) -> float:
        return self._fixed_dt

    @property
    def frame_number(self) -> int:
        return self._frame_number

    @property
    def elapsed(self) -> float:
        return self._frame_number * self._dt

    def advance(self) -> int:
        self._frame_number += 1
        self._accumulator += self._fixed_tps
        steps = self._accumulator // self._tps
        if steps > self._max_fixed_steps:
            steps = self._max_fixed_steps
            self._accumulator = 0
        else:
            self._accumulator -= steps * self._tps
        self._fixed_steps = steps
        return steps

    def context(self, stop_fn: Callable[[], None]) -> FrameContext:
        return FrameContext(
            frame_number=self._frame_number,
            dt=self._dt,
            fixed_dt=self._fixed_dt,
            elapsed=self.elapsed,
            fixed_steps=self._fixed_steps,
            request_stop=stop_fn,
        )

    def reset(self, frame_number: int = 0) -> None:
        self._frame_number = frame_number
        self._accumulator = 0
        self._fixed_steps = 0
