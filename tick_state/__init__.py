"""tick-state - Tick-driven finite state machines with lifecycle callbacks."""
from __future__ import annotations

from tick_state.clock import Clock, FrameContext
from tick_state.host import StateControlledObject
from tick_state.loop import Loop, LoopConfig
from tick_state.machine import StateMachine
from tick_state.slots import CallbackSlot
from tick_state.state import State
from tick_state.transitions import TransitionStateMachine
from tick_state.types import (
    NO_STATE,
    DuplicateStateError,
    MachineNotInitializedError,
    NoPreviousStateError,
    StateEvent,
    StateId,
    UnknownStateError,
)

__all__ = [
    "CallbackSlot",
    "State",
    "StateEvent",
    "StateId",
    "NO_STATE",
    "StateMachine",
    "TransitionStateMachine",
    "StateControlledObject",
    "Loop",
    "LoopConfig",
    "Clock",
    "FrameContext",
    "UnknownStateError",
    "DuplicateStateError",
    "NoPreviousStateError",
    "MachineNotInitializedError",
]
