"""Shared types, sentinels, and errors for the state engine."""
from __future__ import annotations

from enum import Enum
from typing import Callable

StateId = int

NO_STATE: StateId = -1
"""Reserved UID meaning "unassigned" or "no state"."""

Callback = Callable[[], None]
Predicate = Callable[[], bool]


class StateEvent(Enum):
    """Lifecycle events a state owns a callback slot for."""

    ENTER = "enter"
    EXIT = "exit"
    TICK = "tick"
    FIXED_TICK = "fixed_tick"


def check_event(event: object) -> StateEvent:
    """Return *event* unchanged, or raise ValueError if it is not a StateEvent."""
    if not isinstance(event, StateEvent):
        raise ValueError(f"Unknown state event {event!r}")
    return event


class UnknownStateError(KeyError):
    """Raised when a UID is not registered in the state machine."""

    def __init__(self, uid: StateId, message: str | None = None) -> None:
        self.uid = uid
        super().__init__(message or f"State with UID {uid} does not exist")


class DuplicateStateError(ValueError):
    """Raised when adding a state whose UID is already registered."""

    def __init__(self, uid: StateId) -> None:
        self.uid = uid
        super().__init__(f"State with UID {uid} already exists")


class NoPreviousStateError(LookupError):
    """Raised on revert before any transition has been recorded."""


class MachineNotInitializedError(RuntimeError):
    """Raised when configuring a host object before its machine exists."""
