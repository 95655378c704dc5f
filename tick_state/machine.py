"""StateMachine - state registry with Enter/Exit switching and per-tick dispatch."""
from __future__ import annotations

import logging
from typing import Iterable

from tick_state.state import State
from tick_state.types import (
    NO_STATE,
    Callback,
    DuplicateStateError,
    NoPreviousStateError,
    StateEvent,
    StateId,
    UnknownStateError,
)

_LOG = logging.getLogger("tick_state.machine")


class StateMachine:
    """Owns states keyed by UID and tracks the current and previous state.

    ``tick()`` and ``fixed_tick()`` run the current state's matching
    callbacks; both are no-ops before any state has been entered.
    """

    def __init__(self, initial_state: State | None = None) -> None:
        self._states: dict[StateId, State] = {}
        self._current: State | None = None
        self._previous: State | None = None
        if initial_state is not None:
            self.add_state(initial_state)
            self._current = initial_state
            _LOG.debug("Entering initial state %d", initial_state.uid)
            initial_state.run_callback(StateEvent.ENTER)

    @classmethod
    def from_uids(cls, uids: Iterable[StateId], initial_uid: StateId) -> StateMachine:
        """Build a machine of empty states and enter *initial_uid*."""
        machine = cls()
        for uid in uids:
            machine.add_state(uid)
        machine.change_state(initial_uid)
        return machine

    # --- Accessors ---

    @property
    def current_state(self) -> State | None:
        return self._current

    @property
    def previous_state(self) -> State | None:
        return self._previous

    @property
    def state_ids(self) -> list[StateId]:
        return list(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, uid: object) -> bool:
        return uid in self._states

    def has_state(self, uid: StateId) -> bool:
        return uid in self._states

    def get_state(self, uid: StateId) -> State:
        try:
            return self._states[uid]
        except KeyError:
            raise UnknownStateError(uid) from None

    # --- State management ---

    def add_state(self, state: State | StateId) -> State:
        """Register *state*, or a new empty State if given a bare UID.

        Raises DuplicateStateError if the UID is already registered and
        ValueError for the reserved ``NO_STATE`` UID.
        """
        if not isinstance(state, State):
            state = State(state)
        if state.uid == NO_STATE:
            raise ValueError(f"UID {NO_STATE} is reserved for \"no state\"")
        if state.uid in self._states:
            raise DuplicateStateError(state.uid)
        self._states[state.uid] = state
        _LOG.debug("Added state %d", state.uid)
        return state

    def remove_state(self, uid: StateId) -> None:
        """Drop a state and its callbacks. Does not fire Exit."""
        state = self._states.pop(uid, None)
        if state is None:
            return
        if self._current is state:
            self._current = None
        _LOG.debug("Removed state %d", uid)

    # --- Switching ---

    def change_state(self, uid: StateId) -> None:
        """Switch to *uid*, firing Exit on the old state then Enter on the new.

        The first change only fires Enter.  Changing to the current state is
        a no-op.
        """
        target = self.get_state(uid)
        current = self._current
        if current is None:
            self._current = target
            _LOG.debug("Entering state %d", uid)
            target.run_callback(StateEvent.ENTER)
            return
        if current.uid == uid:
            return

        self._previous = current
        _LOG.debug("Changing state %d -> %d", current.uid, uid)
        current.run_callback(StateEvent.EXIT)
        self._current = target
        target.run_callback(StateEvent.ENTER)

    def revert_to_previous_state(self) -> None:
        if self._previous is None:
            raise NoPreviousStateError("No previous state to revert to")
        self.change_state(self._previous.uid)

    # --- Per-tick dispatch ---

    def tick(self) -> None:
        if self._current is not None:
            self._current.run_callback(StateEvent.TICK)

    def fixed_tick(self) -> None:
        if self._current is not None:
            self._current.run_callback(StateEvent.FIXED_TICK)

    # --- Callback editing by UID ---

    def add_to_state_callback(
        self, uid: StateId, callback: Callback, event: StateEvent,
    ) -> None:
        self.get_state(uid).add_callback(callback, event)

    def remove_from_state_callback(
        self, uid: StateId, callback: Callback, event: StateEvent,
    ) -> None:
        self.get_state(uid).remove_callback(callback, event)

    def set_state_callback(
        self, uid: StateId, callback: Callback | None, event: StateEvent,
    ) -> None:
        self.get_state(uid).set_callback(callback, event)
