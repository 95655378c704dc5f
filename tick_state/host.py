"""StateControlledObject - binds a TransitionStateMachine to per-frame hooks."""
from __future__ import annotations

from typing import TYPE_CHECKING

from tick_state.state import State
from tick_state.transitions import TransitionStateMachine
from tick_state.types import (
    NO_STATE,
    Callback,
    MachineNotInitializedError,
    Predicate,
    StateEvent,
    StateId,
)

if TYPE_CHECKING:
    from tick_state.loop import Loop


class StateControlledObject:
    """Base class for objects whose behavior is driven by a state machine.

    Subclasses override ``init()``, ``tick()`` and ``fixed_tick()`` and build
    their machine in ``init()``::

        class Guard(StateControlledObject):
            def init(self):
                self.init_state_machine()
                self.add_state(IDLE)
                self.add_state(ALERT)
                self.add_transition(IDLE, ALERT, self.sees_enemy)
                self.change_state(IDLE)

    The driver (normally a ``Loop``) calls ``awake()`` once, then
    ``update()`` every frame and ``fixed_update()`` every fixed step.

    ``change_state()`` is safe to call before the machine exists: the most
    recent request is kept and applied at the start of the next update.
    """

    def __init__(self) -> None:
        self._machine: TransitionStateMachine | None = None
        self._queued: StateId = NO_STATE
        self._loop: Loop | None = None

    # --- Hooks ---

    def init(self) -> None:
        """Called once from ``awake()``."""

    def tick(self) -> None:
        """Called every frame before the machine ticks."""

    def fixed_tick(self) -> None:
        """Called every fixed step before the machine's fixed tick."""

    def on_destroy(self) -> None:
        """Called when the owning loop removes this object."""

    # --- Driver entry points ---

    def awake(self) -> None:
        self.init()

    def update(self) -> None:
        self.tick()
        if self._machine is not None:
            self._apply_queued()
            self._machine.tick()

    def fixed_update(self) -> None:
        self.fixed_tick()
        if self._machine is not None:
            self._apply_queued()
            self._machine.fixed_tick()

    def _apply_queued(self) -> None:
        uid = self._queued
        if uid == NO_STATE:
            return
        self._queued = NO_STATE
        self._machine.change_state(uid)

    # --- Machine access ---

    @property
    def state_machine(self) -> TransitionStateMachine | None:
        return self._machine

    @property
    def queued_state_change(self) -> StateId:
        """Pending state UID, or ``NO_STATE`` if nothing is queued."""
        return self._queued

    @property
    def loop(self) -> Loop | None:
        return self._loop

    def init_state_machine(self) -> TransitionStateMachine:
        if self._machine is None:
            self._machine = TransitionStateMachine()
        return self._machine

    def change_state(self, uid: StateId) -> None:
        """Change now if the machine exists, otherwise queue *uid*.

        A direct change discards any older queued request.
        """
        if self._machine is None:
            self._queued = uid
            return
        self._queued = NO_STATE
        self._machine.change_state(uid)

    def cleanup(self, delay: float = 0.0) -> None:
        """Ask the owning loop to destroy this object after *delay* seconds."""
        if self._loop is None:
            raise RuntimeError(f"{type(self).__name__} is not attached to a loop")
        self._loop.destroy(self, delay)

    def _require_machine(self) -> TransitionStateMachine:
        if self._machine is None:
            raise MachineNotInitializedError(
                f"{type(self).__name__} has no state machine; call init_state_machine() first"
            )
        return self._machine

    # --- Configuration forwarding ---

    def add_state(self, state: State | StateId) -> State:
        return self._require_machine().add_state(state)

    def remove_state(self, uid: StateId) -> None:
        """Remove a state. All of its callbacks are lost."""
        self._require_machine().remove_state(uid)

    def add_to_state_callback(
        self, uid: StateId, callback: Callback, event: StateEvent,
    ) -> None:
        self._require_machine().add_to_state_callback(uid, callback, event)

    def remove_from_state_callback(
        self, uid: StateId, callback: Callback, event: StateEvent,
    ) -> None:
        self._require_machine().remove_from_state_callback(uid, callback, event)

    def set_state_callback(
        self, uid: StateId, callback: Callback | None, event: StateEvent,
    ) -> None:
        self._require_machine().set_state_callback(uid, callback, event)

    def add_transition(self, from_uid: StateId, to_uid: StateId, predicate: Predicate) -> None:
        self._require_machine().add_transition(from_uid, to_uid, predicate)

    def remove_transition(self, from_uid: StateId, to_uid: StateId) -> None:
        self._require_machine().remove_transition(from_uid, to_uid)
