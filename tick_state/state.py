"""State - a UID-keyed node owning one callback slot per lifecycle event."""
from __future__ import annotations

from tick_state.slots import CallbackSlot
from tick_state.types import NO_STATE, Callback, StateEvent, StateId, check_event


class State:
    """A state the machine can be in.

    Optionally pre-populated with one callback per event::

        State(1, on_enter=open_door, on_tick=patrol)
    """

    def __init__(
        self,
        uid: StateId = NO_STATE,
        *,
        on_enter: Callback | None = None,
        on_exit: Callback | None = None,
        on_tick: Callback | None = None,
        on_fixed_tick: Callback | None = None,
    ) -> None:
        self._uid = uid
        self._slots: dict[StateEvent, CallbackSlot] = {
            StateEvent.ENTER: CallbackSlot(on_enter),
            StateEvent.EXIT: CallbackSlot(on_exit),
            StateEvent.TICK: CallbackSlot(on_tick),
            StateEvent.FIXED_TICK: CallbackSlot(on_fixed_tick),
        }

    @property
    def uid(self) -> StateId:
        return self._uid

    def __repr__(self) -> str:
        return f"State(uid={self._uid})"

    def slot(self, event: StateEvent) -> CallbackSlot:
        return self._slots[check_event(event)]

    def run_callback(self, event: StateEvent) -> None:
        self.slot(event).run()

    def add_callback(self, callback: Callback, event: StateEvent) -> None:
        self.slot(event).add(callback)

    def remove_callback(self, callback: Callback, event: StateEvent) -> None:
        self.slot(event).remove(callback)

    def set_callback(self, callback: Callback | None, event: StateEvent) -> None:
        self.slot(event).set(callback)
