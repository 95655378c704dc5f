"""TransitionStateMachine - StateMachine with predicate-guarded edges."""
from __future__ import annotations

import logging

from tick_state.machine import StateMachine
from tick_state.state import State
from tick_state.types import Predicate, StateId

_LOG = logging.getLogger("tick_state.transitions")


class TransitionStateMachine(StateMachine):
    """Evaluates outgoing edges of the current state after every ``tick()``.

    Edges are checked in insertion order and the first predicate returning
    True wins; at most one transition fires per tick.  ``fixed_tick()`` never
    evaluates transitions.

    Edges may name states that are not registered yet.  Such an edge raises
    UnknownStateError only if its predicate passes while the destination is
    still missing.
    """

    def __init__(self, initial_state: State | None = None) -> None:
        self._transitions: dict[StateId, dict[StateId, Predicate]] = {}
        super().__init__(initial_state)

    def tick(self) -> None:
        super().tick()
        self.check_transitions()

    def add_transition(self, from_uid: StateId, to_uid: StateId, predicate: Predicate) -> None:
        """Add or overwrite the edge *from_uid* -> *to_uid*.

        Overwriting keeps the edge's original evaluation position.
        """
        self._transitions.setdefault(from_uid, {})[to_uid] = predicate

    def remove_transition(self, from_uid: StateId, to_uid: StateId) -> None:
        edges = self._transitions.get(from_uid)
        if edges is None:
            return
        edges.pop(to_uid, None)
        if not edges:
            del self._transitions[from_uid]

    def has_transition(self, from_uid: StateId, to_uid: StateId) -> bool:
        return to_uid in self._transitions.get(from_uid, ())

    def transitions_from(self, uid: StateId) -> list[StateId]:
        """Destination UIDs of *uid*'s edges, in evaluation order."""
        return list(self._transitions.get(uid, ()))

    def check_transitions(self) -> bool:
        """Fire the first passing edge out of the current state.

        Returns True if a transition fired.
        """
        current = self.current_state
        if current is None:
            return False
        edges = self._transitions.get(current.uid)
        if not edges:
            return False
        for to_uid, predicate in list(edges.items()):
            if predicate():
                _LOG.debug("Transition %d -> %d passed", current.uid, to_uid)
                self.change_state(to_uid)
                return True
        return False
