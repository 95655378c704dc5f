"""Guard -- a host object whose behavior is a transition state machine.

Demonstrates:
- Subclassing StateControlledObject and building the machine in init()
- Requesting a state before the machine exists (deferred change)
- Predicate-guarded transitions checked after each frame's tick callbacks
- Fixed-step callbacks running on their own cadence

Run: python -m examples.guard
"""

import logging

from tick_state import Loop, LoopConfig, State, StateControlledObject, StateEvent

PATROL, CHASE, RETURN = 1, 2, 3
NAMES = {PATROL: "patrol", CHASE: "chase", RETURN: "return"}


class Guard(StateControlledObject):
    def __init__(self) -> None:
        super().__init__()
        self.frame = 0
        self.distance = 10.0

    def init(self) -> None:
        self.init_state_machine()
        for uid, name in NAMES.items():
            self.add_state(State(uid, on_enter=lambda name=name: print(f"  -> {name}")))

        # Closing distance is physics: move on the fixed cadence.
        self.set_state_callback(CHASE, self._close_in, StateEvent.FIXED_TICK)
        self.set_state_callback(RETURN, self._back_off, StateEvent.FIXED_TICK)

        self.add_transition(PATROL, CHASE, lambda: self.frame % 10 == 0)
        self.add_transition(CHASE, RETURN, lambda: self.distance <= 2.0)
        self.add_transition(RETURN, PATROL, lambda: self.distance >= 10.0)

    def _close_in(self) -> None:
        self.distance -= 1.0

    def _back_off(self) -> None:
        self.distance += 2.0

    def tick(self) -> None:
        self.frame += 1


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    print("=== Guard ===\n")

    loop = Loop(LoopConfig(tps=10, fixed_tps=20))
    guard = Guard()

    # Safe before spawn: applied on the first update.
    guard.change_state(PATROL)
    loop.spawn(guard)

    loop.run(40)

    current = guard.state_machine.current_state
    print(f"\nDone after {loop.clock.frame_number} frames, in {NAMES[current.uid]}.")


if __name__ == "__main__":
    main()
