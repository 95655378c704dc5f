"""CallbackSlot - ordered multicast list of zero-argument callbacks."""
from __future__ import annotations

from tick_state.types import Callback


class CallbackSlot:
    """Ordered set of callbacks for one lifecycle event.

    The same callable may be registered more than once; each registration
    fires independently.  Removal drops the most recent matching
    registration.
    """

    def __init__(self, callback: Callback | None = None) -> None:
        self._callbacks: list[Callback] = []
        if callback is not None:
            self._callbacks.append(callback)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"CallbackSlot({len(self._callbacks)} callbacks)"

    def callbacks(self) -> tuple[Callback, ...]:
        return tuple(self._callbacks)

    def run(self) -> None:
        """Invoke every registered callback in registration order.

        Iterates a snapshot, so callbacks that modify this slot only affect
        later runs.  Exceptions propagate to the caller.
        """
        for callback in tuple(self._callbacks):
            callback()

    def add(self, callback: Callback) -> None:
        self._callbacks.append(callback)

    def remove(self, callback: Callback) -> None:
        for i in range(len(self._callbacks) - 1, -1, -1):
            if self._callbacks[i] == callback:
                del self._callbacks[i]
                return

    def set(self, callback: Callback | None) -> None:
        """Replace all registrations with *callback* (or none)."""
        self._callbacks.clear()
        if callback is not None:
            self._callbacks.append(callback)

    def clear(self) -> None:
        self._callbacks.clear()
