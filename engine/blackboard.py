"""
Critters - Blackboard
Shared key-value signaling channel scoped to one state machine.
"""

from __future__ import annotations

from typing import Any, Iterator, Union

import numpy as np

# A blackboard value is a position, an identifier, or empty
BlackboardValue = Union[np.ndarray, str, None]


class Blackboard:
    """
    Key-value store shared by every state of one state machine.

    Keys are set by the controlling context (e.g. the creature's event
    handler) and consumed, read-then-removed, by the states that act on
    them. Absence of a key means "no signal". Writes are visible to all
    states on their very next update; nothing is buffered.

    Callers agree out-of-band on the shape stored under each key; the
    blackboard does not check types.

    Usage:
        blackboard = Blackboard()
        blackboard.set(LAST_BELL, position)

        if LAST_BELL in blackboard:
            target = blackboard.consume(LAST_BELL)
    """

    def __init__(self) -> None:
        self._values: dict[str, BlackboardValue] = {}

    def set(self, key: str, value: BlackboardValue) -> None:
        """Store a value, replacing any previous one."""
        self._values[key] = value

    def try_get(self, key: str) -> tuple[bool, BlackboardValue]:
        """
        Look up a value without removing it.

        Returns:
            (found, value); a stored empty value comes back as (True, None)
        """
        value = self._values.get(key, _MISSING)
        if value is _MISSING:
            return False, None
        return True, value

    def get(self, key: str, default: BlackboardValue = None) -> BlackboardValue:
        """Get a value without removing it, or ``default`` if absent."""
        return self._values.get(key, default)

    def contains(self, key: str) -> bool:
        """Check whether a key is present (even if it holds an empty value)."""
        return key in self._values

    def remove(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key was present
        """
        return self._values.pop(key, _MISSING) is not _MISSING

    def consume(self, key: str) -> BlackboardValue:
        """Read a value and remove it in one step. Returns None if absent."""
        return self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        state: dict[str, Any] = {}
        for key, value in self._values.items():
            if isinstance(value, np.ndarray):
                state[key] = [round(float(c), 3) for c in value]
            else:
                state[key] = value
        return state

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __str__(self) -> str:
        return f"Blackboard(keys={self.keys()})"


_MISSING = object()
