"""
Critters - State Machine
Pull-based finite-state machine with a shared blackboard.
"""

from __future__ import annotations

import logging
import random
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from .blackboard import Blackboard, BlackboardValue

logger = logging.getLogger(__name__)


class State(ABC):
    """
    A named unit of behavior with an enter/update/exit lifecycle.

    A state never switches the machine itself. It names its successor in
    one of two ways:

    - ``exit_to_state(name)`` records a request from ``on_update`` or from
      any callback it triggered, including routines resumed several ticks
      later. Requests are buffered: each ``update()`` first arms whatever was
      recorded before it, so the machine acts on a request during its next
      update, never inside the call that made it.
    - ``get_transition()`` is the pull query the machine asks once per
      update, after ``on_update``. Subclasses override it to answer straight
      from the blackboard or a timer, falling back to the armed request.

    Attributes:
        enter_time: Clock time the state was entered, None while inactive
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._blackboard: Blackboard | None = None
        self._clock: Callable[[], float] = time.monotonic
        self.enter_time: float | None = None

        self._exit_state: str | None = None
        self._armed_exit_state: str | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def blackboard(self) -> Blackboard:
        if self._blackboard is None:
            raise RuntimeError(f"State '{self._name}' is not registered with a state machine")
        return self._blackboard

    @property
    def is_active(self) -> bool:
        return self.enter_time is not None

    @property
    def requested_transition(self) -> str | None:
        """Most recent transition request, not yet acted on."""
        return self._exit_state

    def now(self) -> float:
        """Current time on the owning machine's clock (seconds)."""
        return self._clock()

    def time_in_state(self) -> float:
        if self.enter_time is None:
            return 0.0
        return self.now() - self.enter_time

    def initialize(self, blackboard: Blackboard, clock: Callable[[], float]) -> None:
        """
        Bind the state to its machine's blackboard and clock.

        Raises:
            RuntimeError: If the state already belongs to another machine
        """
        if self._blackboard is not None and self._blackboard is not blackboard:
            raise RuntimeError(f"State '{self._name}' already belongs to another state machine")
        self._blackboard = blackboard
        self._clock = clock

    def enter(self) -> None:
        self.enter_time = self.now()
        self.on_enter()

    def exit(self) -> None:
        self.on_exit()
        self.enter_time = None
        self._exit_state = None
        self._armed_exit_state = None

    def update(self) -> None:
        self._armed_exit_state = self._exit_state
        self.on_update()

    def find_satisfied_transition(self) -> str | None:
        return self.get_transition()

    def exit_to_state(self, state_name: str) -> None:
        """Record a request to move to another state."""
        self._exit_state = state_name

    def get_transition(self) -> str | None:
        """Name of the state to move to now, or None to stay."""
        return self._armed_exit_state

    @abstractmethod
    def on_enter(self) -> None:
        pass

    @abstractmethod
    def on_exit(self) -> None:
        pass

    @abstractmethod
    def on_update(self) -> None:
        pass

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "name": self._name,
            "active": self.is_active,
            "time_in_state": round(self.time_in_state(), 2),
            "requested_transition": self._exit_state,
        }

    def __str__(self) -> str:
        return f"{type(self).__name__}({self._name})"


class TimedState(State):
    """
    State with a randomized exit deadline.

    A fresh deadline in ``[min_seconds, max_seconds]`` is drawn on every
    enter and cleared on exit.
    """

    def __init__(
        self,
        name: str,
        min_seconds: float,
        max_seconds: float,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(name)
        if min_seconds < 0 or max_seconds < min_seconds:
            raise ValueError(
                f"Invalid timer range for '{name}': [{min_seconds}, {max_seconds}]"
            )
        self._min_seconds = min_seconds
        self._max_seconds = max_seconds
        self._rng = rng or random.Random()
        self._deadline: float | None = None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def enter(self) -> None:
        self._deadline = self.now() + self._rng.uniform(self._min_seconds, self._max_seconds)
        super().enter()

    def exit(self) -> None:
        super().exit()
        self._deadline = None

    def deadline_passed(self) -> bool:
        return self._deadline is not None and self.now() > self._deadline

    def get_state(self) -> dict[str, Any]:
        state = super().get_state()
        state["remaining"] = (
            round(max(0.0, self._deadline - self.now()), 2) if self._deadline is not None else None
        )
        return state


class StateMachine:
    """
    Owns a set of named states and exactly one current state.

    Each ``update()`` runs the current state's update, then asks it for a
    transition. If it names one, the current state exits completely before
    the target enters and becomes current.

    Usage:
        machine = StateMachine(name="creature")
        machine.add_state(IdleState())
        machine.add_state(MoveState(...))
        machine.start("IdleState")

        # Once per tick
        machine.update()
    """

    def __init__(
        self,
        name: str = "machine",
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the state machine.

        Args:
            name: Label used in logs
            clock: Time source (seconds) shared with the states.
                   Defaults to time.monotonic.
        """
        self._name = name
        self._clock = clock or time.monotonic
        self._blackboard = Blackboard()
        self._states: dict[str, State] = {}
        self._current_state: State | None = None
        self._faulted = False
        self._transition_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def blackboard(self) -> Blackboard:
        return self._blackboard

    @property
    def states(self) -> dict[str, State]:
        return dict(self._states)

    @property
    def current_state(self) -> State | None:
        return self._current_state

    @property
    def current_state_name(self) -> str | None:
        return self._current_state.name if self._current_state else None

    @property
    def is_started(self) -> bool:
        return self._current_state is not None

    @property
    def is_faulted(self) -> bool:
        return self._faulted

    @property
    def transition_count(self) -> int:
        return self._transition_count

    def add_state(self, state: State) -> None:
        """
        Register a state under its name and hand it the blackboard.

        Raises:
            ValueError: If a state with the same name is already registered
        """
        if state.name in self._states:
            raise ValueError(f"State '{state.name}' is already registered in '{self._name}'")
        state.initialize(self._blackboard, self._clock)
        self._states[state.name] = state

    def start(self, state_name: str) -> None:
        """
        Enter the named state.

        Raises:
            KeyError: If no state with that name is registered
        """
        self._set_state(self._lookup(state_name))

    def set_blackboard_value(self, key: str, value: BlackboardValue) -> None:
        self._blackboard.set(key, value)

    def update(self) -> None:
        """
        Run one tick: update the current state, then apply its transition.

        Does nothing before ``start()`` or when no states are registered.

        Raises:
            KeyError: If the current state names an unregistered state
            RuntimeError: If the machine already hit a lookup or enter fault
        """
        if not self._states:
            return
        if self._faulted:
            raise RuntimeError(f"State machine '{self._name}' is faulted")
        if self._current_state is None:
            return

        self._current_state.update()

        target = self._current_state.find_satisfied_transition()
        if target is not None:
            self._set_state(self._lookup(target))

    def _lookup(self, state_name: str) -> State:
        state = self._states.get(state_name)
        if state is None:
            self._faulted = True
            logger.error(f"[{self._name}] Unknown state '{state_name}'")
            raise KeyError(f"Unknown state '{state_name}' in state machine '{self._name}'")
        return state

    def _set_state(self, state: State) -> None:
        old_state = self._current_state
        logger.info(
            f"[{self._name}] Setting state from "
            f"\"{old_state.name if old_state else None}\" to \"{state.name}\""
        )

        if old_state is not None:
            old_state.exit()
            self._current_state = None

        try:
            state.enter()
        except Exception:
            # The old state already exited, so there is nothing to fall back to
            self._faulted = True
            state.enter_time = None
            logger.error(f"[{self._name}] Entering \"{state.name}\" failed; machine is faulted")
            raise

        self._current_state = state
        self._transition_count += 1
        logger.debug(f"[{self._name}] State is now \"{state.name}\"")

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "name": self._name,
            "current_state": self.current_state_name,
            "states": list(self._states),
            "transitions": self._transition_count,
            "faulted": self._faulted,
            "blackboard": self._blackboard.get_state(),
        }

    def summary(self) -> dict[str, Any]:
        """Get a summary for logging/debugging."""
        return {
            "state": self.current_state_name,
            "transitions": self._transition_count,
            "signals": self._blackboard.keys(),
        }

    def __str__(self) -> str:
        return f"StateMachine({self._name}, current={self.current_state_name})"
