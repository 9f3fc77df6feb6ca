"""
Critters - Fruit Tree
A tree that drops its fruit when shaken and slowly grows it back.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import Any, Sequence

import numpy as np

from effectors.base import Presentation
from effectors.presentation import ScopedPresentation
from engine.event_log import EventLog
from engine.scheduler import TickScheduler
from engine.state_machine import State, StateMachine, TimedState
from shared.constants import FRUIT_DROP_CUE, FRUIT_GROW_CUE, FRUIT_RESPAWN_SECONDS, SHAKEN
from shared.geometry import as_position
from shared.messages import GameEventType

logger = logging.getLogger(__name__)

DEFAULT_FRUIT_OFFSETS = (
    (0.6, 1.8, 0.0),
    (-0.5, 2.0, 0.3),
    (0.0, 2.2, -0.6),
)


class LadenState(State):
    """Tree carrying fruit. Stays here until shaken."""

    def __init__(self, tree: FruitTree) -> None:
        super().__init__(LadenState.__name__)
        self._tree = tree

    def on_enter(self) -> None:
        pass

    def on_exit(self) -> None:
        pass

    def on_update(self) -> None:
        if SHAKEN not in self.blackboard:
            return

        shaker = self.blackboard.consume(SHAKEN)
        if not self._tree.are_fruits_available:
            logger.warning(f"Tree {self._tree.id} shaken by {shaker} but has no fruit")
            return

        self._tree.drop_fruit()
        self.exit_to_state(RespawnFruitState.__name__)


class RespawnFruitState(TimedState):
    """Bare tree growing its fruit back."""

    def __init__(
        self,
        tree: FruitTree,
        seconds: tuple[float, float] = FRUIT_RESPAWN_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(RespawnFruitState.__name__, *seconds, rng=rng)
        self._tree = tree

    def on_enter(self) -> None:
        pass

    def on_exit(self) -> None:
        # Shakes while bare are ignored
        self.blackboard.remove(SHAKEN)

    def on_update(self) -> None:
        if self.requested_transition is None and self.deadline_passed():
            self._tree.regrow_fruit()
            self.exit_to_state(LadenState.__name__)


class FruitTree:
    """
    Fruit tree driven by its own state machine.

    Shaking a laden tree drops every fruit to the ground, announcing each
    one as a FOOD event, and starts the respawn timer. When it expires the
    fruit grows back where it started.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        event_log: EventLog,
        presentation: Presentation,
        position: Sequence[float] | np.ndarray,
        fruit_offsets: Sequence[Sequence[float]] = DEFAULT_FRUIT_OFFSETS,
        respawn_seconds: tuple[float, float] = FRUIT_RESPAWN_SECONDS,
        rng: random.Random | None = None,
        tree_id: str | None = None,
        ground_y: float = 0.0,
    ) -> None:
        if scheduler is None:
            raise ValueError("FruitTree requires a scheduler")
        if event_log is None:
            raise ValueError("FruitTree requires an event_log")
        if presentation is None:
            raise ValueError("FruitTree requires a presentation")
        if not fruit_offsets:
            raise ValueError("FruitTree needs at least one fruit")

        self._id = tree_id or f"tree-{uuid.uuid4().hex[:8]}"
        self._event_log = event_log
        self._presentation = ScopedPresentation(presentation, self._id)
        self._position = as_position(position)
        self._ground_y = ground_y

        self._initial_fruit = [self._position + as_position(o) for o in fruit_offsets]
        self._fruit: list[np.ndarray] = [p.copy() for p in self._initial_fruit]

        self._machine = StateMachine(name=self._id, clock=scheduler.clock)
        self._machine.add_state(LadenState(self))
        self._machine.add_state(RespawnFruitState(self, seconds=respawn_seconds, rng=rng))

        for i in range(len(self._fruit)):
            self._presentation.set_visible(self._fruit_visual(i), True)

    @property
    def id(self) -> str:
        return self._id

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def state_machine(self) -> StateMachine:
        return self._machine

    @property
    def current_state_name(self) -> str | None:
        return self._machine.current_state_name

    @property
    def fruit_count(self) -> int:
        return len(self._fruit)

    @property
    def are_fruits_available(self) -> bool:
        return len(self._fruit) > 0

    def start(self) -> None:
        self._machine.start(LadenState.__name__)

    def update(self) -> None:
        self._machine.update()

    def shake(self, shaker_id: str = "player") -> None:
        """Shake the tree; takes effect on its next update."""
        self._machine.set_blackboard_value(SHAKEN, shaker_id)

    def drop_fruit(self) -> None:
        """Drop every fruit to the ground and announce each as food."""
        for i, fruit in enumerate(self._fruit):
            landing = np.array([fruit[0], self._ground_y, fruit[2]])
            self._event_log.append(GameEventType.FOOD, landing)
            self._presentation.set_visible(self._fruit_visual(i), False)

        logger.info(f"Tree {self._id} dropped {len(self._fruit)} fruit")
        self._fruit = []
        self._presentation.play_cue(FRUIT_DROP_CUE)

    def regrow_fruit(self) -> None:
        """Grow the fruit back where it started."""
        self._fruit = [p.copy() for p in self._initial_fruit]
        for i in range(len(self._fruit)):
            self._presentation.set_visible(self._fruit_visual(i), True)

        logger.info(f"Tree {self._id} regrew {len(self._fruit)} fruit")
        self._presentation.play_cue(FRUIT_GROW_CUE)

    @staticmethod
    def _fruit_visual(index: int) -> str:
        return f"fruit_{index}"

    def get_state(self) -> dict[str, Any]:
        return {
            "id": self._id,
            "position": self._position.tolist(),
            "fruit": len(self._fruit),
            "machine": self._machine.get_state(),
        }

    def __str__(self) -> str:
        return f"FruitTree({self._id}, fruit={len(self._fruit)})"
