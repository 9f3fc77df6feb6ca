"""
Critters - Creature States
Egg, idle, hungry and move states driving a creature.

Signal and timer checks without side effects answer the machine's
transition query directly, so they take effect in the same update. Checks
with side effects run in ``on_update`` and record a request that the
machine applies on its next update.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Callable

import numpy as np

from effectors.base import Environment, Presentation
from engine.scheduler import TickScheduler
from engine.state_machine import State, TimedState
from shared.constants import (
    BELL_HEARD_CUE,
    EGG_SECONDS,
    EGG_SHELL_VISUAL,
    EGG_VISUAL,
    EMOTE_VISUAL,
    EXCLAMATION_ICON,
    HATCH_CUE,
    HUNGRY,
    HUNGRY_ICON,
    HUNGRY_SECONDS,
    IDLE_SECONDS,
    LAST_BELL,
    MOVE_TARGET,
    QUESTION_MARK_ICON,
    WANDER_RADIUS,
)
from shared.geometry import Transform

from .movement import HopMover, MoveResult

logger = logging.getLogger(__name__)


class EggState(TimedState):
    """
    Creature waiting to hatch.

    Reveals the ground around the egg on enter. When the timer runs out the
    egg is swapped for the creature and its shell, and the creature goes
    idle.
    """

    def __init__(
        self,
        transform: Transform,
        environment: Environment,
        presentation: Presentation,
        creature_visual: str,
        seconds: tuple[float, float] = EGG_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(EggState.__name__, *seconds, rng=rng)
        self._transform = transform
        self._environment = environment
        self._presentation = presentation
        self._creature_visual = creature_visual

        self._presentation.set_visible(EGG_VISUAL, True)
        self._presentation.set_visible(EMOTE_VISUAL, False)
        self._presentation.set_visible(EGG_SHELL_VISUAL, False)
        self._presentation.set_visible(self._creature_visual, False)

    def on_enter(self) -> None:
        self._environment.reveal_point(self._transform.position)

    def on_exit(self) -> None:
        pass

    def on_update(self) -> None:
        if self.requested_transition is None and self.deadline_passed():
            self._hatch()
            self.exit_to_state(CreatureIdleState.__name__)

    def _hatch(self) -> None:
        self._presentation.set_visible(EGG_VISUAL, False)
        self._presentation.set_visible(self._creature_visual, True)
        self._presentation.set_visible(EGG_SHELL_VISUAL, True)
        self._presentation.play_cue(HATCH_CUE)
        logger.info(f"Hatched as {self._creature_visual}")


class CreatureIdleState(TimedState):
    """Creature sitting still until a signal arrives or it gets bored."""

    def __init__(
        self,
        seconds: tuple[float, float] = IDLE_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(CreatureIdleState.__name__, *seconds, rng=rng)

    def on_enter(self) -> None:
        pass

    def on_exit(self) -> None:
        pass

    def on_update(self) -> None:
        pass

    def get_transition(self) -> str | None:
        # A bell wins over everything; the move state consumes it
        if LAST_BELL in self.blackboard:
            return CreatureMoveState.__name__

        if HUNGRY in self.blackboard:
            return CreatureHungryState.__name__

        if self.deadline_passed():
            return CreatureMoveState.__name__

        return super().get_transition()


class CreatureHungryState(TimedState):
    """
    Creature that noticed food.

    Shows the hungry icon while active. When the timer runs out it turns
    the food position into a move target and heads there. A bell still
    takes priority.
    """

    def __init__(
        self,
        presentation: Presentation,
        seconds: tuple[float, float] = HUNGRY_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(CreatureHungryState.__name__, *seconds, rng=rng)
        self._presentation = presentation

    def on_enter(self) -> None:
        self._presentation.set_visible(HUNGRY_ICON, True)

    def on_exit(self) -> None:
        self._presentation.set_visible(HUNGRY_ICON, False)

    def on_update(self) -> None:
        if self.requested_transition is None and self.deadline_passed():
            food = self.blackboard.consume(HUNGRY)
            if food is not None:
                self.blackboard.set(MOVE_TARGET, food)
            self.exit_to_state(CreatureMoveState.__name__)

    def get_transition(self) -> str | None:
        if LAST_BELL in self.blackboard:
            return CreatureMoveState.__name__
        return super().get_transition()


class CreatureMoveState(State):
    """
    Creature hopping to a destination.

    The destination is, in order of preference: the last bell (consumed),
    an explicit move target (consumed), or a random point nearby. Either
    way it is clamped to the closest valid point. The hop routine runs on
    the scheduler and asks to go idle when it ends, whether it arrived or
    was interrupted by a new bell. Arriving at an explicit target calls
    ``on_target_reached`` with the landing position.
    """

    def __init__(
        self,
        transform: Transform,
        mover: HopMover,
        scheduler: TickScheduler,
        environment: Environment,
        presentation: Presentation,
        wander_radius: float = WANDER_RADIUS,
        rng: random.Random | None = None,
        on_target_reached: Callable[[np.ndarray], None] | None = None,
    ) -> None:
        super().__init__(CreatureMoveState.__name__)
        self._transform = transform
        self._mover = mover
        self._scheduler = scheduler
        self._environment = environment
        self._presentation = presentation
        self._wander_radius = wander_radius
        self._rng = rng or random.Random()
        self._on_target_reached = on_target_reached

        self._task: asyncio.Task[MoveResult] | None = None
        self.target: np.ndarray | None = None
        self.explicit_target = False
        self.last_result: MoveResult | None = None

    @property
    def task(self) -> asyncio.Task[MoveResult] | None:
        return self._task

    def on_enter(self) -> None:
        self.target = self._environment.closest_valid_point(self._choose_target())
        self._task = self._scheduler.spawn(
            self._move_routine(self.target, self.explicit_target),
            name=f"{self.name}:{self._scheduler.tick_count}",
        )

    def on_exit(self) -> None:
        self._presentation.set_visible(EXCLAMATION_ICON, False)
        self._presentation.set_visible(QUESTION_MARK_ICON, False)
        self._task = None

    def on_update(self) -> None:
        pass

    def should_interrupt(self) -> bool:
        """A new bell cuts the current move short."""
        return LAST_BELL in self.blackboard

    def _choose_target(self) -> np.ndarray:
        self.explicit_target = False
        bell = self.blackboard.consume(LAST_BELL)
        if bell is not None:
            # The bell supersedes any pending target
            self.blackboard.remove(MOVE_TARGET)
            self._presentation.set_visible(EXCLAMATION_ICON, True)
            self._presentation.play_cue(BELL_HEARD_CUE)
            return bell

        move_target = self.blackboard.consume(MOVE_TARGET)
        if move_target is not None:
            self.explicit_target = True
            return move_target

        self._presentation.set_visible(QUESTION_MARK_ICON, True)
        return self._wander_target()

    def _wander_target(self) -> np.ndarray:
        # Uniform point inside a disc on the ground plane
        radius = self._wander_radius * math.sqrt(self._rng.random())
        angle = self._rng.uniform(0.0, 2.0 * math.pi)
        offset = np.array([math.cos(angle) * radius, 0.0, math.sin(angle) * radius])
        return self._transform.position + offset

    async def _move_routine(self, target: np.ndarray, explicit: bool) -> MoveResult:
        try:
            result = await self._mover.move_to(self._transform, target, self.should_interrupt)
            self.last_result = result
            if result.cancelled:
                logger.debug(f"Move cancelled after {result.hops} hops")
            elif result.interrupted:
                logger.info(f"Move interrupted after {result.hops} hops")
            else:
                logger.debug(
                    f"Arrived after {result.hops} hops"
                    f"{' and a partial hop' if result.partial_hop else ''}"
                )
                if explicit and self._on_target_reached is not None:
                    self._on_target_reached(result.position)
            return result
        finally:
            self.exit_to_state(CreatureIdleState.__name__)
