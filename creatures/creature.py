"""
Critters - Creature
A single creature: state machine, pose, and game event handling.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import Any, Sequence

import numpy as np

from effectors.base import Environment, Presentation
from effectors.presentation import ScopedPresentation
from engine.event_log import EventLog
from engine.scheduler import TickScheduler
from engine.state_machine import StateMachine
from shared.constants import DEFAULT_CREATURE_VISUALS, EAT_CUE, HUNGRY, LAST_BELL, MAX_HUNGER
from shared.geometry import Transform
from shared.messages import GameEvent, GameEventType

from .config import CreatureConfig
from .movement import HopMover
from .states import CreatureHungryState, CreatureIdleState, CreatureMoveState, EggState

logger = logging.getLogger(__name__)


class Creature:
    """
    Controls the behavior of one little creature.

    The creature is driven by a state machine: it starts as an egg, hatches,
    then alternates between idling and hopping around. Game events are
    turned into blackboard signals:

    - BELL: the creature hops toward the bell, interrupting a move in
      progress at the next hop boundary
    - FOOD: the creature gets hungry and heads for the food

    A hunger meter fills steadily from 0 up to MAX_HUNGER. Reaching food
    it was heading for eats it and lowers the meter by ``food_value``.

    To add behavior, write a new state and register it in ``__init__``.

    Usage:
        creature = Creature(scheduler, event_log, environment, presentation)
        creature.start()

        # Once per tick, after scheduler.tick()
        creature.update()
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        event_log: EventLog,
        environment: Environment,
        presentation: Presentation,
        config: CreatureConfig | None = None,
        position: Sequence[float] | np.ndarray | None = None,
        creature_visuals: Sequence[str] = DEFAULT_CREATURE_VISUALS,
        rng: random.Random | None = None,
        creature_id: str | None = None,
    ) -> None:
        """
        Initialize the creature.

        Args:
            scheduler: Drives the creature's timed actions
            event_log: Source of game events
            environment: Terrain the creature reveals and moves on
            presentation: Visuals and cues
            config: Movement and timer settings
            position: Starting position (defaults to the origin)
            creature_visuals: Candidate looks; one is picked at random
            rng: Random source for looks, timers and wandering
            creature_id: Event log consumer id (generated if omitted)

        Raises:
            ValueError: If a collaborator is missing or the config is invalid
        """
        required = {
            "scheduler": scheduler,
            "event_log": event_log,
            "environment": environment,
            "presentation": presentation,
        }
        for name, collaborator in required.items():
            if collaborator is None:
                raise ValueError(f"Creature requires a {name}")
        if not creature_visuals:
            raise ValueError("creature_visuals is empty")

        self._config = config or CreatureConfig()
        issues = self._config.validate()
        if issues:
            raise ValueError(f"Invalid creature config: {'; '.join(issues)}")

        self._id = creature_id or f"creature-{uuid.uuid4().hex[:8]}"
        self._rng = rng or random.Random()
        self._event_log = event_log
        self._transform = Transform(position if position is not None else np.zeros(3))
        self._visual = self._rng.choice(list(creature_visuals))
        self._presentation = ScopedPresentation(presentation, self._id)

        self._clock = scheduler.clock
        self._hunger = 0.0
        self._last_update: float | None = None

        self._machine = StateMachine(name=self._id, clock=self._clock)
        self._mover = HopMover(scheduler, environment, self._config)

        self._machine.add_state(
            EggState(
                self._transform,
                environment,
                self._presentation,
                self._visual,
                seconds=self._config.egg_seconds,
                rng=self._rng,
            )
        )
        self._machine.add_state(
            CreatureIdleState(seconds=self._config.idle_seconds, rng=self._rng)
        )
        self._machine.add_state(
            CreatureHungryState(
                self._presentation,
                seconds=self._config.hungry_seconds,
                rng=self._rng,
            )
        )
        self._machine.add_state(
            CreatureMoveState(
                self._transform,
                self._mover,
                scheduler,
                environment,
                self._presentation,
                wander_radius=self._config.wander_radius,
                rng=self._rng,
                on_target_reached=self.eat,
            )
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def position(self) -> np.ndarray:
        return self._transform.position.copy()

    @property
    def visual(self) -> str:
        return self._visual

    @property
    def hunger(self) -> float:
        return self._hunger

    @property
    def state_machine(self) -> StateMachine:
        return self._machine

    @property
    def current_state_name(self) -> str | None:
        return self._machine.current_state_name

    def start(self) -> None:
        """Begin life as an egg."""
        self._last_update = self._clock()
        self._machine.start(EggState.__name__)
        logger.info(f"Creature {self._id} started at {self._transform.get_state()['position']}")

    def update(self) -> None:
        """Run one tick: update the state machine, then take in new events."""
        self._build_hunger()
        self._machine.update()

        for event in self._event_log.poll(self._id):
            self.handle_event(event)

    def _build_hunger(self) -> None:
        now = self._clock()
        if self._last_update is not None:
            elapsed = max(0.0, now - self._last_update)
            self._hunger = min(MAX_HUNGER, self._hunger + elapsed * self._config.hunger_per_second)
        self._last_update = now

    def eat(self, position: np.ndarray | None = None) -> None:
        """Eat a piece of food, lowering hunger by the configured food value."""
        before = self._hunger
        self._hunger = max(0.0, self._hunger - self._config.food_value)
        self._presentation.play_cue(EAT_CUE)
        where = f" at {np.round(position, 2).tolist()}" if position is not None else ""
        logger.info(f"Creature {self._id} ate{where}: hunger {before:.1f} -> {self._hunger:.1f}")

    def handle_event(self, event: GameEvent) -> None:
        """
        Turn a game event into a blackboard signal.

        Unknown event types are logged and dropped.
        """
        if event.event_type == GameEventType.BELL:
            self._machine.set_blackboard_value(LAST_BELL, event.position.copy())
        elif event.event_type == GameEventType.FOOD:
            self._machine.set_blackboard_value(HUNGRY, event.position.copy())
        else:
            logger.error(f"Unhandled event {event} for creature {self._id}")

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "id": self._id,
            "visual": self._visual,
            "hunger": round(self._hunger, 2),
            "transform": self._transform.get_state(),
            "machine": self._machine.get_state(),
        }

    def summary(self) -> dict[str, Any]:
        """Get a summary for logging/debugging."""
        return {
            "id": self._id,
            "state": self._machine.current_state_name,
            "hunger": round(self._hunger, 1),
            "position": self._transform.get_state()["position"],
        }

    def __str__(self) -> str:
        return f"Creature({self._id}, state={self._machine.current_state_name})"
