"""
Critters - Game World
Owns the shared scheduler, event log and effectors, and ticks every agent.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Any, Callable, Protocol, Sequence

import numpy as np

from creatures import Creature, CreatureConfig, FruitTree
from creatures.fruit_tree import DEFAULT_FRUIT_OFFSETS
from effectors import Environment, LoggingPresentation, Presentation, TileEnvironment
from engine import EventLog, TickScheduler
from shared.geometry import as_position
from shared.messages import GameEvent, GameEventType

from .config import WorldConfig

logger = logging.getLogger(__name__)


class Agent(Protocol):
    """Anything the world updates once per tick."""

    @property
    def id(self) -> str: ...

    def update(self) -> None: ...


class GameWorld:
    """
    Host for a population of creatures and fruit trees.

    One world tick advances the scheduler (resuming hop and rotation
    routines) and then updates every agent in insertion order. An agent that
    raises during its update is logged and removed; the rest keep running.

    Usage:
        world = GameWorld()
        world.spawn_creature()
        world.add_fruit_tree((3.0, 0.0, 3.0))

        await world.run(max_ticks=600)
        await world.shutdown()
    """

    def __init__(
        self,
        config: WorldConfig | None = None,
        creature_config: CreatureConfig | None = None,
        environment: Environment | None = None,
        presentation: Presentation | None = None,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the world.

        Args:
            config: World settings (defaults if None)
            creature_config: Settings shared by every spawned creature
            environment: Terrain (a TileEnvironment over the configured bounds if None)
            presentation: Visual sink (a LoggingPresentation if None)
            clock: Time source in seconds, shared by every agent
            rng: Random source for spawning and agent behavior

        Raises:
            ValueError: If either config is invalid
        """
        self._config = config or WorldConfig()
        self._creature_config = creature_config or CreatureConfig()

        issues = self._config.validate() + self._creature_config.validate()
        if issues:
            raise ValueError(f"Invalid world config: {'; '.join(issues)}")

        self._rng = rng or random.Random()
        self._scheduler = TickScheduler(clock=clock)
        self._event_log = EventLog(capacity=self._config.event_log_capacity)
        self._environment = environment or TileEnvironment(
            bounds_min=self._config.bounds_min,
            bounds_max=self._config.bounds_max,
            reveal_radius=self._config.reveal_radius,
        )
        self._presentation = presentation or LoggingPresentation()

        self._creatures: list[Creature] = []
        self._trees: list[FruitTree] = []
        self._running = False
        self._failed_agents: list[str] = []

    @property
    def config(self) -> WorldConfig:
        return self._config

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def presentation(self) -> Presentation:
        return self._presentation

    @property
    def creatures(self) -> list[Creature]:
        return list(self._creatures)

    @property
    def trees(self) -> list[FruitTree]:
        return list(self._trees)

    @property
    def failed_agents(self) -> list[str]:
        """Ids of agents removed after raising during an update."""
        return list(self._failed_agents)

    @property
    def is_running(self) -> bool:
        return self._running

    def spawn_creature(self, position: Sequence[float] | np.ndarray | None = None) -> Creature:
        """
        Place a new egg and start it.

        Without a position the egg lands at a random point inside the
        bounds. Positions are clamped to the closest valid point.
        """
        if position is None:
            position = (
                self._rng.uniform(self._config.bounds_min[0], self._config.bounds_max[0]),
                0.0,
                self._rng.uniform(self._config.bounds_min[1], self._config.bounds_max[1]),
            )

        creature = Creature(
            self._scheduler,
            self._event_log,
            self._environment,
            self._presentation,
            config=self._creature_config,
            position=self._environment.closest_valid_point(as_position(position)),
            creature_visuals=self._config.creature_visuals,
            rng=random.Random(self._rng.random()),
        )
        creature.start()
        self._creatures.append(creature)
        return creature

    def add_fruit_tree(
        self,
        position: Sequence[float] | np.ndarray,
        fruit_offsets: Sequence[Sequence[float]] = DEFAULT_FRUIT_OFFSETS,
    ) -> FruitTree:
        """Plant a laden fruit tree."""
        tree = FruitTree(
            self._scheduler,
            self._event_log,
            self._presentation,
            position,
            fruit_offsets=fruit_offsets,
            respawn_seconds=self._config.respawn_seconds,
            rng=random.Random(self._rng.random()),
        )
        tree.start()
        self._trees.append(tree)
        return tree

    def ring_bell(self, position: Sequence[float] | np.ndarray) -> GameEvent:
        """Ring a bell; every creature hops toward it."""
        event = self._event_log.append(GameEventType.BELL, position)
        logger.info(f"Bell rang at {event.position.tolist()}")
        return event

    def drop_food(self, position: Sequence[float] | np.ndarray) -> GameEvent:
        """Put food on the ground; creatures get hungry and go for it."""
        event = self._event_log.append(GameEventType.FOOD, position)
        logger.info(f"Food dropped at {event.position.tolist()}")
        return event

    def tick(self) -> int:
        """
        Advance the world by one tick.

        Must be called with an event loop running, since agents start their
        timed routines on it.

        Returns:
            The scheduler's new tick count

        Raises:
            RuntimeError: If no event loop is running
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError as e:
            raise RuntimeError(
                "GameWorld.tick() needs a running event loop; use run() or call it from a coroutine"
            ) from e

        tick = self._scheduler.tick()

        for agent in [*self._trees, *self._creatures]:
            try:
                agent.update()
            except Exception as e:
                logger.error(f"Agent {agent.id} failed and was removed: {e}", exc_info=True)
                self._remove_agent(agent)

        return tick

    def _remove_agent(self, agent: Agent) -> None:
        self._failed_agents.append(agent.id)
        self._event_log.forget(agent.id)
        if agent in self._creatures:
            self._creatures.remove(agent)
        if agent in self._trees:
            self._trees.remove(agent)

    async def run(self, max_ticks: int | None = None) -> None:
        """
        Tick at the configured interval until stopped.

        Args:
            max_ticks: Stop after this many ticks (run forever if None)
        """
        interval = self._config.tick_ms / 1000.0
        self._running = True
        ticks = 0

        logger.info(f"World loop started ({self._config.tick_ms}ms tick)")

        while self._running and (max_ticks is None or ticks < max_ticks):
            start = time.time()

            self.tick()
            ticks += 1

            # Maintain consistent tick time; always yield so resumed routines run
            elapsed = time.time() - start
            await asyncio.sleep(max(0, interval - elapsed))

        self._running = False
        logger.info(f"World loop stopped after {ticks} ticks")

    def stop(self) -> None:
        """Ask ``run()`` to return after the current tick."""
        self._running = False

    async def shutdown(self) -> None:
        """Stop ticking and cancel every routine still in flight."""
        self.stop()
        await self._scheduler.close()
        logger.info("World shut down")

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "running": self._running,
            "scheduler": self._scheduler.get_state(),
            "event_log": self._event_log.get_state(),
            "creatures": [c.get_state() for c in self._creatures],
            "trees": [t.get_state() for t in self._trees],
            "failed_agents": list(self._failed_agents),
        }

    def summary(self) -> dict[str, Any]:
        """Get a summary for logging/debugging."""
        states: dict[str, int] = {}
        for creature in self._creatures:
            name = creature.current_state_name or "None"
            states[name] = states.get(name, 0) + 1
        return {
            "tick": self._scheduler.tick_count,
            "creatures": len(self._creatures),
            "trees": len(self._trees),
            "states": states,
            "latest_event": self._event_log.latest_id,
        }

    def __str__(self) -> str:
        return f"GameWorld(creatures={len(self._creatures)}, trees={len(self._trees)})"
